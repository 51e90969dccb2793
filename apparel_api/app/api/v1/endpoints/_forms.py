"""Helpers for multipart endpoints that carry a JSON ``data`` field."""

from typing import Type, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_form_json(model: Type[ModelT], raw: str) -> ModelT:
    """Validate the JSON text of a form field against ``model``.

    Validation problems surface as the usual 422 response.
    """
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc
