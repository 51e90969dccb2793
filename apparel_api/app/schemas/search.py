"""Request body of the field filter endpoint."""

from pydantic import BaseModel, Field


class FieldFilterQuery(BaseModel):
    username: str
    field: str = Field(..., min_length=1, examples=["Purchase Location"])
    keyword: str = Field(..., examples=["wool"])
