"""
Error taxonomy for the Apparel API.

Services raise these exceptions; ``main.create_app`` installs a single
handler that turns them into JSON responses of the form
``{"error": {"code": ..., "message": ...}}`` with the status code
declared on the exception class.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ApparelError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateUser(ApparelError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_user"
    default_message = "Username already registered"


class InvalidCredentials(ApparelError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    default_message = "Invalid username or password"


class SessionExpired(ApparelError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "session_expired"
    default_message = "Session missing or expired"


class Forbidden(ApparelError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Not allowed to access another user's wardrobe"


class NotFound(ApparelError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class PersistenceUnavailable(ApparelError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "persistence_unavailable"
    default_message = "Database unavailable"


async def apparel_error_handler(request: Request, exc: ApparelError) -> JSONResponse:
    """Render an ``ApparelError`` as a JSON error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )
