"""
Authentication endpoints.

``/register`` and ``/login`` answer with the session cookie set;
``/logout`` revokes the session.  Failures are reported through the
error taxonomy (409 for a taken username, 401 for bad credentials).
"""

from fastapi import APIRouter, Depends, Response, status

from apparel_api.app.core.security import end_session, get_current_username, start_session
from apparel_api.app.schemas.user import AuthResult, UserCredentials
from apparel_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
async def register(credentials: UserCredentials, response: Response) -> AuthResult:
    """Register a new user and log them in."""
    user = await UserService.register(credentials.username, credentials.password)
    start_session(response, user.username)
    return AuthResult(username=user.username)


@router.post("/login", response_model=AuthResult)
async def login(credentials: UserCredentials, response: Response) -> AuthResult:
    """Verify credentials and start a session.

    The session is only created once the password has been verified.
    """
    user = await UserService.authenticate(credentials.username, credentials.password)
    start_session(response, user.username)
    return AuthResult(username=user.username)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response, current_user: str = Depends(get_current_username)) -> None:
    end_session(response, current_user)
