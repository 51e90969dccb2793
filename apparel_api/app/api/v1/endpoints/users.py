"""
User profile endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from apparel_api.app.core.security import ensure_owner, get_current_username
from apparel_api.app.schemas.user import GenderUpdate, UserRead
from apparel_api.app.services.media_service import MediaService
from apparel_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/user/{user}", response_model=UserRead)
async def get_user(user: str, current_user: str = Depends(get_current_username)) -> UserRead:
    """Return the profile and the item/outfit id lists of a user."""
    ensure_owner(current_user, user)
    return await UserService.get_user(user)


@router.post("/user/details/{user}", response_model=UserRead)
async def update_details(
    user: str,
    full_name: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: str = Depends(get_current_username),
) -> UserRead:
    """Update profile details; an uploaded image becomes the profile picture."""
    ensure_owner(current_user, user)
    async with MediaService.stored_upload(image) as picture:
        return await UserService.update_details(user, full_name=full_name, picture=picture)


@router.post("/user/gender", response_model=UserRead)
async def update_gender(body: GenderUpdate, current_user: str = Depends(get_current_username)) -> UserRead:
    ensure_owner(current_user, body.username)
    return await UserService.update_gender(body.username, body.gender)
