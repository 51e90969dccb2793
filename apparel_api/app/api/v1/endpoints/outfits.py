"""
Outfit endpoints.

Like items, outfits are posted as multipart forms: the outfit as JSON
text in ``data`` plus an optional ``image``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from apparel_api.app.core.security import ensure_owner, get_current_username
from apparel_api.app.schemas.outfit import OutfitCreate, OutfitRead
from apparel_api.app.services.media_service import MediaService
from apparel_api.app.services.outfit_service import OutfitService

from ._forms import parse_form_json


router = APIRouter()


@router.post("/post/outfit/{user}", response_model=OutfitRead, status_code=status.HTTP_201_CREATED)
async def create_outfit(
    user: str,
    data: str = Form("{}"),
    image: Optional[UploadFile] = File(None),
    current_user: str = Depends(get_current_username),
) -> OutfitRead:
    ensure_owner(current_user, user)
    outfit = parse_form_json(OutfitCreate, data)
    async with MediaService.stored_upload(image) as picture:
        return await OutfitService.create_outfit(user, outfit, picture=picture)


@router.get("/get/outfits/{user}", response_model=List[OutfitRead])
async def get_outfits(user: str, current_user: str = Depends(get_current_username)) -> List[OutfitRead]:
    ensure_owner(current_user, user)
    return await OutfitService.list_outfits(user)
