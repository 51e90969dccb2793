"""
Item endpoints.

Items are posted as ``multipart/form-data`` with the item itself as
JSON text in the ``data`` field and an optional ``image`` file.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from apparel_api.app.core.security import ensure_owner, get_current_username
from apparel_api.app.schemas.item import ItemCreate, ItemRead
from apparel_api.app.services.item_service import ItemService
from apparel_api.app.services.media_service import MediaService

from ._forms import parse_form_json


router = APIRouter()


@router.post("/post/item/{user}", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    user: str,
    data: str = Form("{}"),
    image: Optional[UploadFile] = File(None),
    current_user: str = Depends(get_current_username),
) -> ItemRead:
    """Add an item to the user's wardrobe."""
    ensure_owner(current_user, user)
    item = parse_form_json(ItemCreate, data)
    async with MediaService.stored_upload(image) as picture:
        return await ItemService.create_item(user, item, picture=picture)


@router.get("/get/items/{user}", response_model=List[ItemRead])
async def get_items(user: str, current_user: str = Depends(get_current_username)) -> List[ItemRead]:
    ensure_owner(current_user, user)
    return await ItemService.list_items(user)


@router.get("/get/oneitem/{item_id}", response_model=ItemRead)
async def get_one_item(item_id: int, current_user: str = Depends(get_current_username)) -> ItemRead:
    """Retrieve a single item by its ID.

    Raises 404 if the item does not exist and 403 if it belongs to
    another user.
    """
    return await ItemService.get_item(item_id, current_user)
