"""
Search endpoints.

``/search/field`` filters a user's items on one declared field;
``/search/all`` runs the broad keyword search.
"""

from typing import List

from fastapi import APIRouter, Depends

from apparel_api.app.core.security import ensure_owner, get_current_username
from apparel_api.app.schemas.item import ItemRead
from apparel_api.app.schemas.search import FieldFilterQuery
from apparel_api.app.services.item_service import ItemService


router = APIRouter()


@router.post("/search/field", response_model=List[ItemRead])
async def filter_items(query: FieldFilterQuery, current_user: str = Depends(get_current_username)) -> List[ItemRead]:
    """Filter the user's items by field.

    Unknown fields yield an empty list rather than an error.
    """
    ensure_owner(current_user, query.username)
    return await ItemService.filter_items(query.username, query.field, query.keyword)


@router.get("/search/all/{user}/{keyword}", response_model=List[ItemRead])
async def search_items(user: str, keyword: str, current_user: str = Depends(get_current_username)) -> List[ItemRead]:
    ensure_owner(current_user, user)
    return await ItemService.search_items(user, keyword)
