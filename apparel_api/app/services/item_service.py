"""
Business logic for clothing items.

Items are stored as JSON documents.  Creating one saves the document
and appends its id to the owner's item list inside one transaction.
Field filtering and broad search run over the owner's items in memory
using ``core.filters``.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from ..core import filters
from ..core.db import get_cursor, run_db
from ..core.documents import items
from ..core.errors import Forbidden, NotFound
from ..schemas.item import ItemCreate, ItemRead


logger = logging.getLogger(__name__)


def _require_user(cursor: sqlite3.Cursor, username: str) -> None:
    if not cursor.execute("SELECT id FROM users WHERE username = ?", (username,)).fetchone():
        raise NotFound(f"User {username} not found")


def _owned_items(username: str) -> List[Dict[str, Any]]:
    with get_cursor() as cursor:
        _require_user(cursor, username)
        return items.owned_by(cursor, username)


class ItemService:
    """Create, read and query a user's items."""

    @classmethod
    async def create_item(cls, username: str, data: ItemCreate, picture: Optional[str] = None) -> ItemRead:
        """Store a new item and add it to ``username``'s wardrobe.

        ``picture`` is the stored file name of an uploaded image and
        overrides any ``picture`` in ``data``.
        """
        document = data.model_dump(mode="json")
        if picture:
            document["picture"] = picture

        def _create() -> int:
            with get_cursor() as cursor:
                item_id = items.save(cursor, document)
                if not items.append_id(cursor, username, item_id):
                    raise NotFound(f"User {username} not found")
                return item_id

        item_id = await run_db(_create)
        logger.info("User %s added item %s", username, item_id)
        return ItemRead(id=item_id, **document)

    @classmethod
    async def list_items(cls, username: str) -> List[ItemRead]:
        docs = await run_db(_owned_items, username)
        return [ItemRead.model_validate(doc) for doc in docs]

    @classmethod
    async def get_item(cls, item_id: int, current_user: str) -> ItemRead:
        """Return one item, provided it belongs to ``current_user``."""

        def _get() -> tuple:
            with get_cursor() as cursor:
                return items.find_by_id(cursor, item_id), items.owner_of(cursor, item_id)

        doc, owner = await run_db(_get)
        if doc is None:
            raise NotFound(f"Item {item_id} not found")
        if owner != current_user:
            raise Forbidden()
        return ItemRead.model_validate(doc)

    @classmethod
    async def filter_items(cls, username: str, field: str, keyword: str) -> List[ItemRead]:
        """Return the user's items whose ``field`` matches ``keyword``."""
        docs = await run_db(_owned_items, username)
        matched = filters.filter_by_field(docs, field, keyword)
        logger.debug("Field filter %r=%r for %s matched %d/%d", field, keyword, username, len(matched), len(docs))
        return [ItemRead.model_validate(doc) for doc in matched]

    @classmethod
    async def search_items(cls, username: str, keyword: str) -> List[ItemRead]:
        """Broad keyword search over the user's items."""
        docs = await run_db(_owned_items, username)
        return [ItemRead.model_validate(doc) for doc in filters.search_broad(docs, keyword)]
