"""
Business logic for outfits.

An outfit may only reference items that already belong to the same
user; the check and the insert share one transaction.
"""

import logging
from typing import List, Optional

from ..core.db import get_cursor, run_db
from ..core.documents import items, outfits
from ..core.errors import NotFound
from ..schemas.outfit import OutfitCreate, OutfitRead


logger = logging.getLogger(__name__)


class OutfitService:

    @classmethod
    async def create_outfit(cls, username: str, data: OutfitCreate, picture: Optional[str] = None) -> OutfitRead:
        document = data.model_dump(mode="json")
        if picture:
            document["picture"] = picture

        def _create() -> int:
            with get_cursor() as cursor:
                owned = set(items.owned_ids(cursor, username))
                missing = [item_id for item_id in data.items if item_id not in owned]
                if missing:
                    raise NotFound(f"Items not in wardrobe: {', '.join(map(str, missing))}")
                outfit_id = outfits.save(cursor, document)
                if not outfits.append_id(cursor, username, outfit_id):
                    raise NotFound(f"User {username} not found")
                return outfit_id

        outfit_id = await run_db(_create)
        logger.info("User %s added outfit %s", username, outfit_id)
        return OutfitRead(id=outfit_id, **document)

    @classmethod
    async def list_outfits(cls, username: str) -> List[OutfitRead]:
        def _list() -> list:
            with get_cursor() as cursor:
                if not cursor.execute("SELECT id FROM users WHERE username = ?", (username,)).fetchone():
                    raise NotFound(f"User {username} not found")
                return outfits.owned_by(cursor, username)

        docs = await run_db(_list)
        return [OutfitRead.model_validate(doc) for doc in docs]
