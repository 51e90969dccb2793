"""
Public directory listing.

Returns the entry names of a directory under the public root, e.g.
``GET /filenames/img%2Ficons``.  The path may not leave that root.
"""

from typing import List

from fastapi import APIRouter

from apparel_api.app.services.media_service import MediaService


router = APIRouter()


@router.get("/filenames/{directory:path}", response_model=List[str])
async def get_filenames(directory: str) -> List[str]:
    return await MediaService.list_filenames(directory)
