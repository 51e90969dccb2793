"""
Top‑level router for version 1 of the API.

This router aggregates the domain‑specific routers.  The endpoint
paths are kept exactly as the browser client calls them (``/login``,
``/get/items/{user}``, ...), so no per-domain prefix is applied here.
"""

from fastapi import APIRouter

from .endpoints import (
    auth,
    files,
    items,
    outfits,
    search,
    users,
)

router = APIRouter()

router.include_router(auth.router, tags=["auth"])
router.include_router(items.router, tags=["items"])
router.include_router(outfits.router, tags=["outfits"])
router.include_router(users.router, tags=["users"])
router.include_router(search.router, tags=["search"])
router.include_router(files.router, tags=["files"])
