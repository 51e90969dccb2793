"""
Uploaded images and public directory listings.

Uploads are written under ``settings.media_dir`` with a random hex
name (keeping a recognised image extension) and referenced from items,
outfits and profiles by that file name only.
"""

import asyncio
import logging
import os
import secrets
import shutil
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

from fastapi import UploadFile

from ..core.config import settings
from ..core.errors import NotFound


logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic"}


class MediaService:

    @classmethod
    async def save_upload(cls, upload: Optional[UploadFile]) -> Optional[str]:
        """Persist an uploaded file and return its stored name.

        Returns ``None`` when no file (or an empty one) was sent.
        """
        if upload is None or not upload.filename:
            return None
        suffix = Path(upload.filename).suffix.lower()
        name = secrets.token_hex(16) + (suffix if suffix in IMAGE_SUFFIXES else "")
        target_dir = Path(settings.media_dir)

        def _write() -> None:
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(target_dir / name, "wb") as out:
                shutil.copyfileobj(upload.file, out)

        await asyncio.to_thread(_write)
        logger.info("Stored upload %r as %s", upload.filename, name)
        return name

    @classmethod
    async def discard(cls, name: str) -> None:
        path = Path(settings.media_dir) / name
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.info("Removed unused upload %s", name)

    @classmethod
    @asynccontextmanager
    async def stored_upload(cls, upload: Optional[UploadFile]) -> AsyncIterator[Optional[str]]:
        """Store ``upload`` for the duration of the block.

        Yields the stored name (or ``None``).  If the block raises, the
        file is deleted again so no upload is left without a record.
        """
        name = await cls.save_upload(upload)
        try:
            yield name
        except BaseException:
            if name:
                await cls.discard(name)
            raise

    @classmethod
    async def list_filenames(cls, directory: str) -> List[str]:
        """List entries of a directory below ``settings.public_dir``.

        Paths that escape the public root are reported as missing.
        """
        root = Path(settings.public_dir).resolve()
        target = (root / directory).resolve()
        if target != root and root not in target.parents:
            logger.warning("Refused listing outside public dir: %r", directory)
            raise NotFound(f"Directory {directory} not found")
        if not target.is_dir():
            raise NotFound(f"Directory {directory} not found")
        return sorted(await asyncio.to_thread(os.listdir, target))
