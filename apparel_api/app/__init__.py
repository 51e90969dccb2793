"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (users, items, outfits, search) exposes a
router defined in ``api/v1/endpoints``; shared machinery such as the
session store, the filter engine and the persistence gateway lives in
``core``.
"""

from .main import app  # noqa: F401
