"""
Main entrypoint for the Apparel API.

This module assembles the FastAPI application, sets up logging,
installs the error handler and CORS policy, and includes the v1
router.  The ``create_app`` function builds and configures the app,
which is then instantiated at module import time as ``app``::

    uvicorn apparel_api.app.main:app --reload

On startup the database migrations are applied and the session sweeper
task is started; on shutdown the sweeper is cancelled.
"""

import asyncio
import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import ApparelError, apparel_error_handler
from .core.logging_config import setup_logging
from .core.security import session_store
from .core.sessions import run_sweeper


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    # The browser client sends the session cookie cross-origin, which
    # needs explicit origins together with allow_credentials.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApparelError, apparel_error_handler)
    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict:
        return {"status": "ok", "sessions": len(session_store)}

    @app.on_event("startup")
    async def startup_event() -> None:
        # Create the database file if needed and bring the schema up to date.
        init_db()
        app.state.sweeper = asyncio.create_task(
            run_sweeper(session_store, settings.session_sweep_interval_seconds)
        )
        logger.info("%s %s started", settings.project_name, settings.api_version)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        sweeper = getattr(app.state, "sweeper", None)
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
