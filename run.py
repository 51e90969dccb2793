"""Entry point for the Apparel API.

Serves ``apparel_api.app.main:app`` with Uvicorn.  Host and port are
read from the environment variables ``APP_HOST`` and ``APP_PORT``
(defaults ``127.0.0.1`` and ``5000``, where the browser client expects
the API during development).  Everything else is configured through
the variables documented in ``apparel_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from apparel_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    host = os.getenv("APP_HOST", "127.0.0.1")
    port = int(os.getenv("APP_PORT", "5000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    logging.getLogger(__name__).info("Listening on %s:%s", host, port)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
