"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and ``run_db``, which executes blocking database work in
a worker thread under a hard timeout so that no request can hang on a
slow or locked database.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import asyncio
import logging
import os
import sqlite3
import time
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, TypeVar

from .config import settings
from .errors import PersistenceUnavailable


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Monotonic time by which the current ``run_db`` call must finish.
# ``asyncio.to_thread`` copies it into the worker thread.
_deadline: ContextVar[Optional[float]] = ContextVar("db_deadline", default=None)

# SQLite VM instructions between deadline checks.
PROGRESS_STEPS = 1000


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # apparel_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection waits up to ``settings.db_timeout_seconds`` for a
    competing writer to release its lock and returns rows as
    dict‑like objects keyed by column name.
    """
    db_path = get_database_path()
    conn = sqlite3.connect(db_path, timeout=settings.db_timeout_seconds)
    conn.row_factory = sqlite3.Row
    # Foreign key support is off by default in SQLite and must be
    # enabled per connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


class DeadlineExceeded(sqlite3.OperationalError):
    """The ``run_db`` deadline passed before the transaction committed."""


def _past_deadline(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor inside a transaction.

    Commits when the block exits normally, rolls back when it raises,
    and always closes the connection.  Inside ``run_db`` the caller's
    deadline also applies: running statements are interrupted once it
    passes, and a block that finishes late is rolled back instead of
    committed.
    """
    deadline = _deadline.get()
    conn = get_connection()
    if deadline is not None:
        conn.set_progress_handler(lambda: int(_past_deadline(deadline)), PROGRESS_STEPS)
    try:
        yield conn.cursor()
        if _past_deadline(deadline):
            raise DeadlineExceeded("Transaction finished after its deadline")
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


async def run_db(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run blocking database work off the event loop with a timeout.

    ``sqlite3`` failures and timeouts are logged and re-raised as
    ``PersistenceUnavailable``; any other exception (for instance a
    domain error raised by ``func``) propagates unchanged.  The worker
    thread outlives a timeout, so every ``get_cursor`` block it opens
    rolls back once the deadline has passed.
    """
    timeout = settings.db_timeout_seconds
    token = _deadline.set(time.monotonic() + timeout)
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.error("Database call %s exceeded %.1fs", getattr(func, "__name__", func), timeout)
        raise PersistenceUnavailable("Database call timed out") from exc
    except sqlite3.Error as exc:
        logger.exception("Database call %s failed", getattr(func, "__name__", func))
        raise PersistenceUnavailable() from exc
    finally:
        _deadline.reset(token)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: users, item/outfit documents and ownership lists
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            salt TEXT NOT NULL,
            hash TEXT NOT NULL,
            iterations INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- Items and outfits are stored as JSON documents; filters use
        -- json_extract() on the document column.
        CREATE TABLE IF NOT EXISTS items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            document TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS outfits (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            document TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- A user's item and outfit identifier lists.  Appending is a
        -- single INSERT, ordered by the link row id.
        CREATE TABLE IF NOT EXISTS user_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            item_id INTEGER NOT NULL UNIQUE,
            FOREIGN KEY(user_id) REFERENCES users(id),
            FOREIGN KEY(item_id) REFERENCES items(id)
        );

        CREATE TABLE IF NOT EXISTS user_outfits (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            outfit_id INTEGER NOT NULL UNIQUE,
            FOREIGN KEY(user_id) REFERENCES users(id),
            FOREIGN KEY(outfit_id) REFERENCES outfits(id)
        );

        CREATE INDEX IF NOT EXISTS idx_user_items_user_id ON user_items(user_id);
        CREATE INDEX IF NOT EXISTS idx_user_outfits_user_id ON user_outfits(user_id);
        """,
    ),
    # Migration 2: profile details
    (
        2,
        """
        ALTER TABLE users ADD COLUMN gender TEXT;
        ALTER TABLE users ADD COLUMN full_name TEXT;
        ALTER TABLE users ADD COLUMN picture TEXT;
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new entries of
    ``MIGRATIONS``.  When adding a migration, append it with an
    incremented version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying database migration %d", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
