"""
Business logic for users.

Registration stores a PBKDF2 salt and hash, never the password.
Authentication recomputes the hash and compares it in constant time.
Profile updates touch single columns with one ``UPDATE`` statement, so
concurrent requests for the same user cannot lose each other's writes.
"""

import logging
import sqlite3
from typing import Optional

from ..core import documents
from ..core.db import get_cursor, run_db
from ..core.errors import DuplicateUser, InvalidCredentials, NotFound
from ..core.security import hash_password, verify_password
from ..schemas.user import UserRead


logger = logging.getLogger(__name__)


def _read_user(cursor: sqlite3.Cursor, username: str) -> UserRead:
    row = cursor.execute(
        "SELECT username, gender, full_name, picture FROM users WHERE username = ?",
        (username,),
    ).fetchone()
    if not row:
        raise NotFound(f"User {username} not found")
    return UserRead(
        username=row["username"],
        gender=row["gender"],
        full_name=row["full_name"],
        picture=row["picture"],
        items=documents.items.owned_ids(cursor, username),
        outfits=documents.outfits.owned_ids(cursor, username),
    )


def _update_columns(username: str, updates: dict) -> UserRead:
    with get_cursor() as cursor:
        if updates:
            assignments = ", ".join(f"{column} = ?" for column in updates)
            cursor.execute(
                f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE username = ?",
                (*updates.values(), username),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"User {username} not found")
        return _read_user(cursor, username)


class UserService:
    """Registration, authentication and profile details."""

    @classmethod
    async def register(cls, username: str, password: str) -> UserRead:
        """Create a new user.

        Raises ``DuplicateUser`` if the username is already taken.
        """

        def _register() -> UserRead:
            with get_cursor() as cursor:
                existing = cursor.execute(
                    "SELECT id FROM users WHERE username = ?", (username,)
                ).fetchone()
                if existing:
                    raise DuplicateUser()
                salt, hashed, iterations = hash_password(password)
                try:
                    cursor.execute(
                        "INSERT INTO users (username, salt, hash, iterations) VALUES (?, ?, ?, ?)",
                        (username, salt, hashed, iterations),
                    )
                except sqlite3.IntegrityError as exc:
                    # Lost a race with a concurrent registration.
                    raise DuplicateUser() from exc
                return _read_user(cursor, username)

        user = await run_db(_register)
        logger.info("Registered user %s", username)
        return user

    @classmethod
    async def authenticate(cls, username: str, password: str) -> UserRead:
        """Verify a username/password pair.

        Raises ``InvalidCredentials`` for an unknown user or a wrong
        password alike.
        """

        def _authenticate() -> UserRead:
            with get_cursor() as cursor:
                row = cursor.execute(
                    "SELECT salt, hash, iterations FROM users WHERE username = ?",
                    (username,),
                ).fetchone()
                if not row or not verify_password(password, row["salt"], row["hash"], row["iterations"]):
                    raise InvalidCredentials()
                return _read_user(cursor, username)

        try:
            return await run_db(_authenticate)
        except InvalidCredentials:
            logger.info("Failed login for %s", username)
            raise

    @classmethod
    async def get_user(cls, username: str) -> UserRead:
        def _get() -> UserRead:
            with get_cursor() as cursor:
                return _read_user(cursor, username)

        return await run_db(_get)

    @classmethod
    async def update_gender(cls, username: str, gender: str) -> UserRead:
        return await run_db(_update_columns, username, {"gender": gender})

    @classmethod
    async def update_details(
        cls,
        username: str,
        full_name: Optional[str] = None,
        picture: Optional[str] = None,
    ) -> UserRead:
        """Update the optional profile fields that were supplied."""
        updates = {}
        if full_name is not None:
            updates["full_name"] = full_name
        if picture is not None:
            updates["picture"] = picture
        user = await run_db(_update_columns, username, updates)
        logger.info("Updated details of %s: %s", username, ", ".join(updates) or "nothing")
        return user
