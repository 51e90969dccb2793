"""
Security helpers for password hashing and cookie sessions.

Passwords are hashed with PBKDF2‑HMAC‑SHA512: a 64‑byte random salt
and a 64‑byte derived key, both stored base64 encoded alongside the
iteration count.  Verification recomputes the key and compares it in
constant time.

A successful login or registration creates an entry in the process
wide ``session_store`` and sets the ``login`` cookie, whose value is
the base64url encoded JSON object ``{"username": ..., "key": ...}``.
``get_current_username`` is the FastAPI dependency that validates
that cookie on protected routes.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import os
from typing import Optional, Tuple

from fastapi import Request, Response

from .config import settings
from .errors import Forbidden, SessionExpired
from .sessions import SessionStore


logger = logging.getLogger(__name__)

SALT_BYTES = 64
KEY_BYTES = 64
DIGEST = "sha512"


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def derive_key(password: str, salt: str, iterations: int) -> str:
    """Return the base64 PBKDF2‑HMAC‑SHA512 key of ``password``."""
    dk = hashlib.pbkdf2_hmac(
        DIGEST, password.encode("utf-8"), salt.encode("utf-8"), iterations, dklen=KEY_BYTES
    )
    return base64.b64encode(dk).decode("ascii")


def hash_password(password: str, iterations: Optional[int] = None) -> Tuple[str, str, int]:
    """Hash a password with a fresh random salt.

    Returns
    -------
    tuple
        ``(salt, hash, iterations)``; salt and hash are base64 strings.
    """
    iterations = iterations or settings.password_iterations
    salt = base64.b64encode(os.urandom(SALT_BYTES)).decode("ascii")
    return salt, derive_key(password, salt, iterations), iterations


def verify_password(password: str, salt: str, stored_hash: str, iterations: int) -> bool:
    """Recompute the key for ``password`` and compare in constant time."""
    candidate = derive_key(password, salt, iterations)
    return hmac.compare_digest(candidate.encode("ascii"), stored_hash.encode("ascii"))


session_store = SessionStore(
    ttl=settings.session_ttl_seconds,
    max_entries=settings.session_max_entries,
)


def encode_session_cookie(username: str, key: str) -> str:
    payload = json.dumps({"username": username, "key": key}, separators=(",", ":"))
    return _b64_url_encode(payload.encode("utf-8"))


def decode_session_cookie(value: str) -> Optional[Tuple[str, str]]:
    """Return ``(username, key)`` from a cookie value, or ``None`` if malformed."""
    try:
        data = json.loads(_b64_url_decode(value).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    username, key = data.get("username"), data.get("key")
    if not isinstance(username, str) or not isinstance(key, str):
        return None
    return username, key


def start_session(response: Response, username: str) -> None:
    """Create a session for ``username`` and attach the session cookie."""
    key = session_store.create(username)
    response.set_cookie(
        settings.session_cookie_name,
        encode_session_cookie(username, key),
        max_age=settings.session_cookie_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    logger.debug("Session started for %s", username)


def end_session(response: Response, username: str) -> None:
    session_store.revoke(username)
    response.delete_cookie(settings.session_cookie_name)


async def get_current_username(request: Request) -> str:
    """Dependency returning the username of a valid session cookie.

    Runs on the event loop; ``session_store`` is never touched from
    worker threads.

    Raises ``SessionExpired`` if the cookie is missing, malformed, or
    does not match a live session.
    """
    raw = request.cookies.get(settings.session_cookie_name)
    if not raw:
        raise SessionExpired()
    decoded = decode_session_cookie(raw)
    if decoded is None:
        raise SessionExpired("Malformed session cookie")
    username, key = decoded
    if not session_store.validate(username, key):
        logger.info("Rejected session cookie for %s", username)
        raise SessionExpired()
    return username


def ensure_owner(current_user: str, username: str) -> None:
    """Raise ``Forbidden`` unless the session user is ``username``."""
    if current_user != username:
        raise Forbidden()
