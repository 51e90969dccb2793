"""
In-memory session store.

A session entry maps a username to a random session key and the time
of its last successful use.  Entries live for ``ttl`` seconds after
their last activity; expired entries are purged on lookup and by a
periodic sweep (``run_sweeper``).  The store is bounded: once it holds
``max_entries`` sessions, creating another evicts the least recently
used one.

Times come from ``time.monotonic`` unless a clock is injected, so wall
clock adjustments never extend or cut short a session.  The store is
only touched from the event loop thread and needs no locking.
"""

import asyncio
import hmac
import logging
import secrets
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional


logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    key: str
    last_activity: float


class SessionStore:
    """Bounded, TTL-indexed mapping of username to session key."""

    def __init__(
        self,
        ttl: float = 20.0,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self.clock = clock
        # Ordered oldest activity first; move_to_end() on every touch.
        self._entries: "OrderedDict[str, SessionEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, username: object) -> bool:
        return username in self._entries

    def _expired(self, entry: SessionEntry, now: float) -> bool:
        return now - entry.last_activity >= self.ttl

    def create(self, username: str) -> str:
        """Start a session for ``username`` and return its key.

        Any earlier session for the same user is replaced.
        """
        key = secrets.token_urlsafe(32)
        self._entries.pop(username, None)
        while len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.warning("Session store full, evicted session for %s", evicted)
        self._entries[username] = SessionEntry(key=key, last_activity=self.clock())
        return key

    def validate(self, username: str, key: str) -> bool:
        """Check ``key`` against the live session of ``username``.

        Expired entries are removed before comparison.  A match
        refreshes the entry's last activity.
        """
        entry = self._entries.get(username)
        if entry is None:
            return False
        now = self.clock()
        if self._expired(entry, now):
            del self._entries[username]
            return False
        if not hmac.compare_digest(entry.key.encode("utf-8"), str(key).encode("utf-8")):
            return False
        entry.last_activity = now
        self._entries.move_to_end(username)
        return True

    def revoke(self, username: str) -> bool:
        return self._entries.pop(username, None) is not None

    def sweep(self, now: Optional[float] = None) -> int:
        """Remove every expired entry and return how many were removed."""
        if now is None:
            now = self.clock()
        removed = 0
        # Scan a snapshot; entries may be purged or replaced meanwhile.
        for name, entry in list(self._entries.items()):
            if self._expired(entry, now) and self._entries.get(name) is entry:
                del self._entries[name]
                removed += 1
        if removed:
            logger.debug("Swept %d expired sessions", removed)
        return removed

    def clear(self) -> None:
        self._entries.clear()


async def run_sweeper(store: SessionStore, interval: float) -> None:
    """Sweep ``store`` every ``interval`` seconds until cancelled.

    A failing sweep is logged and retried on the next tick.
    """
    logger.info("Session sweeper started (ttl=%ss, interval=%ss)", store.ttl, interval)
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                store.sweep()
            except Exception:
                logger.exception("Session sweep failed")
    except asyncio.CancelledError:
        logger.info("Session sweeper stopped")
        raise
