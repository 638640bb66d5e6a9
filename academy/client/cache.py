"""
Per-academy session list cache.

Holds the first page of each academy's session list with the time it was
stored.  An entry is *fresh* while younger than the TTL; a stale entry is
still handed out when explicitly asked for (the fallback after a failed
refresh).
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from academy.core.config import settings
from academy.schemas.session import SessionDocument


@dataclass
class CacheEntry:
    sessions: list[SessionDocument]
    stored_at: float


class SessionCache:
    """In-memory cache keyed by academy id."""

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = settings.SESSION_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, academy_id: str, allow_stale: bool = False) -> Optional[list[SessionDocument]]:
        """Cached non-empty list for *academy_id*, or ``None``.

        With ``allow_stale`` the TTL is ignored.
        """
        entry = self._entries.get(academy_id)
        if entry is None or not entry.sessions:
            return None
        if not allow_stale and self._clock() - entry.stored_at > self.ttl_seconds:
            return None
        return list(entry.sessions)

    def set(self, academy_id: str, sessions: list[SessionDocument]) -> None:
        self._entries[academy_id] = CacheEntry(sessions=list(sessions), stored_at=self._clock())

    def clear(self, academy_id: Optional[str] = None) -> None:
        if academy_id is None:
            self._entries.clear()
        else:
            self._entries.pop(academy_id, None)
