from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from domain.models import IdentityRecord
from domain.repositories import IdentityCache


class InMemoryIdentityCache(IdentityCache):
    """
    Process-local `IdentityCache` with per-entry expiry.

    Useful for running without Redis. `clock` must be monotonic; it is
    injectable so expiry can be driven explicitly.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # display_name -> (record, expires_at)
        self._entries: Dict[str, Tuple[IdentityRecord, float]] = {}

    def get(self, display_name: str) -> Optional[IdentityRecord]:
        with self._lock:
            entry = self._entries.get(display_name)
            if entry is None:
                return None
            record, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[display_name]
                return None
            return record

    def put(self, display_name: str, record: IdentityRecord, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            self._entries[display_name] = (record, now + ttl_seconds)

    def _evict_expired(self, now: float) -> None:
        # Caller holds the lock.
        expired = [name for name, (_, expires_at) in self._entries.items() if now >= expires_at]
        for name in expired:
            del self._entries[name]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
