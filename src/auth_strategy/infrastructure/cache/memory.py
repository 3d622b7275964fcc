"""In-process credential cache

WARNING: Only works for single-instance deployments. Use the Redis cache
when callbacks may land on a different process than the redirect.
"""

import logging
import threading
import time
from typing import Optional

from .base import CredentialCache

logger = logging.getLogger(__name__)


class MemoryCredentialCache(CredentialCache):
    """Thread-safe dict-backed cache with per-entry expiry"""

    def __init__(self):
        self._entries: dict[str, tuple[str, Optional[float]]] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        now = time.monotonic()
        expires_at = now + ttl if ttl else None
        with self._lock:
            self._sweep(now)
            self._entries[key] = (value, expires_at)
        logger.debug(f"Cached key {key} (TTL: {ttl}s)")

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._live_value(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def take(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._live_value(key)
            self._entries.pop(key, None)
            return value

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock; abandoned logins never get read again
        expired = [k for k, (_, expires_at) in self._entries.items() if expires_at is not None and expires_at <= now]
        for key in expired:
            del self._entries[key]

    def _live_value(self, key: str) -> Optional[str]:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._entries[key]
            return None
        return value
