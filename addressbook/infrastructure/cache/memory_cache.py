"""In-process cache with TTL support, used when Redis is not configured."""

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from ...domain.ports.cache import CacheBackend


class InMemoryCache(CacheBackend):
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: Dict[str, Tuple[str, float]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._data[key] = (value, now + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def ping(self) -> bool:
        return True

    def _purge_expired(self, now: float) -> None:
        # Keys that are never read again would otherwise stay forever.
        expired = [key for key, (_, expires_at) in self._data.items() if now >= expires_at]
        for key in expired:
            del self._data[key]
