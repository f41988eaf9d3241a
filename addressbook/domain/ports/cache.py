from __future__ import annotations

from typing import Optional, Protocol


class CacheBackend(Protocol):
    """Key/value store with per-entry time-to-live."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def ping(self) -> bool:
        ...
