"""Redis-backed cache used as the cache-aside accelerator for contacts."""

import logging
from typing import Optional

import redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

from ...domain.ports.cache import CacheBackend

logger = logging.getLogger(__name__)


class RedisCache(CacheBackend):
    """Thin wrapper over a synchronous Redis client.

    Errors raised by the client propagate; callers decide whether a cache
    failure is fatal.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        client: Optional[redis.Redis] = None,
        socket_timeout: float = 2.0,
    ) -> None:
        if client is None:
            if not url:
                raise RuntimeError("Redis URL is required when no client is supplied.")
            logger.info("Initializing Redis cache client for %s", _sanitize(url))
            client = redis.Redis.from_url(
                url,
                decode_responses=True,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
                retry=Retry(ExponentialBackoff(base=0.1, cap=1), retries=2),
                health_check_interval=30,
            )
        self._client = client

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client.set(key, value, ex=ttl_seconds)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as exc:
            logger.warning("Redis health check failed: %s", exc)
            return False

    def close(self) -> None:
        self._client.close()


def _sanitize(url: str) -> str:
    if "@" not in url:
        return url
    scheme, _, rest = url.partition("://")
    return f"{scheme}://***@{rest.split('@', 1)[1]}"
