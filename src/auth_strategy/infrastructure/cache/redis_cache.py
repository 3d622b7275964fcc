"""Redis-backed credential cache

Shares pending OAuth state across instances so a callback can complete on
any node.
"""

import logging
from typing import Optional

import redis

from .base import CredentialCache

logger = logging.getLogger(__name__)


class RedisCredentialCache(CredentialCache):
    """Credential cache on top of a synchronous Redis client.

    ``take`` relies on GETDEL (Redis 6.2+), which is atomic on the server,
    so concurrent callbacks for the same key see the value at most once.
    """

    def __init__(self, client: redis.Redis, prefix: str = "auth-strategy"):
        """Initialize the cache

        Args:
            client: Connected Redis client (decode_responses recommended)
            prefix: Namespace prepended to every key
        """
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "auth-strategy") -> "RedisCredentialCache":
        """Create a cache from a redis:// URL"""
        client = redis.Redis.from_url(url, decode_responses=True)
        logger.info(f"Redis credential cache configured (prefix: {prefix})")
        return cls(client, prefix=prefix)

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        if ttl:
            self._client.setex(self._key(key), ttl, value)
        else:
            self._client.set(self._key(key), value)

    def get(self, key: str) -> Optional[str]:
        return self._decode(self._client.get(self._key(key)))

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def take(self, key: str) -> Optional[str]:
        return self._decode(self._client.getdel(self._key(key)))

    def health_check(self) -> bool:
        """Check Redis connection health

        Returns:
            True if Redis is responsive, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    @staticmethod
    def _decode(value) -> Optional[str]:
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value
