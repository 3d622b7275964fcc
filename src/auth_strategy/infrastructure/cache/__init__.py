"""Credential cache implementations"""

from .base import CredentialCache
from .memory import MemoryCredentialCache
from .redis_cache import RedisCredentialCache

__all__ = [
    "CredentialCache",
    "MemoryCredentialCache",
    "RedisCredentialCache",
]
