"""Strategy and credential cache factory.

Selects the credential cache backend from settings and builds the
strategy for a protocol name.
"""

import logging
from typing import Optional

from auth_strategy.config.settings import Settings, get_settings
from auth_strategy.infrastructure.cache import CredentialCache, MemoryCredentialCache, RedisCredentialCache

from .strategy import AuthStrategy

logger = logging.getLogger(__name__)

# Global cache instance (initialized on first call)
_cache_instance: Optional[CredentialCache] = None


def get_credential_cache(settings: Optional[Settings] = None) -> CredentialCache:
    """Get the configured credential cache instance.

    Backend is selected via AUTH_STRATEGY_CACHE_BACKEND:
    - memory: In-process cache (single instance only, default)
    - redis: Shared cache at AUTH_STRATEGY_REDIS_URL

    Returns:
        Configured CredentialCache instance
    """
    global _cache_instance

    if _cache_instance is not None:
        return _cache_instance

    settings = settings or get_settings()
    logger.info(f"Initializing credential cache: {settings.cache_backend}")

    if settings.cache_backend == "redis":
        _cache_instance = RedisCredentialCache.from_url(settings.redis_url, prefix=settings.cache_key_prefix)
    else:
        _cache_instance = MemoryCredentialCache()

    return _cache_instance


def reset_credential_cache() -> None:
    """Reset the global cache instance (for testing)."""
    global _cache_instance
    _cache_instance = None


def create_strategy(protocol: str, **collaborators) -> AuthStrategy:
    """Build the strategy for a protocol.

    Args:
        protocol: ``oauth2``, ``ldap`` or ``local``
        **collaborators: Constructor arguments of the strategy
            (oauth2: user_mapper, cache=None, http_client=None;
            ldap: directory; local: user_store)

    Raises:
        ValueError: If the protocol is unknown
    """
    mode = protocol.lower()

    if mode == "oauth2":
        from .oauth2 import OAuth2Strategy
        if collaborators.get("cache") is None:
            collaborators["cache"] = get_credential_cache()
        strategy = OAuth2Strategy(**collaborators)

    elif mode == "ldap":
        from .ldap import LdapStrategy
        strategy = LdapStrategy(**collaborators)

    elif mode == "local":
        from .local import LocalStrategy
        strategy = LocalStrategy(**collaborators)

    else:
        raise ValueError(
            f"Unknown authentication protocol: {protocol}. "
            f"Valid options: oauth2, ldap, local"
        )

    logger.info(f"Auth strategy initialized: {strategy.__class__.__name__}")
    return strategy
