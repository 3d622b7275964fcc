"""Authentication strategy layer.

Supports multiple protocols via pluggable strategies:
- oauth2: OAuth 2.0 grants with state tracking and PKCE
- ldap: Directory lookup with configurable stored-password schemes
- local: Username/password against the host's user store
"""

from .strategy import AuthStrategy, UserMapper
from .factory import create_strategy, get_credential_cache

__all__ = [
    "AuthStrategy",
    "UserMapper",
    "create_strategy",
    "get_credential_cache",
]
