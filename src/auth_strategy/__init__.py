"""Embeddable authentication strategies: OAuth 2.0, LDAP and local credentials."""

from auth_strategy.core import AuthStrategy, UserMapper, create_strategy, get_credential_cache
from auth_strategy.core.ldap import LdapStrategy, get_password_matcher
from auth_strategy.core.local import LocalStrategy
from auth_strategy.core.oauth2 import OAuth2Strategy
from auth_strategy.domain.errors import (
    AuthError,
    InvalidConfigError,
    InvalidCredentialsError,
    InvalidStateError,
    MalformedTokenResponseError,
    ProviderCommunicationError,
    ProviderDeniedError,
    UserMappingError,
)
from auth_strategy.domain.models import (
    AccessToken,
    AuthenticatedUser,
    AuthOutcome,
    GrantType,
    InboundRequest,
    LdapConfig,
    LocalConfig,
    OAuthConfig,
    ResponseType,
)

__version__ = "1.0.0"

__all__ = [
    "AccessToken",
    "AuthError",
    "AuthOutcome",
    "AuthStrategy",
    "AuthenticatedUser",
    "GrantType",
    "InboundRequest",
    "InvalidConfigError",
    "InvalidCredentialsError",
    "InvalidStateError",
    "LdapConfig",
    "LdapStrategy",
    "LocalConfig",
    "LocalStrategy",
    "MalformedTokenResponseError",
    "OAuth2Strategy",
    "OAuthConfig",
    "ProviderCommunicationError",
    "ProviderDeniedError",
    "ResponseType",
    "UserMapper",
    "UserMappingError",
    "create_strategy",
    "get_credential_cache",
    "get_password_matcher",
]
