"""Domain models for the authentication strategies"""

from .oauth import (
    AccessToken,
    AuthenticatedUser,
    AuthOutcome,
    CodeChallengeMethod,
    GrantType,
    InboundRequest,
    OAuthConfig,
    PendingAuthState,
    ResponseType,
)
from .credentials import LdapConfig, LocalConfig, LocalUser

__all__ = [
    "AccessToken",
    "AuthenticatedUser",
    "AuthOutcome",
    "CodeChallengeMethod",
    "GrantType",
    "InboundRequest",
    "OAuthConfig",
    "PendingAuthState",
    "ResponseType",
    "LdapConfig",
    "LocalConfig",
    "LocalUser",
]
