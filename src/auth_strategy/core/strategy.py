"""Abstract authentication strategy interface.

This module defines the contract every protocol strategy implements, and
the user-mapping collaborator the OAuth strategy hands provider claims to.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from auth_strategy.domain.models import AccessToken, AuthenticatedUser, AuthOutcome, InboundRequest


class AuthStrategy(ABC):
    """Abstract interface for authentication strategies.

    One implementation per protocol (OAuth 2.0, LDAP, local). Strategies
    hold only their collaborators; everything request-specific arrives
    through ``authenticate``.

    Example:
        strategy = OAuth2Strategy(user_mapper=mapper, cache=MemoryCredentialCache())
        outcome = strategy.authenticate(config, InboundRequest(params=query))
        if outcome.is_redirect:
            return redirect(outcome.redirect_url)
        persist(outcome.user)
    """

    @abstractmethod
    def authenticate(self, config: BaseModel, request: InboundRequest) -> AuthOutcome:
        """Drive one step of the protocol for an inbound request.

        Args:
            config: Protocol-specific configuration
            request: Parameters of the current request

        Returns:
            AuthOutcome with either a redirect URL or an authenticated user

        Raises:
            AuthError: Any typed authentication failure
        """
        pass


class UserMapper(ABC):
    """Caller-supplied mapping from provider claims to a user.

    Typically looks up or creates the local account linked to the provider
    identity. Raise ``UserMappingError`` on conflicts such as a duplicate
    account; the strategy propagates it unchanged.
    """

    @abstractmethod
    def map(self, platform: str, raw_claims: dict[str, Any], access_token: AccessToken) -> AuthenticatedUser:
        pass
