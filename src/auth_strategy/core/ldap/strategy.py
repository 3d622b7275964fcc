"""LDAP authentication strategy.

Looks the user entry up through a caller-supplied directory client and
checks the submitted password against the entry's stored password with
the directory's configured scheme.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from auth_strategy.core.strategy import AuthStrategy
from auth_strategy.domain.errors import InvalidConfigError, InvalidCredentialsError
from auth_strategy.domain.models import AuthenticatedUser, AuthOutcome, InboundRequest, LdapConfig

from .password import get_password_matcher

logger = logging.getLogger(__name__)


class DirectoryClient(ABC):
    """Caller-supplied directory lookup (connection handling is the caller's)"""

    @abstractmethod
    def find_user(self, config: LdapConfig, username: str) -> Optional[dict[str, Any]]:
        """Return the user entry's attributes, or None if there is no such user"""
        pass


def _first_value(value: Any) -> Optional[str]:
    # LDAP attributes are often multi-valued and may come back as bytes
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    return value


class LdapStrategy(AuthStrategy):
    """Username/password authentication against an LDAP directory"""

    def __init__(self, directory: DirectoryClient):
        self.directory = directory

    def authenticate(self, config: LdapConfig, request: InboundRequest) -> AuthOutcome:
        """Authenticate a username/password pair from the request.

        Raises:
            InvalidConfigError: Config is not an LdapConfig or has an unknown scheme
            InvalidCredentialsError: Unknown user or wrong password
        """
        if not isinstance(config, LdapConfig):
            raise InvalidConfigError(f"LdapStrategy requires LdapConfig, got {type(config).__name__}")
        matcher = get_password_matcher(config.password_scheme)

        username = request.get(config.username_param)
        password = request.get(config.password_param)
        if not username or not password:
            raise InvalidCredentialsError("Username and password are required")

        entry = self.directory.find_user(config, username)
        if not entry:
            logger.warning(f"LDAP login failed: user not found ({username})")
            raise InvalidCredentialsError("Invalid username or password")

        stored = _first_value(entry.get(config.password_attribute))
        if not matcher.matches(password, stored):
            logger.warning(f"LDAP login failed: invalid password ({username})")
            raise InvalidCredentialsError("Invalid username or password")

        external_id = _first_value(entry.get(config.id_attribute)) or username
        claims = {k: v for k, v in entry.items() if k != config.password_attribute}

        logger.info(f"LDAP user authenticated: {external_id}")
        return AuthOutcome(
            user=AuthenticatedUser(platform=config.platform, external_id=external_id, raw_claims=claims)
        )
