"""Local authentication strategy (username/password with bcrypt).

Checks credentials against a caller-supplied user store. Session and
token issuance stay with the host application.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import bcrypt

from auth_strategy.core.strategy import AuthStrategy
from auth_strategy.domain.errors import InvalidConfigError, InvalidCredentialsError
from auth_strategy.domain.models import AuthenticatedUser, AuthOutcome, InboundRequest, LocalConfig, LocalUser

logger = logging.getLogger(__name__)


class LocalUserStore(ABC):
    """Caller-supplied user lookup"""

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[LocalUser]:
        pass


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password as string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash.

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


class LocalStrategy(AuthStrategy):
    """Username/password authentication against the host's own user store"""

    def __init__(self, user_store: LocalUserStore):
        self.user_store = user_store

    def authenticate(self, config: LocalConfig, request: InboundRequest) -> AuthOutcome:
        """Authenticate a username/password pair from the request.

        Raises:
            InvalidConfigError: Config is not a LocalConfig
            InvalidCredentialsError: Missing credentials, unknown user, wrong
                password or inactive account
        """
        if not isinstance(config, LocalConfig):
            raise InvalidConfigError(f"LocalStrategy requires LocalConfig, got {type(config).__name__}")

        username = request.get(config.username_param)
        password = request.get(config.password_param)
        if not username or not password:
            raise InvalidCredentialsError("Username and password are required")

        user = self.user_store.get_by_username(username)
        if not user:
            logger.warning(f"Login failed: User not found ({username})")
            raise InvalidCredentialsError("Invalid username or password")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: Invalid password ({username})")
            raise InvalidCredentialsError("Invalid username or password")

        if not user.is_active:
            logger.warning(f"Login failed: User inactive ({username})")
            raise InvalidCredentialsError("User account is inactive")

        logger.info(f"User authenticated successfully: {user.username} ({user.user_id})")
        return AuthOutcome(
            user=AuthenticatedUser(
                platform=config.platform,
                external_id=user.user_id,
                raw_claims={"username": user.username, **user.attributes},
            )
        )
