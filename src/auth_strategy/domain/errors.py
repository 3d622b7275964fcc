"""Authentication error taxonomy.

Every failure the engine reports is one of these types. Nothing is retried
internally; retry policy belongs to the caller.
"""

from typing import Any, Optional


class AuthError(Exception):
    """Authentication failed."""
    pass


class ProviderDeniedError(AuthError):
    """The provider returned an explicit error or denial."""

    def __init__(self, error: str, description: Optional[str] = None):
        self.error = error
        self.description = description
        message = f"Provider denied the request: {error}"
        if description:
            message = f"{message} ({description})"
        super().__init__(message)


class InvalidStateError(AuthError):
    """The callback state is missing, mismatched or already consumed."""
    pass


class InvalidConfigError(AuthError):
    """A required configuration field is missing or inconsistent."""
    pass


class ProviderCommunicationError(AuthError):
    """Transport failure, non-2xx status or unparseable provider response.

    Attributes:
        body: Raw response body, kept for diagnostics
        status_code: HTTP status if a response was received
    """

    def __init__(self, message: str, body: Optional[str] = None, status_code: Optional[int] = None):
        self.body = body
        self.status_code = status_code
        super().__init__(message)


class MalformedTokenResponseError(AuthError):
    """The token response parsed but lacks required fields."""

    def __init__(self, message: str, raw: Optional[dict[str, Any]] = None):
        self.raw = raw or {}
        super().__init__(message)


class UserMappingError(AuthError):
    """Raised by the caller's user mapper; propagated unchanged."""
    pass


class InvalidCredentialsError(AuthError):
    """Username/password did not match (LDAP and local strategies)."""
    pass
