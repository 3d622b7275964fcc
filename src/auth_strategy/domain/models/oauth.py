"""OAuth 2.0 data models

Purpose: Define the configuration, token and identity records exchanged by
the OAuth 2.0 strategy.

Key Components:
- OAuthConfig: Immutable per-provider configuration
- PendingAuthState: State persisted between the redirect and callback legs
- AccessToken: Normalized token endpoint response
- AuthenticatedUser: Canonical identity produced by a successful flow
- AuthOutcome: Either a redirect URL or an authenticated user
"""

from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator


class GrantType(str, Enum):
    """RFC 6749 grant types"""
    AUTHORIZATION_CODE = "authorization_code"
    IMPLICIT = "implicit"
    PASSWORD = "password"
    CLIENT_CREDENTIALS = "client_credentials"


class ResponseType(str, Enum):
    """Authorization endpoint response types"""
    CODE = "code"
    TOKEN = "token"


class CodeChallengeMethod(str, Enum):
    """PKCE transformation methods (RFC 7636 section 4.2)"""
    S256 = "S256"
    PLAIN = "plain"


class OAuthConfig(BaseModel):
    """Per-provider OAuth 2.0 configuration.

    Built by the caller before each authenticate call; frozen afterwards.
    Required-field checks happen in ``check_oauth_config`` so they surface
    as ``InvalidConfigError`` rather than a pydantic validation error.

    Attributes:
        platform: Provider name used to scope cache keys and identify users
        client_id: OAuth client identifier
        client_secret: OAuth client secret
        authorization_url: Provider authorization endpoint
        token_url: Provider token endpoint
        userinfo_url: Provider userinfo endpoint
        callback_url: redirect_uri; omitted when blank (provider default)
        scopes: Requested scopes, order preserved, duplicates dropped
        grant_type: RFC 6749 grant type
        response_type: ``code`` or ``token``
        enable_pkce: Apply PKCE (only honoured for ``response_type=code``)
        code_challenge_method: PKCE method, S256 unless the provider needs plain
        state: Caller-supplied state; wins over a generated one when non-blank
        code_verifier_timeout: Seconds the pending state stays completable
        username: Password-grant fallback when the request carries none
        password: Password-grant fallback when the request carries none
    """
    model_config = ConfigDict(frozen=True)

    platform: str = "oauth2"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    authorization_url: Optional[str] = None
    token_url: Optional[str] = None
    userinfo_url: Optional[str] = None
    callback_url: Optional[str] = None
    scopes: tuple[str, ...] = ()
    grant_type: GrantType = GrantType.AUTHORIZATION_CODE
    response_type: ResponseType = ResponseType.CODE
    enable_pkce: bool = False
    code_challenge_method: CodeChallengeMethod = CodeChallengeMethod.S256
    state: Optional[str] = None
    code_verifier_timeout: Optional[PositiveInt] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @field_validator("scopes", mode="before")
    @classmethod
    def dedupe_scopes(cls, v):
        """Keep first occurrence of each scope, dropping blanks"""
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split()
        return tuple(dict.fromkeys(s for s in v if s and s.strip()))

    @property
    def uses_redirect(self) -> bool:
        """Whether this grant type needs the user-agent redirect leg"""
        return self.grant_type in (GrantType.AUTHORIZATION_CODE, GrantType.IMPLICIT)


class InboundRequest(BaseModel):
    """What the engine sees of the current HTTP request.

    Attributes:
        params: Query and form parameters
        cache_key: Previously established session/cache key; overrides the
            derived pending-state key when set
    """
    params: dict[str, str] = Field(default_factory=dict)
    cache_key: Optional[str] = None

    def get(self, name: str) -> Optional[str]:
        """Return a parameter, treating blank values as absent"""
        value = self.params.get(name)
        if value is None or not str(value).strip():
            return None
        return value


class PendingAuthState(BaseModel):
    """Anti-CSRF state and PKCE verifier awaiting the callback"""
    key: str
    state: str
    code_verifier: Optional[str] = None


class AccessToken(BaseModel):
    """Normalized access token record

    ``raw`` keeps the full provider payload, including nonstandard fields.
    """
    access_token: str
    token_type: Optional[str] = None
    expires_in: Optional[timedelta] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    id_token: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)


class AuthenticatedUser(BaseModel):
    """Canonical identity after a successful flow

    Attributes:
        platform: Provider or directory the identity came from
        external_id: Provider-side unique identifier
        raw_claims: Provider claims or directory attributes
        access_token: Token used to obtain the claims (OAuth only)
    """
    platform: str
    external_id: str
    raw_claims: dict[str, Any] = Field(default_factory=dict)
    access_token: Optional[AccessToken] = None


class AuthOutcome(BaseModel):
    """Result of a single authenticate call.

    Exactly one of ``redirect_url`` (flow initiated, send the user agent
    there) or ``user`` (flow completed) is set.
    """
    redirect_url: Optional[str] = None
    user: Optional[AuthenticatedUser] = None

    @model_validator(mode="after")
    def exactly_one(self) -> "AuthOutcome":
        if (self.redirect_url is None) == (self.user is None):
            raise ValueError("AuthOutcome needs exactly one of redirect_url or user")
        return self

    @property
    def is_redirect(self) -> bool:
        return self.redirect_url is not None
