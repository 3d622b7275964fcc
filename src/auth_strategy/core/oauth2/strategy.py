"""OAuth 2.0 authentication strategy.

Drives the authorize -> callback -> token -> userinfo pipeline for the
RFC 6749 grant types:

- Authorization code (section 4.1), optionally with PKCE (RFC 7636)
- Implicit (section 4.2)
- Resource owner password credentials (section 4.3)
- Client credentials (section 4.4)

Each call is one step: a fresh login returns the authorization URL to
redirect to, a callback (or a direct grant) returns the mapped user.
"""

import hmac
import logging
import secrets
from typing import Optional
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from auth_strategy.config.settings import Settings, get_settings
from auth_strategy.core.strategy import AuthStrategy, UserMapper
from auth_strategy.domain.errors import (
    InvalidConfigError,
    InvalidStateError,
    ProviderDeniedError,
    UserMappingError,
)
from auth_strategy.domain.models import (
    AccessToken,
    AuthOutcome,
    GrantType,
    InboundRequest,
    OAuthConfig,
    PendingAuthState,
    ResponseType,
)
from auth_strategy.infrastructure.cache import CredentialCache

from . import pkce
from .http import create_http_client
from .request import FlowStage, check_callback_error, check_oauth_config, classify_request
from .token import TokenExchanger
from .userinfo import UserInfoFetcher

logger = logging.getLogger(__name__)

STATE_CACHE_KEY_PREFIX = "oauth2:state"


def state_cache_key(config: OAuthConfig, request: Optional[InboundRequest] = None) -> str:
    """Cache key for the pending state of a provider/client pair.

    A newer initiation for the same pair overwrites the older one, so only
    the most recent login attempt can complete.
    """
    if request is not None and request.cache_key:
        return request.cache_key
    return f"{STATE_CACHE_KEY_PREFIX}:{config.platform}:{config.client_id}"


def generate_state(config: OAuthConfig, entropy_bytes: int = 32) -> str:
    """Return the caller's state when non-blank, otherwise a random one"""
    if config.state and config.state.strip():
        return config.state
    return secrets.token_urlsafe(entropy_bytes)


def build_authorization_url(
    config: OAuthConfig,
    state: str,
    challenge: Optional[pkce.PkceChallenge] = None,
) -> str:
    """Build the authorization endpoint URL for code and implicit flows.

    ``redirect_uri`` is omitted when no callback URL is configured and
    ``scope`` when no scopes are; scopes are joined by a single space.
    """
    params = {
        "response_type": config.response_type.value,
        "client_id": config.client_id,
    }
    if config.callback_url and config.callback_url.strip():
        params["redirect_uri"] = config.callback_url
    if config.scopes:
        params["scope"] = " ".join(config.scopes)
    params["state"] = state
    if challenge is not None:
        params["code_challenge"] = challenge.challenge
        params["code_challenge_method"] = challenge.method.value

    separator = "&" if "?" in config.authorization_url else "?"
    return f"{config.authorization_url}{separator}{urlencode(params, quote_via=quote)}"


class OAuth2Strategy(AuthStrategy):
    """OAuth 2.0 strategy engine.

    Stateless across calls apart from the injected credential cache, which
    holds the pending state between the redirect and callback legs.
    """

    def __init__(
        self,
        user_mapper: UserMapper,
        cache: CredentialCache,
        http_client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the strategy.

        Args:
            user_mapper: Maps provider claims to an AuthenticatedUser
            cache: Store for pending state and PKCE verifiers
            http_client: Client for provider calls; the caller sets timeouts
            settings: Engine settings (defaults to environment settings)
        """
        self.user_mapper = user_mapper
        self.cache = cache
        self.settings = settings or get_settings()
        self._owns_client = http_client is None
        self.http_client = http_client or create_http_client(verify=self.settings.http_verify_tls)
        self.token_exchanger = TokenExchanger(self.http_client)
        self.userinfo_fetcher = UserInfoFetcher(self.http_client)

    def authenticate(self, config: OAuthConfig, request: InboundRequest) -> AuthOutcome:
        """Run one step of the OAuth 2.0 flow.

        Args:
            config: Provider configuration
            request: Parameters of the current request

        Returns:
            AuthOutcome with ``redirect_url`` when a flow was started, or
            ``user`` when it completed

        Raises:
            ProviderDeniedError: Provider redirected back with an error
            InvalidConfigError: Required configuration is missing
            InvalidStateError: Callback state missing, mismatched or replayed
            ProviderCommunicationError: Token or userinfo call failed
            MalformedTokenResponseError: Token response lacks access_token
            UserMappingError: Raised by the user mapper
        """
        check_callback_error(request)
        if not isinstance(config, OAuthConfig):
            raise InvalidConfigError(f"OAuth2Strategy requires OAuthConfig, got {type(config).__name__}")
        check_oauth_config(config)

        if classify_request(config, request) is FlowStage.INITIATING:
            return AuthOutcome(redirect_url=self._initiate(config, request))

        access_token = self._obtain_token(config, request)
        claims = self.userinfo_fetcher.fetch(config.userinfo_url, access_token.access_token)

        user = self.user_mapper.map(config.platform, claims, access_token)
        if user is None:
            raise UserMappingError(f"Unable to map {config.platform} user")

        logger.info(f"OAuth2 login completed: {config.platform} ({user.external_id})")
        return AuthOutcome(user=user)

    def refresh_token(self, config: OAuthConfig, refresh_token: str) -> AccessToken:
        """Obtain a new access token with a refresh token.

        Raises:
            InvalidConfigError: If client_id, token_url or the token is missing
        """
        if not config.client_id or not config.token_url:
            raise InvalidConfigError("Refreshing a token requires client_id and token_url")
        if not refresh_token or not refresh_token.strip():
            raise InvalidConfigError("refresh_token is required")
        return self.token_exchanger.refresh(config, refresh_token)

    def close(self) -> None:
        """Close the HTTP client if this strategy created it"""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "OAuth2Strategy":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _initiate(self, config: OAuthConfig, request: InboundRequest) -> str:
        state = generate_state(config, self.settings.state_entropy_bytes)

        challenge = None
        # PKCE only applies to the authorization code response type
        if config.enable_pkce and config.response_type is ResponseType.CODE:
            challenge = pkce.generate(config.code_challenge_method)

        key = state_cache_key(config, request)
        pending = PendingAuthState(
            key=key,
            state=state,
            code_verifier=challenge.verifier if challenge else None,
        )
        ttl = config.code_verifier_timeout or self.settings.state_ttl_seconds
        self.cache.set(key, pending.model_dump_json(), ttl=ttl)

        logger.info(
            f"OAuth2 flow initiated: {config.platform} "
            f"(response_type={config.response_type.value}, pkce={challenge is not None})"
        )
        return build_authorization_url(config, state, challenge)

    def _obtain_token(self, config: OAuthConfig, request: InboundRequest) -> AccessToken:
        if config.grant_type is GrantType.CLIENT_CREDENTIALS:
            return self.token_exchanger.exchange(config)

        if config.grant_type is GrantType.PASSWORD:
            username = request.get("username") or config.username
            password = request.get("password") or config.password
            if not username or not password:
                raise InvalidConfigError("grant_type=password requires username and password")
            return self.token_exchanger.exchange(config, {"username": username, "password": password})

        pending = self._consume_state(config, request)

        if config.grant_type is GrantType.IMPLICIT:
            return self.token_exchanger.token_from_callback(request.params)

        code = request.get("code")
        if not code:
            raise ProviderDeniedError("invalid_request", "Callback carries no authorization code")
        return self.token_exchanger.exchange(
            config,
            {"code": code, "code_verifier": pending.code_verifier},
        )

    def _consume_state(self, config: OAuthConfig, request: InboundRequest) -> PendingAuthState:
        key = state_cache_key(config, request)
        cached = self.cache.take(key)
        if cached is None:
            logger.warning(f"OAuth2 callback rejected: no pending state for {config.platform}")
            raise InvalidStateError("No pending authorization for this client; restart the login")

        try:
            pending = PendingAuthState.model_validate_json(cached)
        except ValidationError as e:
            raise InvalidStateError("Pending authorization state is corrupt") from e

        returned = request.get("state")
        if not returned or not hmac.compare_digest(pending.state.encode(), returned.encode()):
            logger.warning(f"OAuth2 callback rejected: state mismatch for {config.platform}")
            raise InvalidStateError("State parameter does not match the pending authorization")
        return pending
