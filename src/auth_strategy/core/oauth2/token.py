"""Token endpoint client.

Performs the authorization-code, password, client-credentials and
refresh-token grants and normalizes the response into an AccessToken.
"""

import logging
from datetime import timedelta
from typing import Any, Mapping, Optional

import httpx

from auth_strategy.domain.errors import MalformedTokenResponseError, ProviderDeniedError
from auth_strategy.domain.models import AccessToken, GrantType, OAuthConfig

from .http import request_json

logger = logging.getLogger(__name__)


def parse_token_response(payload: Mapping[str, Any]) -> AccessToken:
    """Normalize a token payload.

    Raises:
        ProviderDeniedError: If the payload carries an ``error`` field
        MalformedTokenResponseError: If ``access_token`` is missing or empty
    """
    if payload.get("error"):
        raise ProviderDeniedError(str(payload["error"]), payload.get("error_description"))

    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token.strip():
        raise MalformedTokenResponseError("Token response missing access_token", raw=dict(payload))

    return AccessToken(
        access_token=access_token,
        token_type=_optional_str(payload.get("token_type")),
        expires_in=_parse_expires_in(payload.get("expires_in")),
        refresh_token=_optional_str(payload.get("refresh_token")),
        scope=_optional_str(payload.get("scope")),
        id_token=_optional_str(payload.get("id_token")),
        raw=dict(payload),
    )


class TokenExchanger:
    """Token endpoint client for a single HTTP client"""

    def __init__(self, http_client: httpx.Client):
        self.http_client = http_client

    def exchange(self, config: OAuthConfig, grant_params: Optional[Mapping[str, Optional[str]]] = None) -> AccessToken:
        """Request a token for the configured grant type.

        Args:
            config: Provider configuration
            grant_params: Grant-specific fields (``code`` and ``code_verifier``,
                or ``username`` and ``password``); None values are dropped

        Returns:
            Normalized AccessToken

        Raises:
            ProviderCommunicationError: If the call fails or the body is not JSON
            ProviderDeniedError: If the provider answers with an error payload
            MalformedTokenResponseError: If the access token is missing
        """
        data = {"grant_type": config.grant_type.value}
        if config.grant_type is GrantType.AUTHORIZATION_CODE and config.callback_url:
            data["redirect_uri"] = config.callback_url
        if config.grant_type in (GrantType.PASSWORD, GrantType.CLIENT_CREDENTIALS) and config.scopes:
            data["scope"] = " ".join(config.scopes)
        data.update(grant_params or {})
        return self._token_request(config, data)

    def refresh(self, config: OAuthConfig, refresh_token: str) -> AccessToken:
        """Exchange a refresh token for a new access token"""
        return self._token_request(config, {"grant_type": "refresh_token", "refresh_token": refresh_token})

    @staticmethod
    def token_from_callback(params: Mapping[str, str]) -> AccessToken:
        """Build the token an implicit-grant callback carries in its parameters"""
        return parse_token_response(params)

    def _token_request(self, config: OAuthConfig, data: dict[str, Optional[str]]) -> AccessToken:
        data["client_id"] = config.client_id
        if config.client_secret:
            data["client_secret"] = config.client_secret
        form = {k: v for k, v in data.items() if v is not None}

        logger.info(f"Requesting {form['grant_type']} token from {config.platform}")
        payload = request_json(
            self.http_client,
            "POST",
            config.token_url,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        return parse_token_response(payload)


def _parse_expires_in(value: Any) -> Optional[timedelta]:
    if value is None or value == "":
        return None
    try:
        return timedelta(seconds=int(value))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric expires_in: {value!r}")
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
