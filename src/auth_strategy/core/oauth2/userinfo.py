"""Userinfo endpoint client."""

import logging
from typing import Any

import httpx

from auth_strategy.domain.errors import ProviderDeniedError

from .http import request_json

logger = logging.getLogger(__name__)


class UserInfoFetcher:
    """Fetches provider claims with a bearer token"""

    def __init__(self, http_client: httpx.Client):
        self.http_client = http_client

    def fetch(self, userinfo_url: str, access_token: str) -> dict[str, Any]:
        """Call the userinfo endpoint.

        Args:
            userinfo_url: Provider userinfo endpoint
            access_token: Bearer token from the token exchange

        Returns:
            Raw provider claims

        Raises:
            ProviderDeniedError: If the body carries an ``error`` field
            ProviderCommunicationError: On transport, status or JSON failure
        """
        claims = request_json(
            self.http_client,
            "GET",
            userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if claims.get("error"):
            logger.warning(f"Userinfo endpoint {userinfo_url} returned error: {claims['error']}")
            raise ProviderDeniedError(str(claims["error"]), claims.get("error_description"))
        return claims
