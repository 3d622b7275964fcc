"""Outbound HTTP helpers shared by the token and userinfo calls."""

import logging
from typing import Any, Optional

import httpx

from auth_strategy.config.settings import get_settings
from auth_strategy.domain.errors import ProviderCommunicationError

logger = logging.getLogger(__name__)


def create_http_client(verify: Optional[bool] = None, timeout: Optional[float] = None) -> httpx.Client:
    """Create the synchronous client used for provider calls.

    TLS verification follows settings unless overridden. No timeout is set
    by default; pass one or inject a preconfigured client.
    """
    if verify is None:
        verify = get_settings().http_verify_tls
    if not verify:
        logger.warning("TLS verification disabled for OAuth provider calls")
    return httpx.Client(verify=verify, timeout=timeout, headers={"Accept": "application/json"})


def request_json(client: httpx.Client, method: str, url: str, **kwargs) -> dict[str, Any]:
    """Send a request and return the JSON object body.

    Raises:
        ProviderCommunicationError: On transport errors, non-2xx statuses,
            non-JSON bodies or JSON that is not an object
    """
    try:
        response = client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.error(f"{method} {url} failed: {e}")
        raise ProviderCommunicationError(f"Request to {url} failed: {e}") from e

    if not response.is_success:
        logger.error(f"{method} {url} returned {response.status_code}: {response.text}")
        raise ProviderCommunicationError(
            f"Request to {url} failed: {response.status_code}",
            body=response.text,
            status_code=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise ProviderCommunicationError(
            f"Response from {url} is not valid JSON",
            body=response.text,
            status_code=response.status_code,
        ) from e

    if not isinstance(payload, dict):
        raise ProviderCommunicationError(
            f"Response from {url} is not a JSON object",
            body=response.text,
            status_code=response.status_code,
        )
    return payload
