"""Pure request and configuration checks for the OAuth 2.0 strategy.

Nothing here touches the cache or the network, so every branch of the
classification can be tested from input shape alone.
"""

from enum import Enum

from auth_strategy.domain.errors import InvalidConfigError, ProviderDeniedError
from auth_strategy.domain.models import GrantType, InboundRequest, OAuthConfig, ResponseType


class FlowStage(str, Enum):
    """Which leg of the flow an inbound request belongs to"""
    INITIATING = "initiating"
    COMPLETING = "completing"


# Parameter that carries the grant on the callback leg, per response type
CALLBACK_PARAMETER = {
    ResponseType.CODE: "code",
    ResponseType.TOKEN: "access_token",
}


def check_callback_error(request: InboundRequest) -> None:
    """Fail fast when the provider redirected back with an error.

    Raises:
        ProviderDeniedError: If ``error`` or ``error_description`` is present
    """
    error = request.get("error")
    description = request.get("error_description")
    if error or description:
        raise ProviderDeniedError(error or "unknown_error", description)


def check_oauth_config(config: OAuthConfig) -> None:
    """Validate that the fields the configured grant needs are present.

    Raises:
        InvalidConfigError: On the first missing or inconsistent field
    """
    if not _present(config.client_id):
        raise InvalidConfigError("OAuthConfig.client_id is required")

    if config.grant_type is GrantType.AUTHORIZATION_CODE and config.response_type is not ResponseType.CODE:
        raise InvalidConfigError(
            "grant_type=authorization_code requires response_type=code"
        )
    if config.grant_type is GrantType.IMPLICIT and config.response_type is not ResponseType.TOKEN:
        raise InvalidConfigError("grant_type=implicit requires response_type=token")

    if config.uses_redirect and not _present(config.authorization_url):
        raise InvalidConfigError(
            f"OAuthConfig.authorization_url is required for grant_type={config.grant_type.value}"
        )
    if config.grant_type is not GrantType.IMPLICIT and not _present(config.token_url):
        raise InvalidConfigError(
            f"OAuthConfig.token_url is required for grant_type={config.grant_type.value}"
        )
    if not _present(config.userinfo_url):
        raise InvalidConfigError("OAuthConfig.userinfo_url is required")


def is_callback(config: OAuthConfig, request: InboundRequest) -> bool:
    """Whether the request has the callback shape for the response type"""
    return bool(request.get(CALLBACK_PARAMETER[config.response_type]) or request.get("state"))


def classify_request(config: OAuthConfig, request: InboundRequest) -> FlowStage:
    """Decide whether the request starts a flow or completes one.

    Password and client-credentials grants need no redirect and always
    complete directly.
    """
    if not config.uses_redirect:
        return FlowStage.COMPLETING
    if is_callback(config, request):
        return FlowStage.COMPLETING
    return FlowStage.INITIATING


def _present(value) -> bool:
    return value is not None and bool(str(value).strip())
