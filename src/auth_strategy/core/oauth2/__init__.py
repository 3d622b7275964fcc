"""OAuth 2.0 strategy: PKCE, token exchange, userinfo and the flow engine."""

from .request import FlowStage, check_callback_error, check_oauth_config, classify_request
from .strategy import OAuth2Strategy, build_authorization_url, state_cache_key
from .token import TokenExchanger, parse_token_response
from .userinfo import UserInfoFetcher

__all__ = [
    "FlowStage",
    "OAuth2Strategy",
    "TokenExchanger",
    "UserInfoFetcher",
    "build_authorization_url",
    "check_callback_error",
    "check_oauth_config",
    "classify_request",
    "parse_token_response",
    "state_cache_key",
]
