"""
Pytest configuration and fixtures for the authentication strategy tests.

Provides fixtures for:
- Engine settings
- In-memory credential cache
- A fake OAuth provider behind httpx.MockTransport
- User mapper
"""

import json
from typing import Callable, Optional
from unittest.mock import MagicMock

import httpx
import pytest

from auth_strategy.config.settings import Settings
from auth_strategy.core.factory import reset_credential_cache
from auth_strategy.core.ldap import reset_password_matchers
from auth_strategy.core.strategy import UserMapper
from auth_strategy.domain.models import AuthenticatedUser, GrantType, OAuthConfig, ResponseType
from auth_strategy.infrastructure.cache import MemoryCredentialCache


class FakeProvider:
    """Scriptable OAuth provider.

    Records every request it receives. Token and userinfo responses can be
    replaced per test.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_body: object = {
            "access_token": "tok123",
            "token_type": "bearer",
            "expires_in": 3600,
            "refresh_token": "refresh456",
            "scope": "profile email",
        }
        self.userinfo_status = 200
        self.userinfo_body: object = {"sub": "user-42", "email": "user@example.com", "name": "Test User"}
        self.raise_on: Optional[str] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if self.raise_on and path == self.raise_on:
            raise httpx.ConnectError("connection refused", request=request)
        if path == "/oauth/token":
            return self._respond(self.token_status, self.token_body)
        if path == "/oauth/userinfo":
            return self._respond(self.userinfo_status, self.userinfo_body)
        return httpx.Response(404, text="not found")

    @staticmethod
    def _respond(status: int, body: object) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body), headers={"Content-Type": "application/json"})

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def form_of(self, request: httpx.Request) -> dict[str, str]:
        return dict(httpx.QueryParams(request.content.decode()))


@pytest.fixture(autouse=True)
def _reset_factory():
    """Each test starts without a global credential cache"""
    reset_credential_cache()
    yield
    reset_credential_cache()


@pytest.fixture(autouse=True)
def _reset_password_matchers():
    """Each test builds its own shared password matchers"""
    reset_password_matchers()
    yield
    reset_password_matchers()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment"""
    return Settings(
        _env_file=None,
        state_ttl_seconds=300,
        cache_backend="memory",
        http_verify_tls=True,
    )


@pytest.fixture
def cache() -> MemoryCredentialCache:
    return MemoryCredentialCache()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def http_client(provider: FakeProvider):
    client = httpx.Client(transport=httpx.MockTransport(provider.handler))
    yield client
    client.close()


@pytest.fixture
def user_mapper() -> MagicMock:
    """User mapper that turns claims into an AuthenticatedUser"""
    mapper = MagicMock(spec=UserMapper)

    def _map(platform, raw_claims, access_token):
        return AuthenticatedUser(
            platform=platform,
            external_id=raw_claims["sub"],
            raw_claims=raw_claims,
            access_token=access_token,
        )

    mapper.map.side_effect = _map
    return mapper


@pytest.fixture
def make_config() -> Callable[..., OAuthConfig]:
    """Factory for a provider config pointing at the fake provider"""

    def _make(**overrides) -> OAuthConfig:
        values = dict(
            platform="example",
            client_id="abc",
            client_secret="s3cret",
            authorization_url="https://provider.test/oauth/authorize",
            token_url="https://provider.test/oauth/token",
            userinfo_url="https://provider.test/oauth/userinfo",
            callback_url="https://app.test/callback",
            scopes=["profile", "email"],
            grant_type=GrantType.AUTHORIZATION_CODE,
            response_type=ResponseType.CODE,
        )
        values.update(overrides)
        return OAuthConfig(**values)

    return _make
