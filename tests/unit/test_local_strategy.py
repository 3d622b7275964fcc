"""Unit tests for LocalStrategy

Tests local authentication logic with a mocked user store.
"""

from unittest.mock import MagicMock

import pytest

from auth_strategy.core.local import LocalStrategy, LocalUserStore, hash_password, verify_password
from auth_strategy.domain.errors import InvalidConfigError, InvalidCredentialsError
from auth_strategy.domain.models import InboundRequest, LdapConfig, LocalConfig, LocalUser


@pytest.fixture
def test_user():
    """Create test user with password hash"""
    return LocalUser(
        user_id="user-123",
        username="testuser",
        password_hash=hash_password("testpassword123"),
        attributes={"email": "test@example.com"},
    )


@pytest.fixture
def user_store(test_user):
    store = MagicMock(spec=LocalUserStore)
    store.get_by_username.return_value = test_user
    return store


def _login(username, password):
    return InboundRequest(params={"username": username, "password": password})


@pytest.mark.unit
class TestLocalStrategy:
    """Test username/password authentication"""

    def test_success(self, user_store):
        """Happy path: correct credentials return the user"""
        outcome = LocalStrategy(user_store).authenticate(LocalConfig(), _login("testuser", "testpassword123"))

        assert outcome.user.platform == "local"
        assert outcome.user.external_id == "user-123"
        assert outcome.user.raw_claims == {"username": "testuser", "email": "test@example.com"}
        assert outcome.user.access_token is None

    def test_wrong_password(self, user_store):
        with pytest.raises(InvalidCredentialsError, match="Invalid username or password"):
            LocalStrategy(user_store).authenticate(LocalConfig(), _login("testuser", "wrongpassword"))

    def test_user_not_found(self, user_store):
        user_store.get_by_username.return_value = None

        with pytest.raises(InvalidCredentialsError, match="Invalid username or password"):
            LocalStrategy(user_store).authenticate(LocalConfig(), _login("nobody", "password"))

    def test_inactive_user(self, user_store, test_user):
        test_user.is_active = False

        with pytest.raises(InvalidCredentialsError, match="inactive"):
            LocalStrategy(user_store).authenticate(LocalConfig(), _login("testuser", "testpassword123"))

    def test_missing_password(self, user_store):
        with pytest.raises(InvalidCredentialsError):
            LocalStrategy(user_store).authenticate(LocalConfig(), _login("testuser", ""))

        user_store.get_by_username.assert_not_called()

    def test_wrong_config_type(self, user_store):
        with pytest.raises(InvalidConfigError):
            LocalStrategy(user_store).authenticate(LdapConfig(), _login("testuser", "x"))


@pytest.mark.unit
class TestPasswordHashing:
    """Test bcrypt helpers"""

    def test_hash_differs_each_time(self):
        assert hash_password("pw") != hash_password("pw")

    def test_verify(self):
        hashed = hash_password("pw")

        assert verify_password("pw", hashed) is True
        assert verify_password("nope", hashed) is False

    def test_verify_malformed_hash(self):
        assert verify_password("pw", "not-a-hash") is False
