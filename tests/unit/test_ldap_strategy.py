"""Unit tests for LdapStrategy

Directory lookups are mocked; password checks use the real matchers.
"""

from unittest.mock import MagicMock

import pytest

from auth_strategy.core.ldap import DirectoryClient, LdapStrategy, get_password_matcher
from auth_strategy.domain.errors import InvalidConfigError, InvalidCredentialsError
from auth_strategy.domain.models import InboundRequest, LdapConfig, LocalConfig


@pytest.fixture
def config():
    return LdapConfig(base_dn="ou=people,dc=example,dc=com", password_scheme="SSHA")


@pytest.fixture
def directory(config):
    client = MagicMock(spec=DirectoryClient)
    client.find_user.return_value = {
        "uid": ["alice"],
        "cn": ["Alice Example"],
        "userPassword": [get_password_matcher("SSHA").encode("wonderland").encode()],
    }
    return client


@pytest.mark.unit
class TestLdapStrategy:
    """Test LDAP username/password authentication"""

    def test_success(self, directory, config):
        outcome = LdapStrategy(directory).authenticate(
            config, InboundRequest(params={"username": "alice", "password": "wonderland"})
        )

        user = outcome.user
        assert user.platform == "ldap"
        assert user.external_id == "alice"
        assert "userPassword" not in user.raw_claims
        assert user.raw_claims["cn"] == ["Alice Example"]
        directory.find_user.assert_called_once_with(config, "alice")

    def test_wrong_password(self, directory, config):
        with pytest.raises(InvalidCredentialsError, match="Invalid username or password"):
            LdapStrategy(directory).authenticate(
                config, InboundRequest(params={"username": "alice", "password": "looking-glass"})
            )

    def test_unknown_user(self, directory, config):
        directory.find_user.return_value = None

        with pytest.raises(InvalidCredentialsError):
            LdapStrategy(directory).authenticate(
                config, InboundRequest(params={"username": "bob", "password": "x"})
            )

    def test_missing_credentials(self, directory, config):
        with pytest.raises(InvalidCredentialsError, match="required"):
            LdapStrategy(directory).authenticate(config, InboundRequest(params={"username": "alice"}))

        directory.find_user.assert_not_called()

    def test_custom_params_and_k5key(self, directory):
        config = LdapConfig(password_scheme="K5KEY", username_param="login", password_param="secret")
        directory.find_user.return_value = {"uid": "carol", "userPassword": "{K5KEY}123456"}

        outcome = LdapStrategy(directory).authenticate(
            config, InboundRequest(params={"login": "carol", "secret": "123456"})
        )

        assert outcome.user.external_id == "carol"

    def test_k5key_warning_logged_once_across_logins(self, directory, caplog):
        """Repeated logins reuse one matcher instead of rebuilding it"""
        # Arrange
        config = LdapConfig(password_scheme="K5KEY")
        directory.find_user.return_value = {"uid": "carol", "userPassword": "{K5KEY}123456"}
        strategy = LdapStrategy(directory)
        request = InboundRequest(params={"username": "carol", "password": "123456"})

        # Act
        with caplog.at_level("WARNING"):
            for _ in range(3):
                strategy.authenticate(config, request)

        # Assert
        assert caplog.text.count("clear text") == 1

    def test_unknown_scheme(self, directory):
        with pytest.raises(InvalidConfigError):
            LdapStrategy(directory).authenticate(
                LdapConfig(password_scheme="ROT13"), InboundRequest(params={"username": "a", "password": "b"})
            )

    def test_wrong_config_type(self, directory):
        with pytest.raises(InvalidConfigError):
            LdapStrategy(directory).authenticate(LocalConfig(), InboundRequest())
