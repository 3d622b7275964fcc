"""
Unit tests for the LDAP stored-password schemes.
"""

import base64
import hashlib

import pytest

from auth_strategy.core.ldap.password import (
    BcryptPasswordMatcher,
    DigestPasswordMatcher,
    K5keyPasswordMatcher,
    SaltedDigestPasswordMatcher,
    get_password_matcher,
)
from auth_strategy.domain.errors import InvalidConfigError

pytestmark = pytest.mark.unit

ALL_SCHEMES = ["K5KEY", "MD5", "SHA", "SHA256", "SHA512", "SMD5", "SSHA", "SSHA256", "SSHA512", "BCRYPT"]


class TestK5key:
    """Test the marker-prefix scheme."""

    def test_encode_prefixes_marker(self):
        assert K5keyPasswordMatcher().encode("x") == "{K5KEY}x"

    def test_encode_keeps_password_verbatim(self):
        assert K5keyPasswordMatcher().encode(" pa ss ") == "{K5KEY} pa ss "

    def test_matches(self):
        matcher = K5keyPasswordMatcher()

        assert matcher.matches("123456", "{K5KEY}123456") is True
        assert matcher.matches("123456", "{k5key}123456") is True
        assert matcher.matches("12345", "{K5KEY}123456") is False
        assert matcher.matches("123456", "123456") is False

    def test_warns_about_cleartext(self, caplog):
        with caplog.at_level("WARNING"):
            K5keyPasswordMatcher()

        assert "clear text" in caplog.text


class TestBlankInput:
    """encode() returns None for missing passwords in every scheme."""

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_encode_blank(self, scheme, value):
        assert get_password_matcher(scheme).encode(value) is None

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    def test_matches_blank(self, scheme):
        matcher = get_password_matcher(scheme)
        stored = matcher.encode("secret")

        assert matcher.matches("", stored) is False
        assert matcher.matches(None, stored) is False
        assert matcher.matches("secret", None) is False


class TestDigestSchemes:
    """Test the digest-based schemes."""

    @pytest.mark.parametrize("scheme", ALL_SCHEMES)
    def test_encoded_value_matches(self, scheme):
        matcher = get_password_matcher(scheme)
        stored = matcher.encode("correct horse")

        assert stored.startswith(f"{{{scheme}}}")
        assert matcher.matches("correct horse", stored) is True
        assert matcher.matches("wrong horse", stored) is False

    def test_md5_known_value(self):
        expected = "{MD5}" + base64.b64encode(hashlib.md5(b"secret").digest()).decode()

        assert DigestPasswordMatcher("MD5", "md5").encode("secret") == expected

    def test_ssha_known_value(self):
        """Stored value produced by slappasswd-style salting"""
        salt = b"12345678"
        stored = "{SSHA}" + base64.b64encode(hashlib.sha1(b"secret" + salt).digest() + salt).decode()

        assert SaltedDigestPasswordMatcher("SSHA", "sha1").matches("secret", stored) is True

    def test_salted_encodings_differ(self):
        matcher = get_password_matcher("SSHA256")

        assert matcher.encode("secret") != matcher.encode("secret")

    def test_salted_rejects_garbage_payload(self):
        matcher = get_password_matcher("SSHA")

        assert matcher.matches("secret", "{SSHA}not base64!!") is False
        assert matcher.matches("secret", "{SSHA}" + base64.b64encode(b"short").decode()) is False

    def test_scheme_tag_mismatch(self):
        stored = get_password_matcher("SHA").encode("secret")

        assert get_password_matcher("MD5").matches("secret", stored) is False

    def test_bcrypt_rejects_non_bcrypt_payload(self):
        assert BcryptPasswordMatcher().matches("secret", "{BCRYPT}plain") is False


class TestGetPasswordMatcher:
    """Test static scheme selection."""

    @pytest.mark.parametrize("name", ["ssha", "{SSHA}", " SSHA "])
    def test_normalizes_name(self, name):
        assert get_password_matcher(name).scheme == "SSHA"

    def test_unknown_scheme(self):
        with pytest.raises(InvalidConfigError, match="CRYPT"):
            get_password_matcher("CRYPT")

    def test_returns_shared_instance(self):
        assert get_password_matcher("SSHA") is get_password_matcher("{ssha}")
        assert get_password_matcher("SSHA") is not get_password_matcher("SMD5")
