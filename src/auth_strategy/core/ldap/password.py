"""LDAP password schemes.

Each matcher encodes a plain password the way a directory stores it
(``{SCHEME}payload``, RFC 2307 style) and checks a login attempt against a
stored value. The scheme is picked once per directory in LdapConfig.
"""

import base64
import hashlib
import hmac
import logging
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Callable, Optional

import bcrypt

from auth_strategy.domain.errors import InvalidConfigError

logger = logging.getLogger(__name__)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class PasswordMatcher(ABC):
    """Encode/verify pair for one stored-password scheme"""

    scheme: str = ""

    @property
    def tag(self) -> str:
        return f"{{{self.scheme}}}"

    def encode(self, plain_password: Optional[str]) -> Optional[str]:
        """Encode a password; None or blank input yields None.

        Returning None lets callers detect "no password set" without a
        try/except.
        """
        if _blank(plain_password):
            return None
        return self.tag + self._encode_payload(plain_password)

    def matches(self, plain_password: Optional[str], stored_password: Optional[str]) -> bool:
        """Check a login attempt against a stored value"""
        if _blank(plain_password) or _blank(stored_password):
            return False
        if not stored_password[: len(self.tag)].upper() == self.tag.upper():
            return False
        return self._matches_payload(plain_password, stored_password[len(self.tag):])

    @abstractmethod
    def _encode_payload(self, plain_password: str) -> str:
        pass

    def _matches_payload(self, plain_password: str, payload: str) -> bool:
        expected = self._encode_payload(plain_password)
        return hmac.compare_digest(expected.encode("utf-8"), payload.encode("utf-8"))


class K5keyPasswordMatcher(PasswordMatcher):
    """``{K5KEY}password`` marker scheme.

    WARNING: The password is stored in clear text behind a marker tag. This
    exists only for legacy directories and provides no confidentiality.
    """

    scheme = "K5KEY"

    def __init__(self):
        logger.warning(
            "K5KEY password scheme stores passwords in clear text; "
            "use it only for legacy directories"
        )

    def _encode_payload(self, plain_password: str) -> str:
        return plain_password


class DigestPasswordMatcher(PasswordMatcher):
    """Unsalted digest schemes: ``{MD5}``, ``{SHA}``, ``{SHA256}``, ``{SHA512}``"""

    def __init__(self, scheme: str, algorithm: str):
        self.scheme = scheme
        self.algorithm = algorithm

    def _encode_payload(self, plain_password: str) -> str:
        digest = hashlib.new(self.algorithm, plain_password.encode("utf-8")).digest()
        return base64.b64encode(digest).decode("ascii")


class SaltedDigestPasswordMatcher(PasswordMatcher):
    """Salted digest schemes: ``{SMD5}``, ``{SSHA}``, ``{SSHA256}``, ``{SSHA512}``.

    Payload is base64(digest(password + salt) + salt).
    """

    def __init__(self, scheme: str, algorithm: str, salt_length: int = 8):
        self.scheme = scheme
        self.algorithm = algorithm
        self.salt_length = salt_length
        self.digest_size = hashlib.new(algorithm).digest_size

    def _encode_payload(self, plain_password: str, salt: Optional[bytes] = None) -> str:
        if salt is None:
            salt = os.urandom(self.salt_length)
        digest = hashlib.new(self.algorithm, plain_password.encode("utf-8") + salt).digest()
        return base64.b64encode(digest + salt).decode("ascii")

    def _matches_payload(self, plain_password: str, payload: str) -> bool:
        try:
            raw = base64.b64decode(payload, validate=True)
        except ValueError:
            return False
        if len(raw) <= self.digest_size:
            return False
        salt = raw[self.digest_size:]
        expected = self._encode_payload(plain_password, salt=salt)
        return hmac.compare_digest(expected.encode("ascii"), payload.encode("utf-8"))


class BcryptPasswordMatcher(PasswordMatcher):
    """``{BCRYPT}`` scheme backed by bcrypt"""

    scheme = "BCRYPT"

    def _encode_payload(self, plain_password: str) -> str:
        return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    def _matches_payload(self, plain_password: str, payload: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), payload.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash
            return False


PASSWORD_MATCHERS: dict[str, Callable[[], PasswordMatcher]] = {
    "K5KEY": K5keyPasswordMatcher,
    "MD5": lambda: DigestPasswordMatcher("MD5", "md5"),
    "SHA": lambda: DigestPasswordMatcher("SHA", "sha1"),
    "SHA256": lambda: DigestPasswordMatcher("SHA256", "sha256"),
    "SHA512": lambda: DigestPasswordMatcher("SHA512", "sha512"),
    "SMD5": lambda: SaltedDigestPasswordMatcher("SMD5", "md5"),
    "SSHA": lambda: SaltedDigestPasswordMatcher("SSHA", "sha1"),
    "SSHA256": lambda: SaltedDigestPasswordMatcher("SSHA256", "sha256"),
    "SSHA512": lambda: SaltedDigestPasswordMatcher("SSHA512", "sha512"),
    "BCRYPT": BcryptPasswordMatcher,
}


def get_password_matcher(scheme: str) -> PasswordMatcher:
    """Return the shared matcher for a configured scheme name.

    Accepts ``SSHA`` or ``{SSHA}``, case-insensitively.

    Raises:
        InvalidConfigError: If the scheme is unknown
    """
    name = (scheme or "").strip().strip("{}").upper()
    if name not in PASSWORD_MATCHERS:
        raise InvalidConfigError(
            f"Unknown LDAP password scheme: {scheme}. "
            f"Valid options: {', '.join(sorted(PASSWORD_MATCHERS))}"
        )
    return _matcher_for(name)


@lru_cache(maxsize=None)
def _matcher_for(name: str) -> PasswordMatcher:
    # Matchers are stateless; one instance per scheme for the process
    return PASSWORD_MATCHERS[name]()


def reset_password_matchers() -> None:
    """Drop the shared matcher instances (for testing)."""
    _matcher_for.cache_clear()
