"""LDAP strategy and stored-password schemes."""

from .password import (
    BcryptPasswordMatcher,
    DigestPasswordMatcher,
    K5keyPasswordMatcher,
    PasswordMatcher,
    SaltedDigestPasswordMatcher,
    get_password_matcher,
    reset_password_matchers,
)
from .strategy import DirectoryClient, LdapStrategy

__all__ = [
    "BcryptPasswordMatcher",
    "DigestPasswordMatcher",
    "DirectoryClient",
    "K5keyPasswordMatcher",
    "LdapStrategy",
    "PasswordMatcher",
    "SaltedDigestPasswordMatcher",
    "get_password_matcher",
    "reset_password_matchers",
]
