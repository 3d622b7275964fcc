"""PKCE (Proof Key for Code Exchange, RFC 7636) helpers.

Generates code verifier/challenge pairs for the authorization request and
re-checks a verifier against a challenge.
"""

import base64
import hashlib
import hmac
import secrets
from typing import NamedTuple

from auth_strategy.domain.models import CodeChallengeMethod

# RFC 7636 section 4.1
VERIFIER_MIN_LENGTH = 43
VERIFIER_MAX_LENGTH = 128


class PkceChallenge(NamedTuple):
    verifier: str
    challenge: str
    method: CodeChallengeMethod


def generate_code_verifier() -> str:
    """Generate a high-entropy verifier from the unreserved URL character set.

    ``token_urlsafe`` only emits ``[A-Za-z0-9_-]``, a subset of the RFC 7636
    unreserved characters. 64 bytes encode to 86 characters.
    """
    while True:
        verifier = secrets.token_urlsafe(64)
        if VERIFIER_MIN_LENGTH <= len(verifier) <= VERIFIER_MAX_LENGTH:
            return verifier


def generate_code_challenge(verifier: str, method: CodeChallengeMethod = CodeChallengeMethod.S256) -> str:
    """Derive the challenge for a verifier.

    S256: base64url(sha256(verifier)) without padding. plain: the verifier.
    """
    if CodeChallengeMethod(method) is CodeChallengeMethod.PLAIN:
        return verifier
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate(method: CodeChallengeMethod = CodeChallengeMethod.S256) -> PkceChallenge:
    """Generate a verifier and its challenge"""
    method = CodeChallengeMethod(method)
    verifier = generate_code_verifier()
    return PkceChallenge(verifier, generate_code_challenge(verifier, method), method)


def verify(verifier: str, challenge: str, method: CodeChallengeMethod = CodeChallengeMethod.S256) -> bool:
    """Check that ``challenge`` was derived from ``verifier``.

    Comparison is constant-time.
    """
    if not verifier or not challenge:
        return False
    try:
        expected = generate_code_challenge(verifier, method)
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), challenge.encode("utf-8"))
