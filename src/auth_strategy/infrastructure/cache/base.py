"""Credential cache contract.

Short-lived values (OAuth state, PKCE verifiers) live here between the
redirect and callback legs of a flow.
"""

from abc import ABC, abstractmethod
from typing import Optional


class CredentialCache(ABC):
    """Key/value store for pending authentication state.

    Implementations must make ``take`` atomic: when several callers race on
    the same key, exactly one of them observes the value.
    """

    @abstractmethod
    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store a value, optionally expiring after ``ttl`` seconds"""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value, or None if absent or expired"""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a value; missing keys are ignored"""
        pass

    @abstractmethod
    def take(self, key: str) -> Optional[str]:
        """Atomically get and delete a value"""
        pass
