"""Keyed store contract shared by detectors, scoring and analytics."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class KeyValueStore(ABC):
    """A shared, TTL-aware key/value store.

    Values are JSON-compatible (dicts, lists, scalars). Reads of expired
    entries return None. Implementations raise StoreError on backend
    failures; callers decide whether to degrade.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None."""

    @abstractmethod
    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store value under key, expiring after ttl_seconds if given."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""

    @abstractmethod
    def list(self, prefix: str = "") -> List[str]:
        """Return the live keys starting with prefix, sorted."""
