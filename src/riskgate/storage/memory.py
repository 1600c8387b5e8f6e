"""In-memory keyed store with TTL expiry.

Process-local: suitable for a single instance and for tests. Multi-instance
deployments need a shared backend such as DynamoDBKeyValueStore.
"""

import copy
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from riskgate.storage.base import KeyValueStore


@dataclass
class _Entry:
    value: Any
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dict-backed store.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store, matching an external store's semantics.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return copy.deepcopy(entry.value)

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock() + ttl_seconds
        with self._lock:
            self._entries[key] = _Entry(value=copy.deepcopy(value), expires_at=expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def list(self, prefix: str = "") -> List[str]:
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
            return sorted(k for k in self._entries if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self.list())
