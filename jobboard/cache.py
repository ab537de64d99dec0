"""In-memory response cache with a fixed time-to-live.

Each source client owns one `ResponseCache`. Entries live for the lifetime of
the process; nothing is persisted.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float


class ResponseCache(Generic[T]):
    """Maps a canonical request key to the last successful response.

    An entry is valid while `clock() - timestamp < ttl_s`. Expired entries are
    dropped on lookup, and all of them are pruned whenever a new entry is stored.
    """

    def __init__(self, ttl_s: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    @staticmethod
    def make_key(request: Mapping[str, Any]) -> str:
        """Serialize a request deterministically (sorted keys, compact)."""
        return json.dumps(request, sort_keys=True, separators=(",", ":"), default=str)

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_s:
            del self._entries[key]
            return None
        return entry.data

    def set(self, key: str, data: T) -> None:
        now = self._clock()
        self.prune(now)
        self._entries[key] = CacheEntry(data=data, timestamp=now)

    def prune(self, now: Optional[float] = None) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock() if now is None else now
        expired = [k for k, e in self._entries.items() if now - e.timestamp >= self.ttl_s]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
