"""
In-memory response cache for GraphQL reads.

Keys are the operation text plus a stable JSON rendering of the variables,
so every variable combination of one query shares the query text as key
prefix. That is what ``invalidate`` works on. Lifetime is the process; there
is no persistence.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

KEY_SEPARATOR = "::"

DEFAULT_TTL = 5 * 60.0


@dataclass
class CacheEntry:
    data: Any
    stored_at: float


class QueryCache:
    def __init__(self, default_ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def make_key(query: str, variables: Optional[Dict[str, Any]] = None) -> str:
        return f"{query}{KEY_SEPARATOR}{json.dumps(variables or {}, sort_keys=True, default=str)}"

    @staticmethod
    def prefix_for(query: str) -> str:
        return f"{query}{KEY_SEPARATOR}"

    def get(self, key: str, ttl: Optional[float] = None) -> Optional[CacheEntry]:
        """Live entry for ``key``; expired entries are dropped and give None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        ttl = self.default_ttl if ttl is None else ttl
        if self._clock() - entry.stored_at >= ttl:
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, data: Any) -> CacheEntry:
        entry = CacheEntry(data=data, stored_at=self._clock())
        self._entries[key] = entry
        return entry

    def invalidate(self, prefix: str) -> int:
        stale = [key for key in self._entries if key.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
