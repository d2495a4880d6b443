"""
In-memory response cache with lazy expiry.

Entries are keyed by a canonical request key (URL plus sorted query
parameters) and expire ``cache_duration`` seconds after they were stored.
There is no background sweep: a stale entry is evicted when a lookup finds
it, and ``stats()`` reports stale entries without evicting them.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from config.settings import CACHE_DURATION
from utils.api_models import CacheStats

logger = logging.getLogger("pokedex.cache")


def make_cache_key(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Build the cache key for a request.

    Parameters are sorted by name so that logically identical requests
    collide regardless of argument order.

    Args:
        url: Request URL without a query string.
        params: Optional query parameters.

    Returns:
        Canonical key string, e.g. ``.../pokemon?limit=20&offset=0``.
    """
    if not params:
        return url
    return f"{url}?{urlencode(sorted((str(k), str(v)) for k, v in params.items()))}"


@dataclass(frozen=True)
class CacheEntry:
    """A stored payload and the clock reading at which it was stored."""

    key: str
    payload: Any
    stored_at: float


class ResultCache:
    """
    Time-bounded key/value store for validated API payloads.

    Re-storing a key replaces the entry wholesale; entries are never mutated
    in place.
    """

    def __init__(
        self,
        cache_duration: float = CACHE_DURATION,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            cache_duration: Freshness window in seconds.
            clock: Monotonic time source, injectable for tests.
        """
        self.cache_duration = cache_duration
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

        # Cache statistics
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at < self.cache_duration

    def get(self, key: str) -> Optional[Any]:
        """
        Get a payload if it is still fresh.

        A stale entry is evicted as a side effect.

        Args:
            key: Cache key from ``make_cache_key``.

        Returns:
            Cached payload or None if missing/expired.
        """
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry, self._clock()):
            self.hits += 1
            logger.debug("Cache hit", extra={"cache_key": key[:80]})
            return entry.payload

        if entry is not None:
            del self._entries[key]
            logger.debug("Evicted expired cache entry", extra={"cache_key": key[:80]})

        self.misses += 1
        return None

    def set(self, key: str, payload: Any) -> None:
        """
        Store a payload, replacing any previous entry for the key.

        Args:
            key: Cache key from ``make_cache_key``.
            payload: Already-validated payload.
        """
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())
        logger.debug("Data cached", extra={"cache_key": key[:80]})

    def clear(self) -> None:
        """Remove every entry and reset hit/miss counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0
        logger.info("Cache cleared")

    def stats(self) -> CacheStats:
        """
        Get cache statistics without evicting anything.

        Returns:
            CacheStats with fresh/stale partition and hit/miss counters.
        """
        now = self._clock()
        valid = sum(1 for entry in self._entries.values() if self._is_fresh(entry, now))

        return {
            "total_entries": len(self._entries),
            "valid_entries": valid,
            "expired_entries": len(self._entries) - valid,
            "cache_duration": self.cache_duration,
            "hits": self.hits,
            "misses": self.misses,
        }
