# backend/investment_tracker/services/cache.py
"""
Thread-safe cache for derived portfolio views.

Keys are tuples whose first element names the view and whose second element
is usually the owning user id, e.g. ("summary", "user-1") or
("history", "user-1", "30D", date(2024, 5, 1)). Invalidation matches on a
tuple prefix, so ("summary", "user-1") evicts exactly that user's summary and
("price", 42) evicts every memoized currency of asset 42.

Every entry carries its own TTL (see the CACHE_* settings):
- analytical views: 5 minutes
- current prices: 2 minutes
- reference data: 1 hour

get_or_compute() is single-flight per key: concurrent callers for the same
missing key wait for one computation instead of recomputing. A computation
that overlapped an invalidation of its own key still returns its result to
the caller but is not stored, so an eviction is never undone by a stale
write. Invalidations of unrelated keys, such as another user's views, do
not affect it.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[Hashable, ...]

DEFAULT_CACHE_MAX_SIZE = 1000
DEFAULT_CACHE_TTL_SECONDS = 300


class _InFlight:
    """Per-key lock shared by the callers computing the same key."""

    __slots__ = ("lock", "waiters", "invalidated")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.waiters = 0
        # Set when an invalidation matching this key lands mid-compute
        self.invalidated = False


class ViewCache:
    """
    Bounded LRU cache with per-entry TTL and tuple-prefix invalidation.

    Memory Safety:
        At most max_size entries are kept. When full, the least recently
        used entry is evicted to make room.

    Thread Safety:
        A single lock guards the entry table. Computations run outside that
        lock, serialized per key by the in-flight registry.
    """

    def __init__(
            self,
            max_size: int = DEFAULT_CACHE_MAX_SIZE,
            default_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
            clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: OrderedDict[CacheKey, tuple[float, Any]] = OrderedDict()
        self._max_size = max_size
        self._default_ttl = default_ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._in_flight: dict[CacheKey, _InFlight] = {}

    # =========================================================================
    # BASIC OPERATIONS
    # =========================================================================

    def get(self, key: CacheKey) -> Any | None:
        """
        Return the cached value for key, or None if missing or expired.

        A hit moves the entry to the most-recently-used position.
        """
        with self._lock:
            return self._get_locked(key)

    def put(self, key: CacheKey, value: Any, ttl_seconds: float | None = None) -> None:
        """Store value under key for ttl_seconds (default TTL when None)."""
        with self._lock:
            self._put_locked(key, value, ttl_seconds)

    def invalidate(self, prefix: CacheKey) -> int:
        """
        Evict every entry whose key starts with the given tuple prefix.

        Returns:
            Number of entries evicted
        """
        size = len(prefix)
        with self._lock:
            doomed = [key for key in self._entries if key[:size] == prefix]
            for key in doomed:
                del self._entries[key]
            for key, flight in self._in_flight.items():
                if key[:size] == prefix:
                    flight.invalidated = True

        if doomed:
            logger.debug(f"Invalidated {len(doomed)} cache entries for {prefix}")
        return len(doomed)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            for flight in self._in_flight.values():
                flight.invalidated = True
        logger.debug(f"Cleared {count} cache entries")

    def size(self) -> int:
        """Return current number of cached entries (expired ones included)."""
        with self._lock:
            return len(self._entries)

    # =========================================================================
    # SINGLE-FLIGHT COMPUTATION
    # =========================================================================

    def get_or_compute(
            self,
            key: CacheKey,
            compute: Callable[[], T],
            ttl_seconds: float | None = None,
    ) -> T:
        """
        Return the cached value for key, computing and storing it on a miss.

        Only one caller computes a given key at a time; others block until
        it finishes and then read the stored value. Exceptions from compute
        propagate and nothing is stored.
        """
        with self._lock:
            value = self._get_locked(key)
            if value is not None:
                return value
            flight = self._in_flight.get(key)
            if flight is None:
                flight = self._in_flight[key] = _InFlight()
            flight.waiters += 1

        try:
            with flight.lock:
                with self._lock:
                    value = self._get_locked(key)
                    flight.invalidated = False
                if value is not None:
                    return value

                logger.debug(f"Cache miss for {key}, computing")
                value = compute()

                with self._lock:
                    if not flight.invalidated:
                        self._put_locked(key, value, ttl_seconds)
                    else:
                        logger.debug(f"Discarded result for {key}: invalidated during compute")
                return value
        finally:
            with self._lock:
                flight.waiters -= 1
                if flight.waiters == 0:
                    self._in_flight.pop(key, None)

    # =========================================================================
    # INTERNAL HELPERS (caller holds self._lock)
    # =========================================================================

    def _get_locked(self, key: CacheKey) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            logger.debug(f"Cache expired for {key}")
            return None

        self._entries.move_to_end(key)
        logger.debug(f"Cache hit for {key}")
        return value

    def _put_locked(self, key: CacheKey, value: Any, ttl_seconds: float | None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if key in self._entries:
            del self._entries[key]
        while len(self._entries) >= self._max_size:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            logger.debug(f"Cache evicted {oldest_key} (LRU)")
        self._entries[key] = (self._clock() + ttl, value)
