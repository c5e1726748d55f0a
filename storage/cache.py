"""
In-Memory TTL Cache

Process-local key/value store with per-key expiry, used to hold the full
time series of every symbol/period pair the upstream API has returned.

Expiry happens two ways:
- Passively: get()/has() never return an entry whose TTL has elapsed,
  whether or not a sweep has run since.
- Actively: a background asyncio task removes expired keys every
  `check_period` seconds, independent of access patterns.

Usage:
    cache: TTLCache[Tuple[TimeSeriesEntry, ...]] = TTLCache(default_ttl=600, check_period=120)
    await cache.start_sweeper()

    cache.set("AAPL-1min", entries)
    cache.get("AAPL-1min")      # entries, or None once expired

    await cache.stop_sweeper()
    cache.clear()
"""

import asyncio
import contextlib
import time
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from core.logging import get_logger

V = TypeVar("V")


class CacheEntry(Generic[V]):
    """Stored value plus its absolute expiry on the cache clock (None = never)"""

    __slots__ = ("value", "expires_at")

    def __init__(self, value: V, expires_at: Optional[float]) -> None:
        self.value = value
        self.expires_at = expires_at


class TTLCache(Generic[V]):
    """
    Key/value store with per-key time-to-live.

    Attributes:
        default_ttl: TTL in seconds applied when set() is called without one
        check_period: Seconds between background sweeps

    Notes:
        - A TTL of 0 stores the value without expiry
        - Not thread-safe; meant to be used from a single event loop
        - `clock` must be monotonic and return seconds
    """

    def __init__(
        self,
        default_ttl: int = 600,
        check_period: int = 120,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        if default_ttl < 0:
            raise ValueError(f"default_ttl cannot be negative: {default_ttl}")
        if check_period <= 0:
            raise ValueError(f"check_period must be positive: {check_period}")

        self.default_ttl = default_ttl
        self.check_period = check_period
        self._clock = clock
        self._store: Dict[str, CacheEntry[V]] = {}
        self._hits = 0
        self._misses = 0
        self._task: Optional[asyncio.Task] = None
        self._logger = get_logger(__name__)

    # ============================================
    # Key/Value Operations
    # ============================================

    def set(self, key: str, value: V, ttl: Optional[int] = None) -> bool:
        """
        Store a value, replacing any existing entry and resetting its expiry.

        Args:
            key: Cache key
            value: Value to store
            ttl: Seconds until expiry (default_ttl if None, 0 = never)

        Returns:
            True once the value is stored
        """
        ttl = self.default_ttl if ttl is None else ttl
        if ttl < 0:
            raise ValueError(f"ttl cannot be negative: {ttl}")

        expires_at = self._clock() + ttl if ttl > 0 else None
        self._store[key] = CacheEntry(value, expires_at)
        return True

    def get(self, key: str) -> Optional[V]:
        """
        Return the value for `key`, or None if it was never set or has expired.
        """
        entry = self._store.get(key)
        if entry is None:
            self._misses += 1
            return None
        if self._is_expired(entry):
            del self._store[key]
            self._misses += 1
            return None
        self._hits += 1
        return entry.value

    def has(self, key: str) -> bool:
        """True if `key` holds an unexpired value. Does not touch hit/miss counters."""
        entry = self._store.get(key)
        if entry is None:
            return False
        if self._is_expired(entry):
            del self._store[key]
            return False
        return True

    def delete(self, key: str) -> int:
        """Remove `key`. Returns the number of entries removed (0 or 1)."""
        if key not in self._store:
            return 0
        del self._store[key]
        return 1

    def clear(self) -> None:
        """Remove every entry and reset the statistics."""
        self._store.clear()
        self._hits = 0
        self._misses = 0

    def keys(self) -> List[str]:
        """Keys with unexpired values."""
        return [key for key, entry in self._store.items() if not self._is_expired(entry)]

    def stats(self) -> Dict[str, int]:
        """Hit/miss counters and the number of unexpired keys."""
        return {"hits": self._hits, "misses": self._misses, "keys": len(self.keys())}

    def __len__(self) -> int:
        # Raw entry count, including expired entries not yet swept
        return len(self._store)

    # ============================================
    # Expiry
    # ============================================

    def _is_expired(self, entry: CacheEntry[V]) -> bool:
        return entry.expires_at is not None and self._clock() >= entry.expires_at

    def prune_expired(self) -> int:
        """
        Remove every expired entry now.

        Returns:
            Number of entries removed
        """
        expired = [key for key, entry in self._store.items() if self._is_expired(entry)]
        for key in expired:
            del self._store[key]
        if expired:
            self._logger.debug(f"Pruned {len(expired)} expired key(s)")
        return len(expired)

    async def start_sweeper(self) -> None:
        """Start the background expiry sweep (no-op if already running)."""
        if self._task is not None:
            return
        self._logger.info(f"Starting cache sweeper (every {self.check_period}s)")
        self._task = asyncio.create_task(self._sweep_loop(), name="cache_sweeper")

    async def stop_sweeper(self) -> None:
        """Cancel the background sweep and wait for it to finish."""
        if self._task is None:
            return
        self._logger.info("Stopping cache sweeper")
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def sweeper_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.check_period)
            self.prune_expired()
