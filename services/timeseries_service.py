"""
Time-Series Retrieval Service

Serves (symbol, period, start, end) lookups from the cache, falling back to
the upstream API on a miss.

Cache contract:
    A cache key always holds the *entire* known series for its symbol/period.
    Range filtering happens on read, never before a write.

Miss behaviour:
    The upstream only offers the full catalog, so a single miss fetches
    everything and writes every series it returned under its own key. One cold
    request therefore primes the cache for all other symbol/period pairs.

Concurrent misses are not coalesced: two requests missing at the same time
both call the upstream and the later bulk write wins.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from core.errors import RetrievalError
from core.logging import get_logger
from core.schemas import TimeSeriesEntry
from storage.cache import TTLCache
from upstream.api_client import TimeSeriesAPIClient, UpstreamError

logger = get_logger(__name__)

RETRIEVAL_FAILED_MESSAGE = "Failed to fetch data from external API"

SeriesCache = TTLCache[Tuple[TimeSeriesEntry, ...]]


def cache_key(symbol: str, period: str) -> str:
    """Cache key for one series, e.g. "AAPL-1min"."""
    return f"{symbol}-{period}"


def filter_range(
    entries: Iterable[TimeSeriesEntry],
    start: datetime,
    end: datetime
) -> List[TimeSeriesEntry]:
    """Entries with start <= time <= end (both bounds inclusive, compared as UTC instants)."""
    return [entry for entry in entries if start <= entry.instant <= end]


class TimeSeriesService:
    """
    Cache-or-fetch lookup of time-series ranges.

    Attributes:
        cache: Store of full series keyed by cache_key()
        client: Upstream API client (opened by the caller)
        ttl: TTL applied to every series written after a miss (None = cache default)
    """

    def __init__(self, cache: SeriesCache, client: TimeSeriesAPIClient, ttl: Optional[int] = None):
        self.cache = cache
        self.client = client
        self.ttl = ttl

    async def fetch_range(
        self,
        symbol: str,
        period: str,
        start: datetime,
        end: datetime
    ) -> List[TimeSeriesEntry]:
        """
        Return the entries of `symbol`/`period` between `start` and `end`.

        Args:
            symbol: Asset symbol, matched exactly
            period: Sampling period, matched exactly
            start: Inclusive lower bound (timezone-aware)
            end: Inclusive upper bound (timezone-aware)

        Returns:
            Matching entries in stored order; empty if none fall in range

        Raises:
            RetrievalError: If the upstream call fails or the series does not exist
        """
        key = cache_key(symbol, period)
        cached = self.cache.get(key)

        # An empty tuple is a valid cached series, so test against None
        if cached is not None:
            logger.info(f"Cache hit for key: {key}")
            return filter_range(cached, start, end)

        logger.warning(f"Cache miss for key: {key}. Fetching from external API...")
        try:
            catalog = await self.client.fetch_catalog()
        except UpstreamError as e:
            logger.error(f"Error fetching data from external API: {e}")
            raise RetrievalError(RETRIEVAL_FAILED_MESSAGE) from e

        requested: Optional[Tuple[TimeSeriesEntry, ...]] = None
        for series in catalog:
            series_key = cache_key(series.symbol, series.period)
            entries = tuple(series.data)
            self.cache.set(series_key, entries, self.ttl)
            logger.info(f"Data cached for key: {series_key} ({len(entries)} entries)")
            if series.symbol == symbol and series.period == period:
                requested = entries

        if not requested:
            logger.error(f"Requested data not found in the external API for key: {key}")
            raise RetrievalError(RETRIEVAL_FAILED_MESSAGE)

        logger.info(f"Successfully fetched and filtered data from the external API for {key}")
        return filter_range(requested, start, end)
