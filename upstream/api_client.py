"""
Time-Series Upstream REST Client

This module provides an async HTTP client for the upstream time-series API.
The upstream exposes a single endpoint that returns the entire catalog:

    GET <UPSTREAM_URL>
    [
      {
        "symbol": "AAPL",
        "period": "1min",
        "data": [
          {"time": "2024-05-14T10:00:00Z", "open": 150, "high": 151, "low": 149, "close": 150},
          ...
        ]
      },
      ...
    ]

The client:
- Performs exactly one attempt per call (no retry policy)
- Applies no timeout unless one is configured
- Validates the response body against TimeSeriesSeries before returning it

Usage:
    async with TimeSeriesAPIClient("http://localhost:4000/timeseries") as client:
        catalog = await client.fetch_catalog()
"""

import asyncio
import time
from typing import Any, List, Optional

import aiohttp
from pydantic import ValidationError

from core.logging import get_logger, log_api_request, log_api_response
from core.schemas import SeriesCatalog, TimeSeriesSeries


class UpstreamError(RuntimeError):
    """The upstream API could not be reached or returned an unusable response."""


class TimeSeriesAPIClient:
    """
    Async HTTP client for the upstream time-series API.

    Attributes:
        base_url: Full URL of the catalog endpoint
        timeout: Optional total timeout in seconds (None = aiohttp default)
        session: aiohttp ClientSession for HTTP requests

    Example:
        >>> async with TimeSeriesAPIClient("http://localhost:4000/timeseries") as client:
        ...     catalog = await client.fetch_catalog()
        ...     print(f"Fetched {len(catalog)} series")

    Notes:
        - Use as a context manager, or call open()/close() explicitly
          (the FastAPI lifespan does the latter)
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None):
        self.base_url = base_url
        self.timeout = timeout
        self.logger = get_logger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    # ============================================
    # Session Management
    # ============================================

    async def open(self) -> "TimeSeriesAPIClient":
        if self.session is None or self.session.closed:
            if self.timeout is not None:
                self.session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                )
            else:
                self.session = aiohttp.ClientSession()
            self.logger.debug("TimeSeriesAPIClient session created")
        return self

    async def close(self) -> None:
        if self.session is not None and not self.session.closed:
            await self.session.close()
            self.logger.debug("TimeSeriesAPIClient session closed")
        self.session = None

    async def __aenter__(self):
        return await self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ============================================
    # HTTP Request Handler
    # ============================================

    async def _get(self) -> Any:
        """
        Make a single GET request to the upstream API.

        Returns:
            Decoded JSON body

        Raises:
            UpstreamError: On non-200 status or transport failure
        """
        if self.session is None:
            raise UpstreamError("Client session not initialized. Use 'async with' statement.")

        log_api_request(self.base_url)
        started = time.perf_counter()

        try:
            async with self.session.get(self.base_url) as resp:
                log_api_response(self.base_url, resp.status, time.perf_counter() - started)
                if resp.status != 200:
                    text = await resp.text()
                    raise UpstreamError(f"HTTP {resp.status} from {self.base_url}: {text[:200]}")
                return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Request to {self.base_url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise UpstreamError(f"Request to {self.base_url} timed out") from e
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {self.base_url}: {e}") from e

    # ============================================
    # API Methods
    # ============================================

    async def fetch_catalog(self) -> List[TimeSeriesSeries]:
        """
        Fetch every series the upstream knows about.

        Returns:
            List of validated TimeSeriesSeries

        Raises:
            UpstreamError: If the request fails or the body does not match the schema
        """
        self.logger.info(f"Fetching full time-series catalog from {self.base_url}")
        data = await self._get()

        try:
            catalog = SeriesCatalog.validate_python(data)
        except ValidationError as e:
            raise UpstreamError(
                f"Upstream response failed validation ({e.error_count()} error(s))"
            ) from e

        self.logger.info(f"Received {len(catalog)} series from upstream")
        return catalog
