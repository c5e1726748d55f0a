"""
Upstream Package

Client for the external time-series API this backend fronts with a cache.

Structure:
    upstream/
    ├── __init__.py          # This file
    └── api_client.py        # REST client with aiohttp
"""

from upstream.api_client import TimeSeriesAPIClient, UpstreamError

__all__ = ["TimeSeriesAPIClient", "UpstreamError"]
