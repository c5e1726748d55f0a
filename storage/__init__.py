"""
Storage Package

Holds the process-local cache of full time series.

Current implementation:
- TTLCache: in-memory key/value store with per-key expiry and a background sweep

Nothing here is persisted; the cache dies with the process.
"""

from storage.cache import TTLCache

__all__ = ["TTLCache"]
