"""
Unit Tests for the TTL Cache

These tests verify that TTLCache:
- Stores, returns, deletes and clears values
- Reports expired keys as absent even before a sweep runs
- Removes expired keys in the background sweep

Run with:
    pytest tests/unit/test_cache.py -v
"""

import asyncio

import pytest

from storage.cache import TTLCache


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=600, check_period=120, clock=clock)


# ============================================
# Basic Operations
# ============================================

class TestBasicOperations:
    """set / get / delete / clear"""

    def test_set_then_get_returns_value(self, cache):
        assert cache.set("testKey", "testValue") is True
        assert cache.get("testKey") == "testValue"

    def test_get_missing_key_returns_none(self, cache):
        assert cache.get("missingKey") is None

    def test_set_overwrites_existing_value(self, cache):
        cache.set("key", "old")
        cache.set("key", "new")
        assert cache.get("key") == "new"
        assert len(cache) == 1

    def test_delete_existing_key_returns_one(self, cache):
        cache.set("testKey", "testValue")
        assert cache.delete("testKey") == 1
        assert cache.get("testKey") is None

    def test_delete_missing_key_returns_zero(self, cache):
        assert cache.delete("missingKey") == 0

    def test_clear_removes_every_key(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.clear()
        assert cache.get("key1") is None
        assert cache.get("key2") is None
        assert len(cache) == 0

    def test_empty_sequence_is_a_stored_value(self, cache):
        cache.set("AAPL-1min", ())
        assert cache.get("AAPL-1min") == ()
        assert cache.has("AAPL-1min")

    def test_keys_lists_live_entries(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        assert sorted(cache.keys()) == ["a", "b"]

    def test_stats_count_hits_and_misses(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("missing")
        assert cache.stats() == {"hits": 2, "misses": 1, "keys": 1}

    def test_negative_ttl_rejected(self, cache):
        with pytest.raises(ValueError):
            cache.set("key", "value", ttl=-1)

    def test_invalid_constructor_arguments(self):
        with pytest.raises(ValueError):
            TTLCache(default_ttl=-5)
        with pytest.raises(ValueError):
            TTLCache(check_period=0)


# ============================================
# Expiry
# ============================================

class TestExpiry:
    """Passive expiry on read and explicit pruning"""

    def test_value_available_until_ttl_elapses(self, cache, clock):
        cache.set("key", "value", ttl=10)
        clock.advance(9.9)
        assert cache.get("key") == "value"

    def test_read_just_past_ttl_reports_absence_without_sweep(self, cache, clock):
        cache.set("key", "value", ttl=10)
        clock.advance(10.001)
        assert cache.get("key") is None
        assert cache.has("key") is False

    def test_default_ttl_applies(self, cache, clock):
        cache.set("key", "value")
        clock.advance(599)
        assert cache.get("key") == "value"
        clock.advance(2)
        assert cache.get("key") is None

    def test_set_resets_expiry(self, cache, clock):
        cache.set("key", "v1", ttl=10)
        clock.advance(8)
        cache.set("key", "v2", ttl=10)
        clock.advance(8)
        assert cache.get("key") == "v2"

    def test_zero_ttl_never_expires(self, cache, clock):
        cache.set("key", "value", ttl=0)
        clock.advance(10 ** 9)
        assert cache.get("key") == "value"

    def test_prune_expired_removes_only_expired(self, cache, clock):
        cache.set("short", 1, ttl=5)
        cache.set("long", 2, ttl=500)
        clock.advance(6)
        assert cache.prune_expired() == 1
        assert len(cache) == 1
        assert cache.keys() == ["long"]

    def test_stats_and_keys_agree_before_sweep(self, cache, clock):
        cache.set("short", 1, ttl=5)
        cache.set("long", 2, ttl=500)
        clock.advance(6)

        assert cache.keys() == ["long"]
        assert cache.stats()["keys"] == 1


# ============================================
# Background Sweep
# ============================================

class TestSweeper:
    """start_sweeper / stop_sweeper lifecycle"""

    @pytest.mark.asyncio
    async def test_sweeper_removes_expired_entries(self, clock):
        cache = TTLCache(default_ttl=1, check_period=0.01, clock=clock)
        cache.set("key", "value")
        clock.advance(2)

        await cache.start_sweeper()
        try:
            for _ in range(100):
                if len(cache) == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            await cache.stop_sweeper()

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self, cache):
        await cache.start_sweeper()
        await cache.start_sweeper()
        assert cache.sweeper_running

        await cache.stop_sweeper()
        await cache.stop_sweeper()
        assert not cache.sweeper_running
