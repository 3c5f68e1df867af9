"""Tests for the metrics TTL cache."""

from __future__ import annotations

import time
from datetime import date
from unittest.mock import patch

import pytest

from strategy_dashboard.metrics.cache import MetricsCache


class TestMetricsCache:
    def test_set_and_get(self):
        cache = MetricsCache(ttl_seconds=10.0)
        cache.set("key", {"value": 42})
        assert cache.get("key") == {"value": 42}

    def test_missing_key(self):
        assert MetricsCache().get("nope") is None

    def test_expiry(self):
        cache = MetricsCache(ttl_seconds=0.5)
        cache.set("key", "data")
        assert cache.get("key") == "data"

        original_time = time.monotonic()
        with patch("strategy_dashboard.metrics.cache.time") as mock_time:
            mock_time.monotonic.return_value = original_time + 1.0
            assert cache.get("key") is None
        assert len(cache) == 0

    def test_invalidate(self):
        cache = MetricsCache()
        cache.set("key", "data")
        cache.invalidate("key")
        assert cache.get("key") is None

    def test_invalidate_missing(self):
        MetricsCache().invalidate("nope")  # Should not raise

    def test_clear(self):
        cache = MetricsCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0

    def test_expired_entry_already_removed_by_another_reader(self):
        cache = MetricsCache(ttl_seconds=0.5)
        cache.set("k", "data")

        class _RacingStore(dict):
            """Another request evicts the key right after this one reads it."""

            def get(self, key, default=None):
                entry = super().get(key, default)
                super().pop(key, None)
                return entry

        cache._store = _RacingStore(cache._store)
        original_time = time.monotonic()
        with patch("strategy_dashboard.metrics.cache.time") as mock_time:
            mock_time.monotonic.return_value = original_time + 1.0
            assert cache.get("k") is None
        assert len(cache) == 0

    def test_set_sweeps_expired_entries(self):
        cache = MetricsCache(ttl_seconds=0.5)
        cache.set("metrics:2024-01-01:2024-01-31:*", 1)
        cache.set("metrics:2024-02-01:2024-02-29:*", 2)

        original_time = time.monotonic()
        with patch("strategy_dashboard.metrics.cache.time") as mock_time:
            mock_time.monotonic.return_value = original_time + 1.0
            cache.set("metrics:2024-03-01:2024-03-31:*", 3)
            assert len(cache) == 1
            assert cache.get("metrics:2024-03-01:2024-03-31:*") == 3


class TestGetOrCompute:
    def test_computes_once(self):
        cache = MetricsCache()
        calls = []

        def compute():
            calls.append(1)
            return "result"

        assert cache.get_or_compute("k", compute) == "result"
        assert cache.get_or_compute("k", compute) == "result"
        assert len(calls) == 1

    def test_exception_not_cached(self):
        cache = MetricsCache()

        def boom():
            raise ValueError("bad window")

        with pytest.raises(ValueError):
            cache.get_or_compute("k", boom)
        assert cache.get("k") is None


class TestCacheKey:
    def test_with_symbol(self):
        key = MetricsCache.key("metrics", date(2024, 1, 1), date(2024, 1, 31), "/ES")
        assert key == "metrics:2024-01-01:2024-01-31:/ES"

    def test_without_symbol(self):
        key = MetricsCache.key("watermarks", date(2024, 12, 31), date(2024, 12, 31))
        assert key == "watermarks:2024-12-31:2024-12-31:*"
