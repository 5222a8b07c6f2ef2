"""
Tests for the statistics cache
"""
import pytest

from retailpulse.modules.reports.schemas import FilterSpec, StatisticsBundle
from retailpulse.modules.reports.services.cache import StatisticsCache


class TestStatisticsCache:

    def test_hit_returns_same_bundle(self):
        cache = StatisticsCache()
        calls = []

        def compute():
            calls.append(1)
            return StatisticsBundle(total_orders=1)

        first = cache.get_or_compute("v1", FilterSpec(), 10, compute)
        second = cache.get_or_compute("v1", FilterSpec(), 10, compute)

        assert first is second
        assert len(calls) == 1
        assert cache.hits == 1
        assert cache.misses == 1

    def test_key_includes_version_filters_and_top_n(self):
        cache = StatisticsCache()
        cache.get_or_compute("v1", FilterSpec(), 10, StatisticsBundle)
        cache.get_or_compute("v2", FilterSpec(), 10, StatisticsBundle)
        cache.get_or_compute("v1", FilterSpec(status="completed"), 10, StatisticsBundle)
        cache.get_or_compute("v1", FilterSpec(), 5, StatisticsBundle)
        assert len(cache) == 4
        assert cache.hits == 0

    def test_least_recently_used_evicted(self):
        cache = StatisticsCache(max_entries=2)
        cache.put(cache.make_key("a", FilterSpec(), 10), StatisticsBundle())
        cache.put(cache.make_key("b", FilterSpec(), 10), StatisticsBundle())
        cache.get(cache.make_key("a", FilterSpec(), 10))
        cache.put(cache.make_key("c", FilterSpec(), 10), StatisticsBundle())

        assert cache.get(cache.make_key("b", FilterSpec(), 10)) is None
        assert cache.get(cache.make_key("a", FilterSpec(), 10)) is not None
        assert len(cache) == 2

    def test_zero_entries_disables_cache(self):
        cache = StatisticsCache(max_entries=0)
        cache.get_or_compute("v1", FilterSpec(), 10, StatisticsBundle)
        assert len(cache) == 0

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            StatisticsCache(max_entries=-1)

    def test_clear(self):
        cache = StatisticsCache()
        cache.get_or_compute("v1", FilterSpec(), 10, StatisticsBundle)
        cache.clear()
        assert len(cache) == 0
        assert cache.misses == 0
