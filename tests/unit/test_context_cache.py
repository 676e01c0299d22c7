"""Unit tests for ContextCache."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from dashcontext.models.domain import DomainContext
from dashcontext.resolver.cache import ContextCache
from dashcontext.types import ContextType

AGENCY = DomainContext(context_type=ContextType.AGENCY, agency_slug="acme")
CLIENT = DomainContext(context_type=ContextType.CLIENT, agency_slug="acme", client_slug="widgetco")


@pytest.mark.unit
class TestContextCache:
    def test_defaults(self, clock) -> None:
        cache = ContextCache(clock=clock)
        assert len(cache) == 0
        cache.put(("total-dash.com", "/acme"), AGENCY)
        clock.advance(300)
        assert cache.get(("total-dash.com", "/acme")) is AGENCY
        clock.advance(1)
        assert cache.get(("total-dash.com", "/acme")) is None

    def test_default_high_water_mark(self, clock) -> None:
        cache = ContextCache(clock=clock)
        for i in range(1000):
            cache.put(("total-dash.com", f"/agency-{i}"), AGENCY)
        clock.advance(301)
        assert cache.maybe_evict() == 0
        assert len(cache) == 1000
        cache.put(("total-dash.com", "/fresh"), AGENCY)
        assert len(cache) == 1

    def test_put_and_get(self, clock) -> None:
        cache = ContextCache(clock=clock)
        cache.put(("total-dash.com", "/acme"), AGENCY)
        assert cache.get(("total-dash.com", "/acme")) is AGENCY

    def test_missing_key(self, clock) -> None:
        cache = ContextCache(clock=clock)
        assert cache.get(("total-dash.com", "/acme")) is None

    def test_key_includes_path(self, clock) -> None:
        cache = ContextCache(clock=clock)
        cache.put(("total-dash.com", "/acme"), AGENCY)
        assert cache.get(("total-dash.com", "/acme/widgetco")) is None

    def test_entry_live_at_ttl_boundary(self, clock) -> None:
        cache = ContextCache(ttl_seconds=60, clock=clock)
        cache.put(("d", "/p"), AGENCY)
        clock.advance(60)
        assert cache.get(("d", "/p")) is AGENCY

    def test_stale_entry_is_a_miss_but_kept(self, clock) -> None:
        cache = ContextCache(ttl_seconds=60, clock=clock)
        cache.put(("d", "/p"), AGENCY)
        clock.advance(61)
        assert cache.get(("d", "/p")) is None
        assert len(cache) == 1

    def test_overwrite_refreshes_timestamp(self, clock) -> None:
        cache = ContextCache(ttl_seconds=60, clock=clock)
        cache.put(("d", "/p"), AGENCY)
        clock.advance(50)
        cache.put(("d", "/p"), CLIENT)
        clock.advance(50)
        assert cache.get(("d", "/p")) is CLIENT

    def test_no_eviction_below_high_water_mark(self, clock) -> None:
        cache = ContextCache(ttl_seconds=10, max_entries=3, clock=clock)
        for i in range(3):
            cache.put(("d", f"/{i}"), AGENCY)
        clock.advance(20)
        assert cache.maybe_evict() == 0
        assert len(cache) == 3

    def test_eviction_above_high_water_mark_drops_only_stale(self, clock) -> None:
        cache = ContextCache(ttl_seconds=10, max_entries=3, clock=clock)
        for i in range(3):
            cache.put(("d", f"/old-{i}"), AGENCY)
        clock.advance(20)
        cache.put(("d", "/fresh"), CLIENT)  # fourth entry crosses the mark
        assert len(cache) == 1
        assert cache.get(("d", "/fresh")) is CLIENT

    def test_eviction_keeps_live_entries_over_the_mark(self, clock) -> None:
        cache = ContextCache(ttl_seconds=10, max_entries=2, clock=clock)
        for i in range(4):
            cache.put(("d", f"/{i}"), AGENCY)
        assert len(cache) == 4

    def test_clear(self, clock) -> None:
        cache = ContextCache(clock=clock)
        cache.put(("d", "/p"), AGENCY)
        cache.clear()
        assert len(cache) == 0
        assert cache.get(("d", "/p")) is None

    def test_concurrent_puts_from_threads(self, clock) -> None:
        cache = ContextCache(clock=clock)

        def fill(worker: int) -> None:
            for i in range(50):
                cache.put(("total-dash.com", f"/w{worker}/{i}"), AGENCY)

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(fill, range(4)))
        assert len(cache) == 200
