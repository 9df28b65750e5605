import asyncio

import pytest

from manhwa_tracker.services.crawl.base import Entry
from manhwa_tracker.services.crawl.errors import OriginStatusError
from manhwa_tracker.services.update_cache import UpdateCache


class _FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class _FakeFetcher:
    """Returns a new batch per call, or raises the queued exception."""

    def __init__(self):
        self.calls = 0
        self.fail_with = None

    async def __call__(self):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return [Entry.build(title=f"Batch {self.calls}", slug=f"batch-{self.calls}", chapter="Chapter 1", time="1 hour ago")]


def make_cache(ttl: float = 300.0):
    clock = _FakeClock()
    fetcher = _FakeFetcher()
    cache = UpdateCache(fetcher, ttl=ttl, clock=clock, wall_clock=lambda: 1730462400.0)
    return cache, fetcher, clock


def test_starts_empty():
    cache, fetcher, _ = make_cache()
    assert cache.peek() is None
    assert not cache.is_fresh()
    assert fetcher.calls == 0


def test_two_calls_within_ttl_fetch_once():
    cache, fetcher, clock = make_cache()

    async def scenario():
        first = await cache.get_entries()
        clock.advance(299)
        second = await cache.get_entries()
        return first, second

    first, second = asyncio.run(scenario())
    assert first is second
    assert fetcher.calls == 1
    assert cache.peek().fetched_at == 1730462400.0


def test_call_after_ttl_refetches_once():
    cache, fetcher, clock = make_cache()

    async def scenario():
        first = await cache.get_entries()
        clock.advance(300)
        second = await cache.get_entries()
        third = await cache.get_entries()
        return first, second, third

    first, second, third = asyncio.run(scenario())
    assert fetcher.calls == 2
    assert first[0].slug == "batch-1"
    assert second[0].slug == "batch-2"
    assert third is second


def test_failure_with_cached_batch_keeps_previous_slot():
    cache, fetcher, clock = make_cache()

    async def scenario():
        before = await cache.get_slot()
        clock.advance(301)
        fetcher.fail_with = OriginStatusError(503)
        with pytest.raises(OriginStatusError):
            await cache.get_entries()
        assert cache.peek() is before
        fetcher.fail_with = None
        after = await cache.get_slot()
        return before, after

    before, after = asyncio.run(scenario())
    assert before.entries[0].slug == "batch-1"
    assert after.entries[0].slug == "batch-3"
    assert fetcher.calls == 3


def test_failure_when_empty_stores_nothing():
    cache, fetcher, _ = make_cache()
    fetcher.fail_with = RuntimeError("boom")
    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(cache.get_entries())
    assert cache.peek() is None

    fetcher.fail_with = None
    entries = asyncio.run(cache.get_entries())
    assert entries[0].slug == "batch-2"


def test_concurrent_misses_share_one_refresh():
    clock = _FakeClock()
    calls = {"n": 0}

    async def slow_fetcher():
        calls["n"] += 1
        await asyncio.sleep(0.01)
        return [Entry.build(title="A", slug="a", chapter="Chapter 1", time="1 hour ago")]

    cache = UpdateCache(slow_fetcher, ttl=300, clock=clock)

    async def scenario():
        return await asyncio.gather(*[cache.get_entries() for _ in range(5)])

    results = asyncio.run(scenario())
    assert calls["n"] == 1
    assert all(r is results[0] for r in results)


def test_concurrent_misses_share_one_failure():
    clock = _FakeClock()
    calls = {"n": 0}

    async def failing_fetcher():
        calls["n"] += 1
        await asyncio.sleep(0.01)
        raise OriginStatusError(503)

    cache = UpdateCache(failing_fetcher, ttl=300, clock=clock)

    async def scenario():
        return await asyncio.gather(*[cache.get_entries() for _ in range(5)], return_exceptions=True)

    results = asyncio.run(scenario())
    assert calls["n"] == 1
    assert len(results) == 5
    assert all(isinstance(r, OriginStatusError) for r in results)
    assert cache.peek() is None


def test_fetched_at_is_taken_before_the_origin_request():
    clock = _FakeClock()
    wall = _FakeClock(start=1730462400.0)

    async def slow_origin():
        wall.advance(12.0)
        return [Entry.build(title="A", slug="a", chapter="Chapter 1", time="1 hour ago")]

    cache = UpdateCache(slow_origin, ttl=300, clock=clock, wall_clock=wall)
    slot = asyncio.run(cache.get_slot())
    assert slot.fetched_at == 1730462400.0
    assert wall.now == 1730462412.0
