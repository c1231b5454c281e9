"""
Tests for batched concurrent fetching.
"""

import asyncio

import pytest

from hornets_dashboard.services import batching
from hornets_dashboard.services.batching import chunked, fetch_in_batches

_real_sleep = asyncio.sleep


@pytest.fixture
def recorded_sleeps(monkeypatch):
    """Replace the inter-batch pause with a recorder that does not wait."""
    delays = []

    async def fake_sleep(delay, *args, **kwargs):
        if delay:
            delays.append(delay)
        await _real_sleep(0)

    monkeypatch.setattr(batching.asyncio, "sleep", fake_sleep)
    return delays


class TestChunked:
    def test_even_split(self):
        assert chunked([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]

    def test_remainder(self):
        assert chunked([1, 2, 3, 4, 5, 6, 7], 5) == [[1, 2, 3, 4, 5], [6, 7]]

    def test_empty(self):
        assert chunked([], 5) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunked([1], 0)


class TestFetchInBatches:
    async def test_every_key_fetched(self, recorded_sleeps):
        async def fetch(key):
            return [key * 10]

        result = await fetch_in_batches(list(range(12)), fetch, batch_size=5, delay_seconds=0.5)
        assert result == {key: [key * 10] for key in range(12)}

    async def test_concurrency_bounded_by_batch_size(self, recorded_sleeps):
        in_flight = 0
        peak = 0

        async def fetch(key):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await _real_sleep(0)
            await _real_sleep(0)
            in_flight -= 1
            return []

        await fetch_in_batches(list(range(13)), fetch, batch_size=5, delay_seconds=0.5)
        assert peak == 5

    async def test_batches_do_not_overlap(self, recorded_sleeps):
        events = []

        async def fetch(key):
            events.append(("start", key))
            await _real_sleep(0)
            events.append(("end", key))
            return []

        await fetch_in_batches([1, 2, 3, 4], fetch, batch_size=2, delay_seconds=0.5)
        second_batch_start = events.index(("start", 3))
        assert ("end", 1) in events[:second_batch_start]
        assert ("end", 2) in events[:second_batch_start]

    async def test_delay_only_between_batches(self, recorded_sleeps):
        async def fetch(key):
            return []

        await fetch_in_batches(list(range(11)), fetch, batch_size=5, delay_seconds=0.5)
        assert recorded_sleeps == [0.5, 0.5]

    async def test_single_batch_has_no_delay(self, recorded_sleeps):
        async def fetch(key):
            return []

        await fetch_in_batches([1, 2, 3], fetch, batch_size=5, delay_seconds=0.5)
        assert recorded_sleeps == []

    async def test_failed_key_maps_to_empty_list(self, recorded_sleeps):
        async def fetch(key):
            if key == 2:
                raise RuntimeError("upstream exploded")
            return [key]

        result = await fetch_in_batches([1, 2, 3], fetch, batch_size=2, delay_seconds=0)
        assert result == {1: [1], 2: [], 3: [3]}

    async def test_empty_keys(self, recorded_sleeps):
        async def fetch(key):
            raise AssertionError("should not be called")

        assert await fetch_in_batches([], fetch) == {}
        assert recorded_sleeps == []
