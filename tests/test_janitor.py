"""
Tests for the background cache janitor.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from manga_slicer.images.janitor import CacheJanitor
from manga_slicer.images.store import ImageStore

from .helpers import SOURCE_URL


@pytest.fixture
def store(fake_fetcher, clock):
    """Create an ImageStore on a manual clock."""
    return ImageStore(fetcher=fake_fetcher, ttl=300, clock=clock)


class TestCacheJanitor:
    """Test CacheJanitor class."""

    @pytest.mark.asyncio
    async def test_run_once_sweeps_expired(self, store, clock):
        """Test a single run removes expired entries."""
        await store.put(SOURCE_URL, b"data")
        clock.advance(301)

        removed = await CacheJanitor(store).run_once()

        assert removed == 1
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_background_loop_sweeps(self, store, clock):
        """Test the started loop sweeps on its interval."""
        await store.put(SOURCE_URL, b"data")
        clock.advance(301)
        janitor = CacheJanitor(store, interval=0.01)

        janitor.start()
        try:
            for _ in range(50):
                if len(store) == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            await janitor.stop()

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_expired_key_refetched_after_sweep(self, store, fake_fetcher, clock):
        """Test after a sweep the next request invokes the fetcher again."""
        await store.fetch(SOURCE_URL)
        clock.advance(301)
        await CacheJanitor(store).run_once()

        await store.fetch(SOURCE_URL)

        assert len(fake_fetcher.calls) == 2

    @pytest.mark.asyncio
    async def test_start_stop(self, store):
        """Test running reflects the task state."""
        janitor = CacheJanitor(store, interval=60)

        assert janitor.running is False
        janitor.start()
        assert janitor.running is True
        await janitor.stop()
        assert janitor.running is False

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self, store):
        """Test start is idempotent while running."""
        janitor = CacheJanitor(store, interval=60)

        janitor.start()
        task = janitor._task
        janitor.start()

        assert janitor._task is task
        await janitor.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, store):
        """Test stop is a no-op when never started."""
        await CacheJanitor(store).stop()

    @pytest.mark.asyncio
    async def test_sweep_failure_keeps_loop_alive(self, store):
        """Test an exception in one sweep does not end the loop."""
        calls = []

        def flaky_sweep():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return 0

        store.sweep = AsyncMock(side_effect=flaky_sweep)
        janitor = CacheJanitor(store, interval=0.01)

        janitor.start()
        try:
            for _ in range(50):
                if store.sweep.await_count >= 2:
                    break
                await asyncio.sleep(0.01)
            assert janitor.running is True
        finally:
            await janitor.stop()

        assert store.sweep.await_count >= 2
