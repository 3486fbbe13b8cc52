"""
In-memory image store.

Caches raw source image bytes per URL for a fixed TTL and collapses
concurrent misses for the same URL into a single fetch.
"""

import asyncio
import time
from collections.abc import Callable

from loguru import logger

from ..errors import FetchError
from ..fetchers.base import ImageFetcher
from .base import CacheEntry


class ImageStore:
    """Time-expiring cache of source images in front of an ImageFetcher."""

    def __init__(
        self,
        fetcher: ImageFetcher,
        ttl: float = 300.0,
        strict_content_length: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            fetcher: Collaborator that downloads raw bytes for a URL
            ttl: Seconds an entry stays fresh
            strict_content_length: Raise FetchError when the received body
                length differs from the announced Content-Length. When False
                the mismatch is only logged.
            clock: Monotonic time source
        """
        self.fetcher = fetcher
        self.ttl = ttl
        self.strict_content_length = strict_content_length
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[bytes]] = {}
        self._lock = asyncio.Lock()
        logger.debug("ImageStore initialized: ttl={}s", ttl)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def is_expired(self, entry: CacheEntry) -> bool:
        """True once the entry is older than the TTL."""
        return entry.age(self._clock()) > self.ttl

    async def fetch(self, key: str) -> bytes:
        """
        Return the bytes for a URL, fetching them on a miss.

        Concurrent callers missing on the same key share one fetch. The
        fetch runs as its own task, so a caller that is cancelled does not
        abort it; the result still lands in the cache.

        Raises:
            FetchError: If the fetcher fails
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self.is_expired(entry):
                logger.debug("Using cached image: {}", key[:80])
                return entry.data

            task = self._inflight.get(key)
            if task is None:
                logger.info("Downloading new image: {}", key[:80])
                task = asyncio.create_task(self._load(key))
                self._inflight[key] = task
                task.add_done_callback(lambda t, key=key: self._release(key, t))
            else:
                logger.debug("Joining in-flight fetch: {}", key[:80])

        return await asyncio.shield(task)

    async def get(self, key: str) -> bytes | None:
        """Return cached bytes if present and fresh, without fetching."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None or self.is_expired(entry):
                return None
            return entry.data

    async def put(self, key: str, data: bytes) -> CacheEntry:
        """Store bytes for a URL, replacing any previous entry."""
        entry = CacheEntry(key=key, data=data, stored_at=self._clock())
        async with self._lock:
            self._entries[key] = entry
        return entry

    async def sweep(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.age(now) > self.ttl]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept {} expired images", len(expired))
        return len(expired)

    async def clear(self) -> int:
        """Drop all entries. Returns the number removed."""
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    async def aclose(self) -> None:
        """
        Cancel in-flight fetches and wait for them to finish.

        Must run before the fetcher's transport is closed.
        """
        async with self._lock:
            pending = list(self._inflight.values())
        if not pending:
            return
        logger.debug("Cancelling {} in-flight fetches", len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def _load(self, key: str) -> bytes:
        result = await self.fetcher.fetch(key)
        data = result.content

        expected = result.expected_length
        if expected is not None and expected != len(data):
            if self.strict_content_length:
                raise FetchError(
                    f"Incomplete download: expected {expected} bytes, received {len(data)}"
                )
            logger.warning(
                "Content-Length mismatch for {}. Expected: {}, Received: {}",
                key[:80],
                expected,
                len(data),
            )

        entry = await self.put(key, data)
        logger.debug("Cached {} bytes for {}", len(entry.data), key[:80])
        return entry.data

    def _release(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Fetch failed for {}: {}", key[:80], task.exception())
