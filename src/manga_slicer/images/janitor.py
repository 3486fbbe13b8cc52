"""
Background cache maintenance.

Periodically sweeps expired entries out of an ImageStore.
"""

import asyncio

from loguru import logger

from .store import ImageStore


class CacheJanitor:
    """Runs ImageStore.sweep() on a fixed interval in a background task."""

    def __init__(self, store: ImageStore, interval: float = 60.0):
        """
        Initialize the janitor.

        Args:
            store: Store to sweep
            interval: Seconds between sweeps
        """
        self.store = store
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """True while the background task is alive."""
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """Sweep once and return the number of entries removed."""
        removed = await self.store.sweep()
        if removed:
            logger.info("Cache sweep removed {} expired images", removed)
        return removed

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="cache-janitor")
        logger.debug("Cache janitor started: interval={}s", self.interval)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Cache janitor stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.run_once()
            except Exception as e:
                logger.error("Cache sweep failed: {}", e)
