"""Periodic eviction of expired departure cache entries."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from wayline.domain.contracts.cache_sweeper import CacheSweeperProtocol

if TYPE_CHECKING:
    from wayline.domain.contracts.departure_cache import DepartureCacheProtocol

logger = logging.getLogger(__name__)


class CacheSweeper(CacheSweeperProtocol):
    """Runs cache eviction as a cancellable background task."""

    def __init__(self, cache: DepartureCacheProtocol, interval_seconds: float) -> None:
        """Initialize the sweeper.

        Args:
            cache: Cache to sweep.
            interval_seconds: Delay between sweeps.
        """
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Whether the sweep loop is active."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the sweeper."""
        if self.running:
            logger.warning("Cache sweeper already running")
            return

        self._task = asyncio.create_task(self._sweep_loop())
        logger.info(f"Started cache sweeper (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the sweeper."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Cache sweeper cancelled")
            logger.info("Stopped cache sweeper")
        self._task = None

    async def sweep_once(self) -> int:
        """Run one sweep, logging instead of raising on failure."""
        try:
            return await self.cache.evict_expired()
        except Exception as e:
            # Keep the loop alive; the next sweep retries
            logger.error(f"Error sweeping departure cache (will retry): {e}", exc_info=True)
            return 0

    async def _sweep_loop(self) -> None:
        """Main sweep loop."""
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                evicted = await self.sweep_once()
                logger.debug(f"Cache sweep evicted {evicted} entries, {len(self.cache)} remain")
        except asyncio.CancelledError:
            logger.debug("Cache sweep loop cancelled")
            raise
