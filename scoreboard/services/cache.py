"""
Shared snapshot cache.

Many readers (query routes, the summary task) and one writer (the refresh
task) share a single Dashboard. Writers never mutate the published value:
they build a new Dashboard and swap the reference under the exclusive lock,
so a reader sees either the old or the new snapshot, never a mix.

ReadWriteLock is writer-preferring: once a writer is waiting, new readers
queue behind it, so a steady stream of reads can't starve a refresh.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

from scoreboard.models import Dashboard, ScoreTable

logger = logging.getLogger(__name__)


class ReadWriteLock:
    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._writers_waiting == 0)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                self._writers_waiting -= 1
                # readers gated on waiting writers must re-check
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class SnapshotCache:
    """Holds the latest Dashboard. All mutation goes through replace()/initialize()."""

    def __init__(self, initial: Optional[Dashboard] = None):
        self._dashboard = initial if initial is not None else Dashboard()
        self._lock = ReadWriteLock()
        self.replaced = 0

    def peek(self) -> Dashboard:
        """Lock-free read; the reference swap itself is atomic."""
        return self._dashboard

    async def read(self) -> Dashboard:
        async with self._lock.read():
            return self._dashboard

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[Dashboard]:
        """Hold the shared lock across several lookups on one snapshot."""
        async with self._lock.read():
            yield self._dashboard

    async def is_initialized(self) -> bool:
        return (await self.read()).is_initialized

    async def replace(self, new: Dashboard) -> Dashboard:
        """Swap in `new` and return the previous snapshot."""
        logger.debug("Acquiring WRITE lock on dashboard...")
        async with self._lock.write():
            previous = self._dashboard
            self._dashboard = new
            self.replaced += 1
        logger.debug(
            "Dashboard replaced (%s → %s participant(s))",
            _size(previous),
            _size(new),
        )
        return previous

    async def initialize(self, tables: Iterable[ScoreTable]) -> bool:
        """Set the first snapshot. Rejected (False) once a snapshot exists."""
        async with self._lock.write():
            if self._dashboard.is_initialized:
                logger.error("Dashboard initialization rejected: already initialized")
                return False
            self._dashboard = Dashboard.from_tables(tables)
        logger.info("Dashboard initialized (%s participant(s))", _size(self._dashboard))
        return True


def _size(dashboard: Dashboard) -> str:
    return "none" if dashboard.tables is None else str(len(dashboard.tables))
