"""
Task manager: the registry of every periodic task in the process.

It owns the single outbound MessageSender and the single SnapshotCache and
hands them to the tasks it creates. Shutdown goes through cancel_all().

Public API
----------
TaskManager(sender, cache)
  .bootstrap(fetcher)                          → bool   (first ingestion)
  .add_refresh_task(fetcher, interval_minutes) → DataRefreshTask
  .add_notification_task(destination, text, at) → FixedNotificationTask
  .add_summary_task(destination, at)           → SummaryNotificationTask
  .tasks() / .get(name) / .active_tasks(category)
  .cancel_all()
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from scoreboard.clients.base import MessageSender
from scoreboard.core.errors import DuplicateTaskError
from scoreboard.services.cache import SnapshotCache
from scoreboard.services.ingest import DashboardFetcher
from scoreboard.services.tasks import (
    DataRefreshTask,
    EveryDayAt,
    EveryInterval,
    FixedNotificationTask,
    PeriodicTask,
    SummaryNotificationTask,
    TaskCategory,
    Trigger,
)

logger = logging.getLogger(__name__)


class TaskManager:
    def __init__(self, sender: MessageSender, cache: SnapshotCache):
        self.sender = sender
        self.cache = cache
        self._tasks: dict[str, PeriodicTask] = {}

    # -- registry -----------------------------------------------------------

    def register(self, task: PeriodicTask, trigger: Optional[Trigger] = None) -> PeriodicTask:
        """Add `task` to the registry and, if a trigger is given, schedule it."""
        if task.name in self._tasks:
            raise DuplicateTaskError(task.name)
        self._tasks[task.name] = task
        if trigger is not None:
            task.schedule(trigger)
        return task

    def tasks(self) -> list[PeriodicTask]:
        return list(self._tasks.values())

    def get(self, name: str) -> Optional[PeriodicTask]:
        return self._tasks.get(name)

    def active_tasks(self, category: Optional[TaskCategory] = None) -> list[PeriodicTask]:
        return [
            t for t in self._tasks.values()
            if t.is_active and (category is None or t.category is category)
        ]

    # -- factories ----------------------------------------------------------

    def add_refresh_task(
        self,
        fetcher: DashboardFetcher,
        interval_minutes: float,
        name: str = "data-refresh",
        **kwargs,
    ) -> DataRefreshTask:
        task = DataRefreshTask(fetcher, self.cache, name=name, **kwargs)
        self.register(task, EveryInterval(interval_minutes))
        return task

    def add_notification_task(
        self,
        destination: str,
        text: str,
        at: tuple[int, int, int],
        name: str = "daily-reminder",
        **kwargs,
    ) -> FixedNotificationTask:
        task = FixedNotificationTask(self.sender, destination, text, name=name, **kwargs)
        self.register(task, EveryDayAt(*at))
        return task

    def add_summary_task(
        self,
        destination: str,
        at: tuple[int, int, int],
        name: str = "daily-summary",
        **kwargs,
    ) -> SummaryNotificationTask:
        task = SummaryNotificationTask(self.sender, destination, self.cache, name=name, **kwargs)
        self.register(task, EveryDayAt(*at))
        return task

    # -- lifecycle ----------------------------------------------------------

    async def bootstrap(self, fetcher: DashboardFetcher) -> bool:
        """
        First ingestion. Errors propagate so the caller decides whether to
        start without data; routine refreshes go through DataRefreshTask.
        """
        dashboard = await fetcher.fetch_dashboard()
        return await self.cache.initialize(dashboard.tables or ())

    async def cancel_all(self) -> None:
        tasks = self.tasks()
        logger.info("Cancelling %d task(s)", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*(task.wait() for task in tasks))
