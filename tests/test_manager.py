"""
Tests for TaskManager: the registry, factories, bootstrap and shutdown.
"""
import pytest

from scoreboard.core.errors import DuplicateTaskError, SheetNotFoundError
from scoreboard.services.cache import SnapshotCache
from scoreboard.services.ingest import DashboardFetcher
from scoreboard.services.manager import TaskManager
from scoreboard.services.tasks import (
    DataRefreshTask,
    EveryDayAt,
    FixedNotificationTask,
    SummaryNotificationTask,
    TaskCategory,
    TaskState,
)

from helpers import CountingTask, FakeSheetsClient, FakeSleep, fixed_clock, titles_spreadsheet


def _fetcher(client) -> DashboardFetcher:
    return DashboardFetcher(client, "s", clock=fixed_clock)


class TestRegistry:
    @pytest.mark.asyncio
    async def test_register_without_trigger_stays_idle(self, sender, cache):
        manager = TaskManager(sender, cache)
        task = manager.register(CountingTask("a"))
        assert manager.get("a") is task
        assert task.state is TaskState.IDLE
        assert manager.active_tasks() == []

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(self, sender, cache):
        manager = TaskManager(sender, cache)
        manager.register(CountingTask("a"))
        with pytest.raises(DuplicateTaskError) as exc_info:
            manager.register(CountingTask("a"))
        assert exc_info.value.details == {"task": "a"}
        assert len(manager.tasks()) == 1

    def test_get_unknown(self, sender, cache):
        assert TaskManager(sender, cache).get("nope") is None


class TestFactories:
    @pytest.mark.asyncio
    async def test_factories_schedule_tasks(self, sender, cache):
        manager = TaskManager(sender, cache)
        sleep = FakeSleep(block_after=0)

        refresh = manager.add_refresh_task(_fetcher(FakeSheetsClient()), 10, sleep=sleep)
        reminder = manager.add_notification_task("chat", "Fill it in", (17, 0, 0), sleep=sleep)
        summary = manager.add_summary_task("chat", (20, 0, 0), sleep=sleep)

        assert isinstance(refresh, DataRefreshTask)
        assert isinstance(reminder, FixedNotificationTask)
        assert isinstance(summary, SummaryNotificationTask)
        assert reminder.sender is sender and summary.cache is cache
        assert reminder.trigger == EveryDayAt(17)
        assert [t.name for t in manager.active_tasks()] == ["data-refresh", "daily-reminder", "daily-summary"]
        assert manager.active_tasks(TaskCategory.REFRESH) == [refresh]
        assert manager.active_tasks(TaskCategory.NOTIFICATION) == [reminder, summary]

        await manager.cancel_all()

    @pytest.mark.asyncio
    async def test_cancel_all(self, sender, cache):
        manager = TaskManager(sender, cache)
        manager.add_refresh_task(_fetcher(FakeSheetsClient()), 1, sleep=FakeSleep(block_after=0))
        manager.register(CountingTask("idle"))

        await manager.cancel_all()

        assert manager.active_tasks() == []
        assert {t.state for t in manager.tasks()} == {TaskState.CANCELLED}


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_initializes_cache_once(self, sender, two_person_blocks):
        cache = SnapshotCache()
        manager = TaskManager(sender, cache)
        fetcher = _fetcher(FakeSheetsClient(blocks=two_person_blocks))

        assert await manager.bootstrap(fetcher) is True
        assert len(cache.peek().tables) == 2
        assert await manager.bootstrap(fetcher) is False

    @pytest.mark.asyncio
    async def test_errors_propagate(self, sender):
        cache = SnapshotCache()
        manager = TaskManager(sender, cache)
        client = FakeSheetsClient(titles=titles_spreadsheet((1, "Январь 24")))

        with pytest.raises(SheetNotFoundError):
            await manager.bootstrap(_fetcher(client))
        assert not cache.peek().is_initialized
