"""
Periodic tasks.

Lifecycle
---------
    IDLE ──schedule()──▶ SCHEDULED ──timer──▶ RUNNING ──done──▶ SCHEDULED
                              │                  │
                              └────cancel()──────┴──────────▶ CANCELLED (terminal)

- schedule(trigger) is rejected (returns False, state unchanged) while the
  task is RUNNING or once it is CANCELLED. Calling it on a SCHEDULED task
  re-arms the timer with the new trigger.
- run_once() is the overlap guard: a tick that fires while the previous run
  is still in flight is skipped.
- cancel() is idempotent. Cancellation is cooperative: a running execute()
  is interrupted at its next await.
- A failing execute() is logged and counted; it never escapes the timer
  loop, so the next tick runs normally.

Subclasses implement only `async execute()`.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Awaitable, Callable, Optional, Protocol

from scoreboard.clients.base import MessageSender
from scoreboard.core.errors import SchedulingConflictError
from scoreboard.services.analyzer import DashboardAnalyzer, current_snapshot, format_digest
from scoreboard.services.cache import SnapshotCache
from scoreboard.services.ingest import DashboardFetcher
from scoreboard.services.periods import current_time, local_date

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class TaskState(str, enum.Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"
    CANCELLED = "cancelled"


class TaskCategory(str, enum.Enum):
    REFRESH = "refresh"
    NOTIFICATION = "notification"


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------

class Trigger(Protocol):
    def next_fire(self, now: datetime) -> datetime:
        ...


@dataclass(frozen=True)
class EveryInterval:
    minutes: float

    def __post_init__(self) -> None:
        if self.minutes <= 0:
            raise ValueError("interval must be positive")

    def next_fire(self, now: datetime) -> datetime:
        return now + timedelta(minutes=self.minutes)

    def __str__(self) -> str:
        return f"every {self.minutes:g} min"


@dataclass(frozen=True)
class EveryDayAt:
    """Once a day at hour:minute:second UTC."""
    hour: int
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        # validates the ranges
        time(self.hour, self.minute, self.second)

    def next_fire(self, now: datetime) -> datetime:
        now_utc = now.astimezone(timezone.utc)
        candidate = now_utc.replace(
            hour=self.hour, minute=self.minute, second=self.second, microsecond=0
        )
        if candidate <= now_utc:
            candidate += timedelta(days=1)
        return candidate

    def __str__(self) -> str:
        return f"daily at {self.hour:02d}:{self.minute:02d}:{self.second:02d} UTC"


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------

@dataclass
class TaskInfo:
    name: str
    category: TaskCategory
    state: TaskState
    trigger: Optional[str]
    runs: int
    failures: int
    next_run_at: Optional[datetime]
    last_started_at: Optional[datetime]
    last_finished_at: Optional[datetime]
    last_error: Optional[str]


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class PeriodicTask:
    category: TaskCategory = TaskCategory.NOTIFICATION

    def __init__(
        self,
        name: str,
        *,
        clock: Callable[[], datetime] = current_time,
        sleep: Sleep = asyncio.sleep,
    ):
        self.name = name
        self.clock = clock
        self._sleep = sleep
        self.state = TaskState.IDLE
        self.trigger: Optional[Trigger] = None
        self.runs = 0
        self.failures = 0
        self.next_run_at: Optional[datetime] = None
        self.last_started_at: Optional[datetime] = None
        self.last_finished_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._handle: Optional[asyncio.Task] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} {self.state.value}>"

    async def execute(self) -> None:
        raise NotImplementedError

    # -- lifecycle ----------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state in (TaskState.SCHEDULED, TaskState.RUNNING)

    def schedule(self, trigger: Trigger) -> bool:
        """Arm the timer. Must be called from a running event loop."""
        if self.state in (TaskState.RUNNING, TaskState.CANCELLED):
            conflict = SchedulingConflictError(self.name, self.state.value)
            logger.warning("[%s] %s", conflict.code, conflict.message)
            return False

        if self._handle is not None and not self._handle.done():
            logger.debug("[%s] Re-arming timer (%s → %s)", self.name, self.trigger, trigger)
            self._handle.cancel()

        self.trigger = trigger
        self.state = TaskState.SCHEDULED
        self._handle = asyncio.get_running_loop().create_task(
            self._timer_loop(trigger), name=f"periodic:{self.name}"
        )
        logger.info("[%s] Scheduled %s", self.name, trigger)
        return True

    def cancel(self) -> None:
        if self.state is TaskState.CANCELLED:
            return
        self.state = TaskState.CANCELLED
        self.next_run_at = None
        if self._handle is not None and not self._handle.done():
            self._handle.cancel()
        logger.debug("[%s] The task was cancelled", self.name)

    async def wait(self) -> None:
        """Wait for the timer loop to stop (after cancel())."""
        if self._handle is not None:
            await asyncio.gather(self._handle, return_exceptions=True)

    # -- execution ----------------------------------------------------------

    async def run_once(self) -> bool:
        """Run the work now. Returns False if skipped or failed."""
        if self.state is TaskState.RUNNING:
            logger.warning("[%s] Previous run has not finished, skipping", self.name)
            return False
        if self.state is TaskState.CANCELLED:
            return False

        previous = self.state
        self.state = TaskState.RUNNING
        self.last_started_at = self.clock()
        logger.info("[%s] Task has started at %s", self.name, self.last_started_at.isoformat())
        ok = False
        try:
            await self.execute()
            ok = True
            self.last_error = None
        except Exception as exc:
            self.failures += 1
            self.last_error = f"{type(exc).__name__}: {exc}"
            logger.exception("[%s] Task run failed", self.name)
        finally:
            self.runs += 1
            self.last_finished_at = self.clock()
            if self.state is TaskState.RUNNING:
                self.state = previous
        logger.info("[%s] Task has finished at %s", self.name, self.last_finished_at.isoformat())
        return ok

    async def _timer_loop(self, trigger: Trigger) -> None:
        fired_at: Optional[datetime] = None
        while True:
            now = self.clock()
            # the sleep may wake early against the wall clock: anchor on the elapsed fire time
            anchor = now if fired_at is None else max(now, fired_at)
            self.next_run_at = trigger.next_fire(anchor)
            delay = max((self.next_run_at - now).total_seconds(), 0.0)
            await self._sleep(delay)
            fired_at = self.next_run_at
            await self.run_once()

    def info(self) -> TaskInfo:
        return TaskInfo(
            name=self.name,
            category=self.category,
            state=self.state,
            trigger=str(self.trigger) if self.trigger is not None else None,
            runs=self.runs,
            failures=self.failures,
            next_run_at=self.next_run_at,
            last_started_at=self.last_started_at,
            last_finished_at=self.last_finished_at,
            last_error=self.last_error,
        )


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class DataRefreshTask(PeriodicTask):
    """Fetch a fresh Dashboard and swap it into the cache."""
    category = TaskCategory.REFRESH

    def __init__(self, fetcher: DashboardFetcher, cache: SnapshotCache, name: str = "data-refresh", **kwargs):
        super().__init__(name, **kwargs)
        self.fetcher = fetcher
        self.cache = cache

    async def execute(self) -> None:
        # On failure the exception propagates to run_once(); the cache is untouched.
        dashboard = await self.fetcher.fetch_dashboard()
        await self.cache.replace(dashboard)


class FixedNotificationTask(PeriodicTask):
    """Send the same text to the same destination on every tick."""

    def __init__(self, sender: MessageSender, destination: str, text: str, name: str = "daily-reminder", **kwargs):
        super().__init__(name, **kwargs)
        self.sender = sender
        self.destination = destination
        self.text = text

    async def execute(self) -> None:
        await self.sender.send_message(self.destination, self.text)
        logger.info("[%s] Sent text=%r to %s", self.name, self.text, self.destination)


class SummaryNotificationTask(PeriodicTask):
    """
    Send who has filled in today's row. No-op until participants exist.

    "Today" is the sheet's local day: the UTC clock shifted by utc_offset_hours.
    """

    def __init__(
        self,
        sender: MessageSender,
        destination: str,
        cache: SnapshotCache,
        name: str = "daily-summary",
        utc_offset_hours: int = 0,
        **kwargs,
    ):
        super().__init__(name, **kwargs)
        self.sender = sender
        self.destination = destination
        self.cache = cache
        self.utc_offset_hours = utc_offset_hours

    async def execute(self) -> None:
        analyzer = DashboardAnalyzer(await current_snapshot(self.cache))
        if not analyzer.participants():
            logger.info("[%s] No participants yet, nothing to send", self.name)
            return
        today = local_date(self.clock(), self.utc_offset_hours)
        text = format_digest(analyzer.digest(today), today)
        await self.sender.send_message(self.destination, text)
        logger.info("[%s] Sent summary for %s to %s", self.name, today, self.destination)
