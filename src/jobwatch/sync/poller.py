"""Timer-driven polling loop republishing provider state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.models import Execution, JobSnapshot
from jobwatch.sync.store import MonitorStore

_LOGGER = logging.getLogger(__name__)

_POLL_JOB_ID = "jobwatch:poll"
_SCHEDULER_LOGGER = "apscheduler.scheduler"
_SKIPPED_RUN_MARKER = "maximum number of running instances reached"


class _SkippedTickFilter(logging.Filter):
    """Demote APScheduler's skipped-run warnings for the poll job to DEBUG."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if _SKIPPED_RUN_MARKER not in message or _POLL_JOB_ID not in message:
            return True
        _LOGGER.debug("Poll tick skipped: previous tick still running")
        return False


_SKIPPED_TICK_FILTER = _SkippedTickFilter()


@dataclass(frozen=True)
class TickResult:
    """Outcome of one poll tick."""

    jobs_updated: bool
    executions_updated: bool

    @property
    def any_updated(self) -> bool:
        return self.jobs_updated or self.executions_updated


TickListener = Callable[[TickResult], None]


class Poller:
    """Pull jobs and executions on a fixed period and publish them.

    Each tick issues both fetches concurrently; a failure in one is logged
    and swallowed without affecting the other, and the failing collection
    keeps its last value. Ticks never overlap: a slow tick delays the next
    one instead of queueing, and the skipped run is logged at DEBUG only.
    Results that resolve after ``stop`` are discarded, including ticks
    cancelled by the scheduler shutdown.
    """

    def __init__(
        self,
        *,
        provider: RemoteJobProvider,
        store: MonitorStore,
        interval_seconds: float = 1.0,
    ) -> None:
        """Create poller.

        Args:
            provider: Remote job provider.
            store: Shared store receiving fetched collections.
            interval_seconds: Fixed tick period.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        self._provider = provider
        self._store = store
        self._interval_seconds = interval_seconds
        self._listeners: list[TickListener] = []
        self._scheduler: AsyncIOScheduler | None = None
        self._stopped = False
        self._ticks = 0

    @property
    def running(self) -> bool:
        return self._scheduler is not None and not self._stopped

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def ticks(self) -> int:
        """Number of ticks that published at least one collection."""
        return self._ticks

    def add_listener(self, listener: TickListener) -> None:
        """Register a callback run after every published tick.

        Args:
            listener: Callback receiving the tick outcome.
        """
        self._listeners.append(listener)

    def start(self) -> None:
        """Start the repeating tick; the first tick runs immediately.

        Must be called from inside a running event loop.

        Raises:
            RuntimeError: If already started or stopped.
        """
        if self._scheduler is not None or self._stopped:
            raise RuntimeError("Poller can only be started once.")
        scheduler = AsyncIOScheduler(
            event_loop=asyncio.get_running_loop(),
            timezone=UTC,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": None,
            },
        )
        scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self._interval_seconds, timezone=UTC),
            id=_POLL_JOB_ID,
            name=_POLL_JOB_ID,
            next_run_time=datetime.now(tz=UTC),
            replace_existing=True,
        )
        logging.getLogger(_SCHEDULER_LOGGER).addFilter(_SKIPPED_TICK_FILTER)
        scheduler.start()
        self._scheduler = scheduler
        _LOGGER.debug("Poller started every %.3fs", self._interval_seconds)

    def stop(self) -> None:
        """Stop the repeating tick; safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        scheduler = self._scheduler
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
        _LOGGER.debug("Poller stopped after %d ticks", self._ticks)

    async def tick(self) -> TickResult:
        """Run one fetch-and-publish cycle.

        Listeners run only when at least one collection was replaced.

        Returns:
            Which collections were replaced.
        """
        if self._stopped:
            return TickResult(jobs_updated=False, executions_updated=False)
        try:
            jobs, executions = await asyncio.gather(
                self._fetch_jobs(), self._fetch_executions()
            )
        except asyncio.CancelledError:
            if not self._stopped:
                raise
            _LOGGER.debug("In-flight tick cancelled by stop")
            return TickResult(jobs_updated=False, executions_updated=False)
        if self._stopped:
            return TickResult(jobs_updated=False, executions_updated=False)
        if jobs is not None:
            self._store.replace_jobs(jobs)
        if executions is not None:
            self._store.replace_executions(executions)
        result = TickResult(
            jobs_updated=jobs is not None,
            executions_updated=executions is not None,
        )
        if not result.any_updated:
            return result
        self._ticks += 1
        for listener in tuple(self._listeners):
            listener(result)
        return result

    async def refresh_jobs(self) -> bool:
        """Fetch and publish job snapshots outside the regular tick.

        Returns:
            Whether the job list was replaced.
        """
        jobs = await self._fetch_jobs()
        if jobs is None or self._stopped:
            return False
        self._store.replace_jobs(jobs)
        result = TickResult(jobs_updated=True, executions_updated=False)
        for listener in tuple(self._listeners):
            listener(result)
        return True

    async def _fetch_jobs(self) -> list[JobSnapshot] | None:
        try:
            return await self._provider.list_jobs()
        except Exception as exc:  # noqa: BLE001
            _LOGGER.debug("Job snapshot fetch failed: %s", exc)
            return None

    async def _fetch_executions(self) -> list[Execution] | None:
        try:
            return await self._provider.list_executions()
        except Exception as exc:  # noqa: BLE001
            _LOGGER.debug("Execution fetch failed: %s", exc)
            return None
