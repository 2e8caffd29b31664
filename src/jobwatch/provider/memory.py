"""In-process provider used for demos and tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.errors import ProviderError, ProviderErrorCode
from jobwatch.provider.models import (
    Execution,
    ExecutionStatus,
    JobSnapshot,
    LogEntry,
    LogLevel,
)
from jobwatch.settings.models import Settings


class InMemoryJobProvider(RemoteJobProvider):
    """Provider holding jobs, executions, and settings in memory.

    Failures can be injected per operation with ``fail_next`` to exercise
    stale-state behavior of the polling loop.
    """

    def __init__(
        self,
        *,
        jobs: list[JobSnapshot] | None = None,
        executions: list[Execution] | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Create provider with optional seed state.

        Args:
            jobs: Initial job snapshots.
            executions: Initial executions, most recent first.
            settings: Initial settings object.
        """
        self.jobs: dict[str, JobSnapshot] = {job.name: job for job in jobs or ()}
        self.executions: list[Execution] = list(executions or ())
        self.settings = settings or Settings()
        self.triggered: list[str] = []
        self.cleared: list[str] = []
        self.saved: list[Settings] = []
        self.calls: dict[str, int] = {}
        self._pending_failures: dict[str, int] = {}

    def fail_next(self, operation: str, times: int = 1) -> None:
        """Make the next ``times`` calls of one operation raise.

        Args:
            operation: Operation name, e.g. ``"list_jobs"``.
            times: Number of consecutive failing calls.
        """
        self._pending_failures[operation] = times

    def put_job(self, job: JobSnapshot) -> None:
        """Insert or replace one job snapshot.

        Args:
            job: Snapshot to store.
        """
        self.jobs[job.name] = job

    def add_execution(self, execution: Execution) -> None:
        """Record one execution at the front of the history.

        Args:
            execution: Execution to store.
        """
        self.executions.insert(0, execution)

    async def list_jobs(self) -> list[JobSnapshot]:
        self._enter("list_jobs")
        return list(self.jobs.values())

    async def list_executions(self) -> list[Execution]:
        self._enter("list_executions")
        return list(self.executions)

    async def trigger(self, job_name: str) -> None:
        """Start a running execution for a known job.

        Args:
            job_name: Target job name.

        Raises:
            ProviderError: If the job is unknown.
        """
        self._enter("trigger")
        job = self._require(job_name)
        started = datetime.now(tz=UTC).replace(microsecond=0)
        self.triggered.append(job_name)
        self.jobs[job_name] = job.model_copy(update={"is_executing": True})
        self.add_execution(
            Execution(
                id=f"{job_name}-{int(started.timestamp())}",
                job_name=job_name,
                start_time=started,
                status=ExecutionStatus.RUNNING,
            )
        )

    def finish(self, job_name: str, *, error: str = "") -> None:
        """Close the latest running execution of one job.

        Args:
            job_name: Target job name.
            error: Error text; non-empty marks the run failed.
        """
        job = self._require(job_name)
        ended = datetime.now(tz=UTC).replace(microsecond=0)
        for index, execution in enumerate(self.executions):
            if (
                execution.job_name == job_name
                and execution.status == ExecutionStatus.RUNNING
            ):
                level = LogLevel.ERROR if error else LogLevel.SUCCESS
                message = error or "Job completed"
                self.executions[index] = execution.model_copy(
                    update={
                        "end_time": ended,
                        "status": (
                            ExecutionStatus.FAILED
                            if error
                            else ExecutionStatus.COMPLETED
                        ),
                        "logs": (
                            *execution.logs,
                            LogEntry(
                                timestamp=ended.isoformat(),
                                message=message,
                                level=level,
                            ),
                        ),
                    }
                )
                break
        self.jobs[job_name] = job.model_copy(
            update={
                "is_executing": False,
                "err": error,
                "last_run_unix": int(ended.timestamp()),
                "next_run_unix": int(ended.timestamp()) + job.interval,
            }
        )

    async def clear_error(self, job_name: str) -> None:
        self._enter("clear_error")
        job = self._require(job_name)
        self.cleared.append(job_name)
        self.jobs[job_name] = job.model_copy(update={"err": ""})

    async def load_settings(self) -> Settings:
        self._enter("load_settings")
        return self.settings.model_copy(deep=True)

    async def save_settings(self, settings: Settings) -> None:
        self._enter("save_settings")
        self.settings = settings.model_copy(deep=True)
        self.saved.append(self.settings)

    def _enter(self, operation: str) -> None:
        self.calls[operation] = self.calls.get(operation, 0) + 1
        remaining = self._pending_failures.get(operation, 0)
        if remaining > 0:
            self._pending_failures[operation] = remaining - 1
            raise ProviderError(
                ProviderErrorCode.UNAVAILABLE,
                f"Injected failure for {operation}.",
            )

    def _require(self, job_name: str) -> JobSnapshot:
        job = self.jobs.get(job_name)
        if job is None:
            raise ProviderError(
                ProviderErrorCode.BAD_STATUS,
                f"Unknown job '{job_name}'.",
                data={"job_name": job_name},
            )
        return job


def build_demo_provider(now: datetime | None = None) -> InMemoryJobProvider:
    """Seed a provider with a handful of jobs and past executions.

    Args:
        now: Reference time; defaults to current UTC time.

    Returns:
        Seeded in-memory provider.
    """
    current = (now or datetime.now(tz=UTC)).replace(microsecond=0)
    epoch = int(current.timestamp())
    jobs = [
        JobSnapshot(
            name="update_prices",
            interval=600,
            running=True,
            last_run_unix=epoch - 120,
            next_run_unix=epoch + 480,
        ),
        JobSnapshot(
            name="backup_grist",
            interval=7200,
            running=True,
            last_run_unix=epoch - 3600,
            next_run_unix=epoch + 3600,
            err="backup path not writable",
        ),
        JobSnapshot(
            name="update_kraken",
            interval=600,
            running=True,
            last_run_unix=epoch - 30,
            next_run_unix=epoch + 570,
            is_executing=True,
            current_status="Fetching trades",
        ),
        JobSnapshot(name="update_stocks", interval=600, running=False),
    ]
    executions = [
        Execution(
            id=f"update_kraken-{epoch - 30}",
            job_name="update_kraken",
            start_time=current - timedelta(seconds=30),
            status=ExecutionStatus.RUNNING,
            logs=(
                LogEntry(
                    timestamp=(current - timedelta(seconds=29)).isoformat(),
                    message="Fetching trades",
                ),
            ),
        ),
        Execution(
            id=f"update_prices-{epoch - 120}",
            job_name="update_prices",
            start_time=current - timedelta(seconds=120),
            end_time=current - timedelta(seconds=112),
            status=ExecutionStatus.COMPLETED,
            logs=(
                LogEntry(
                    timestamp=(current - timedelta(seconds=119)).isoformat(),
                    message="Requesting 42 prices",
                ),
                LogEntry(
                    timestamp=(current - timedelta(seconds=112)).isoformat(),
                    message="Prices updated",
                    level=LogLevel.SUCCESS,
                ),
            ),
        ),
        Execution(
            id=f"backup_grist-{epoch - 3600}",
            job_name="backup_grist",
            start_time=current - timedelta(seconds=3600),
            end_time=current - timedelta(seconds=3597),
            status=ExecutionStatus.FAILED,
            logs=(
                LogEntry(
                    timestamp=(current - timedelta(seconds=3597)).isoformat(),
                    message="backup path not writable",
                    level=LogLevel.ERROR,
                ),
            ),
        ),
    ]
    return InMemoryJobProvider(jobs=jobs, executions=executions)
