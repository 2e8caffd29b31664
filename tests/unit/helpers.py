"""Test-only builders for job snapshots and executions."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jobwatch.provider.models import (
    Execution,
    ExecutionStatus,
    JobSnapshot,
    LogEntry,
    LogLevel,
)

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def job(name: str, **overrides: object) -> JobSnapshot:
    """Build an enabled job snapshot with sensible defaults."""
    fields: dict[str, object] = {
        "name": name,
        "interval": 600,
        "running": True,
        "last_run_unix": int(BASE_TIME.timestamp()) - 60,
        "next_run_unix": int(BASE_TIME.timestamp()) + 540,
    }
    fields.update(overrides)
    return JobSnapshot.model_validate(fields)


def execution(
    job_name: str,
    *,
    offset_seconds: int = 0,
    status: ExecutionStatus = ExecutionStatus.COMPLETED,
    messages: tuple[str, ...] = (),
    execution_id: str | None = None,
) -> Execution:
    """Build an execution starting ``offset_seconds`` after ``BASE_TIME``.

    Finished executions last five seconds; running ones have no end time.
    """
    started = BASE_TIME + timedelta(seconds=offset_seconds)
    ended = None if status == ExecutionStatus.RUNNING else started + timedelta(seconds=5)
    level = LogLevel.ERROR if status == ExecutionStatus.FAILED else LogLevel.INFO
    return Execution(
        id=execution_id or f"{job_name}-{int(started.timestamp())}",
        job_name=job_name,
        start_time=started,
        end_time=ended,
        status=status,
        logs=tuple(
            LogEntry(timestamp=started.isoformat(), message=message, level=level)
            for message in messages
        ),
    )
