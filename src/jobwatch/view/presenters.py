"""Display models for job cards and execution cards."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from jobwatch.provider.models import Execution, ExecutionStatus, JobSnapshot

_CUSTOM_JOB_NAMES = {
    "balances_bitcoin": "Bitcoin Balances",
    "balances_evm_chains": "EVM Balances",
    "balances_solana": "Solana Balances",
    "exchange_hyperliquid": "Hyperliquid",
    "exchange_kraken": "Kraken",
    "exchange_lighter": "Lighter",
    "grist_backup": "Grist Backup",
    "pendle_markets": "Pendle Markets",
    "pendle_user_positions": "Pendle User Positions",
    "prices_cryptocurrencies": "Cryptocurrencies Prices",
    "prices_stocks": "Stocks Prices",
}

_STATUS_ICONS = {
    ExecutionStatus.RUNNING: "⚡",
    ExecutionStatus.COMPLETED: "✅",
    ExecutionStatus.FAILED: "❌",
}

_STATUS_TEXT = {
    ExecutionStatus.RUNNING: "EXECUTING",
    ExecutionStatus.COMPLETED: "COMPLETED",
    ExecutionStatus.FAILED: "FAILED",
}


class JobRunState(StrEnum):
    """Board status label of one job."""

    EXECUTING = "executing"
    RUNNING = "running"
    PAUSED = "paused"


def format_job_name(name: str) -> str:
    """Return human display name for a job identifier.

    Args:
        name: Snake-case job name.

    Returns:
        Custom display name, or the title-cased words of ``name``.
    """
    custom = _CUSTOM_JOB_NAMES.get(name)
    if custom is not None:
        return custom
    return " ".join(word[:1].upper() + word[1:] for word in name.split("_"))


def format_duration(seconds: float) -> str:
    """Format a second count as ``1h 2m 3s`` / ``2m 3s`` / ``3s``.

    Args:
        seconds: Non-negative duration.

    Returns:
        Compact duration label.
    """
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


@dataclass(frozen=True)
class JobCard:
    """Status board card for one job."""

    name: str
    title: str
    state: JobRunState
    progress: float
    countdown: str
    status_text: str
    error: str
    is_new_error: bool
    clickable: bool
    can_trigger: bool
    triggering: bool


def build_job_card(
    job: JobSnapshot,
    *,
    now: float,
    executing: bool,
    acknowledged: bool,
    triggering: bool = False,
) -> JobCard:
    """Build the board card for one job snapshot.

    Args:
        job: Job snapshot.
        now: Current epoch seconds.
        executing: Whether the job has an in-flight run.
        acknowledged: Whether the job's error was already opened.
        triggering: Whether a manual trigger is awaiting feedback.

    Returns:
        Card display model.
    """
    if executing:
        state = JobRunState.EXECUTING
        progress = 100.0
    else:
        state = JobRunState.RUNNING if job.running else JobRunState.PAUSED
        progress = 0.0
        if job.interval > 0:
            progress = min(100.0, (now - job.last_run_unix) / job.interval * 100)
    countdown = "0s" if executing else format_duration(job.next_run_unix - now)
    has_error = job.has_error
    return JobCard(
        name=job.name,
        title=format_job_name(job.name),
        state=state,
        progress=max(0.0, progress),
        countdown=countdown,
        status_text=job.current_status,
        error=job.err,
        is_new_error=has_error and not acknowledged,
        clickable=has_error,
        can_trigger=job.running and not executing and not triggering,
        triggering=triggering,
    )


@dataclass(frozen=True)
class ExecutionCard:
    """Log browser card for one execution."""

    id: str
    job_name: str
    title: str
    status: ExecutionStatus
    icon: str
    status_text: str
    started: str
    duration: str | None
    selectable: bool


def build_execution_card(execution: Execution, *, selectable: bool) -> ExecutionCard:
    """Build the log browser card for one execution.

    Args:
        execution: Execution record.
        selectable: Whether the card can open a detail view.

    Returns:
        Card display model.
    """
    duration = execution.duration_seconds
    return ExecutionCard(
        id=execution.id,
        job_name=execution.job_name,
        title=format_job_name(execution.job_name),
        status=execution.status,
        icon=_STATUS_ICONS.get(execution.status, "⏳"),
        status_text=_STATUS_TEXT.get(execution.status, "UNKNOWN"),
        started=execution.start_time.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
        duration=None if duration is None else f"{duration}s",
        selectable=selectable,
    )
