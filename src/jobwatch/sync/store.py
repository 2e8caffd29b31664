"""Shared job/execution state republished by the poller."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from jobwatch.provider.models import Execution, ExecutionStatus, JobSnapshot
from jobwatch.view.presenters import format_job_name


class ExecutionStore:
    """Full known execution set plus a derived per-job running index.

    The index maps each job name to its canonical running execution: the
    running execution with the latest start time. It is rebuilt from the
    flat list on every ``replace`` and never patched incrementally, so
    transient duplicates from stale reads resolve deterministically.
    """

    def __init__(self) -> None:
        """Create an empty store."""
        self._executions: tuple[Execution, ...] = ()
        self._current: Mapping[str, Execution] = MappingProxyType({})
        self._version = 0

    @property
    def executions(self) -> tuple[Execution, ...]:
        """Executions in provider order."""
        return self._executions

    @property
    def version(self) -> int:
        """Number of completed replacements."""
        return self._version

    @property
    def current_by_job(self) -> Mapping[str, Execution]:
        """Read-only job name to canonical running execution mapping."""
        return self._current

    def __len__(self) -> int:
        return len(self._executions)

    def replace(self, executions: Iterable[Execution]) -> None:
        """Swap in a full execution collection and rebuild the index.

        Args:
            executions: Complete execution collection from the provider.
        """
        self._executions = tuple(executions)
        self._current = MappingProxyType(_index_running(self._executions))
        self._version += 1

    def current_for(self, job_name: str) -> Execution | None:
        """Return the canonical running execution for one job.

        Args:
            job_name: Target job name.

        Returns:
            Running execution, or ``None`` when the job is idle.
        """
        return self._current.get(job_name)

    def is_current(self, execution: Execution) -> bool:
        """Whether an execution is its job's canonical running execution.

        Args:
            execution: Execution to check.

        Returns:
            ``True`` for the canonical running execution.
        """
        current = self._current.get(execution.job_name)
        return current is not None and current.id == execution.id

    def is_selectable(self, execution: Execution) -> bool:
        """Whether an execution may be opened as a detail view.

        Args:
            execution: Execution to check.

        Returns:
            ``False`` while it is the job's active run.
        """
        return not self.is_current(execution)

    def is_job_executing(self, job: JobSnapshot) -> bool:
        """Whether a job is executing per its snapshot or the execution list.

        Args:
            job: Job snapshot.

        Returns:
            ``True`` when either source reports an in-flight run.
        """
        return job.is_executing or job.name in self._current

    def find(self, execution_id: str) -> Execution | None:
        """Look up one execution by id.

        Args:
            execution_id: Target execution id.

        Returns:
            Matching execution or ``None``.
        """
        for execution in self._executions:
            if execution.id == execution_id:
                return execution
        return None

    def recent_first(self) -> tuple[Execution, ...]:
        """Return executions ordered by start time, newest first.

        Returns:
            Stable start-time-descending ordering.
        """
        return tuple(
            sorted(self._executions, key=lambda item: item.start_time, reverse=True)
        )

    def latest_failed_for(self, job_name: str) -> Execution | None:
        """Return the most recently started failed execution of one job.

        Args:
            job_name: Target job name.

        Returns:
            Failed execution with maximum start time, or ``None``.
        """
        failed = [
            execution
            for execution in self.recent_first()
            if execution.job_name == job_name
            and execution.status == ExecutionStatus.FAILED
        ]
        return failed[0] if failed else None

    def search(
        self,
        query: str = "",
        *,
        job_name: str | None = None,
        status: ExecutionStatus | None = None,
    ) -> tuple[Execution, ...]:
        """Filter executions for the log browser, newest first.

        Args:
            query: Case-insensitive text matched against job names and logs.
            job_name: Optional exact job name filter.
            status: Optional status filter.

        Returns:
            Matching executions ordered newest first.
        """
        needle = query.strip().casefold()
        return tuple(
            execution
            for execution in self.recent_first()
            if (job_name is None or execution.job_name == job_name)
            and (status is None or execution.status == status)
            and (not needle or _matches(execution, needle))
        )


class MonitorStore:
    """Explicitly shared state for the board and the log browser.

    Only the poller (and out-of-band refreshes) write through
    ``replace_jobs``/``replace_executions``; views read.
    """

    def __init__(self, executions: ExecutionStore | None = None) -> None:
        """Create store.

        Args:
            executions: Optional execution store to share.
        """
        self._jobs: tuple[JobSnapshot, ...] = ()
        self._jobs_version = 0
        self.executions = executions or ExecutionStore()

    @property
    def jobs(self) -> tuple[JobSnapshot, ...]:
        """Job snapshots sorted by name."""
        return self._jobs

    @property
    def jobs_version(self) -> int:
        """Number of completed job list replacements."""
        return self._jobs_version

    def replace_jobs(self, jobs: Iterable[JobSnapshot]) -> None:
        """Swap in a full job snapshot list, sorted by name.

        Args:
            jobs: Complete snapshot list from the provider.
        """
        self._jobs = tuple(sorted(jobs, key=lambda job: job.name))
        self._jobs_version += 1

    def replace_executions(self, executions: Iterable[Execution]) -> None:
        """Swap in a full execution collection.

        Args:
            executions: Complete execution collection from the provider.
        """
        self.executions.replace(executions)

    def job(self, name: str) -> JobSnapshot | None:
        """Look up one job snapshot by name.

        Args:
            name: Target job name.

        Returns:
            Matching snapshot or ``None``.
        """
        for job in self._jobs:
            if job.name == name:
                return job
        return None


def _index_running(executions: tuple[Execution, ...]) -> dict[str, Execution]:
    current: dict[str, Execution] = {}
    for execution in executions:
        if execution.status != ExecutionStatus.RUNNING:
            continue
        existing = current.get(execution.job_name)
        if existing is None or execution.start_time > existing.start_time:
            current[execution.job_name] = execution
    return current


def _matches(execution: Execution, needle: str) -> bool:
    if needle in execution.job_name.casefold():
        return True
    if needle in format_job_name(execution.job_name).casefold():
        return True
    return any(needle in entry.message.casefold() for entry in execution.logs)
