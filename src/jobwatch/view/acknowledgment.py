"""Per-job error acknowledgment lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum

from jobwatch.provider.models import JobSnapshot

_LOGGER = logging.getLogger(__name__)


class ErrorState(StrEnum):
    """Acknowledgment state of one job's error."""

    CLEAN = "clean"
    ERRORED = "errored"
    ACKNOWLEDGED = "acknowledged"


class ErrorAcknowledgmentTracker:
    """Track which job errors the user has already opened.

    Transitions:
        ``clean -> errored`` when a snapshot reports a non-empty error,
        ``errored -> acknowledged`` on ``acknowledge``,
        ``errored|acknowledged -> clean`` when the error clears or the job
        disappears. Membership is re-validated on every ``reconcile``, so the
        acknowledged set never holds a job without a current error.
    """

    def __init__(self) -> None:
        """Create tracker with no known errors."""
        self._errored: set[str] = set()
        self._acknowledged: set[str] = set()

    @property
    def acknowledged(self) -> frozenset[str]:
        """Job names whose current error has been opened."""
        return frozenset(self._acknowledged)

    def reconcile(self, jobs: Iterable[JobSnapshot]) -> None:
        """Re-derive error membership from one poll's snapshots.

        Args:
            jobs: Complete job snapshot list from the latest poll.
        """
        self._errored = {job.name for job in jobs if job.has_error}
        cleared = self._acknowledged - self._errored
        if cleared:
            _LOGGER.debug("Errors cleared for %s", ", ".join(sorted(cleared)))
        self._acknowledged &= self._errored

    def acknowledge(self, job_name: str) -> bool:
        """Mark one job's current error as seen.

        Args:
            job_name: Target job name.

        Returns:
            ``True`` when the job had an error to acknowledge.
        """
        if job_name not in self._errored:
            return False
        self._acknowledged.add(job_name)
        return True

    def state_of(self, job_name: str) -> ErrorState:
        """Return lifecycle state of one job.

        Args:
            job_name: Target job name.

        Returns:
            Current error state.
        """
        if job_name not in self._errored:
            return ErrorState.CLEAN
        if job_name in self._acknowledged:
            return ErrorState.ACKNOWLEDGED
        return ErrorState.ERRORED

    def is_acknowledged(self, job_name: str) -> bool:
        return self.state_of(job_name) == ErrorState.ACKNOWLEDGED

    def is_new_error(self, job_name: str) -> bool:
        return self.state_of(job_name) == ErrorState.ERRORED

    def is_clickable(self, job_name: str) -> bool:
        """Whether the job's card still opens its error log.

        Args:
            job_name: Target job name.

        Returns:
            ``True`` while the job reports any error, acknowledged or not.
        """
        return job_name in self._errored
