"""Remote job provider contract consumed by the monitor."""

from __future__ import annotations

from abc import ABC, abstractmethod

from jobwatch.provider.errors import ProviderError, ProviderErrorCode
from jobwatch.provider.models import Execution, JobSnapshot
from jobwatch.settings.models import Settings


class RemoteJobProvider(ABC):
    """Source of truth for job snapshots, executions, and settings.

    Reads must be side-effect free and tolerate being called at least once
    per second indefinitely. ``trigger`` is fire-and-forget; its outcome is
    observed through later snapshots.
    """

    @abstractmethod
    async def list_jobs(self) -> list[JobSnapshot]:
        """Return current snapshots for every known job."""

    @abstractmethod
    async def list_executions(self) -> list[Execution]:
        """Return the known execution history."""

    @abstractmethod
    async def trigger(self, job_name: str) -> None:
        """Request an out-of-band run of one job.

        Args:
            job_name: Target job name.
        """

    async def clear_error(self, job_name: str) -> None:
        """Clear a job's error server-side when the provider tracks it.

        Args:
            job_name: Target job name.

        Raises:
            ProviderError: Always, for providers without remote error state.
        """
        raise ProviderError(
            ProviderErrorCode.UNSUPPORTED,
            "Provider does not support clearing job errors.",
            data={"job_name": job_name},
        )

    @abstractmethod
    async def load_settings(self) -> Settings:
        """Load the full settings object."""

    @abstractmethod
    async def save_settings(self, settings: Settings) -> None:
        """Replace the full settings object.

        Args:
            settings: Settings to persist.
        """

    async def aclose(self) -> None:
        """Release provider resources."""
        return None
