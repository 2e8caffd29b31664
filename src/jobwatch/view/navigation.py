"""Cross-view navigation driven by error acknowledgment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from jobwatch.view.acknowledgment import ErrorAcknowledgmentTracker

if TYPE_CHECKING:
    from jobwatch.provider.base import RemoteJobProvider
    from jobwatch.provider.models import Execution
    from jobwatch.sync.store import ExecutionStore

_LOGGER = logging.getLogger(__name__)


class Section(StrEnum):
    """Top-level monitor sections."""

    BOARD = "board"
    LOGS = "logs"
    SETTINGS = "settings"


@dataclass
class ViewState:
    """Mutable view state shared by the board and the log browser."""

    section: Section = Section.BOARD
    selected_execution_id: str | None = None
    columns: int = 1
    pending_auto_open: str | None = None


class NavigationCoordinator:
    """Turn error clicks into a log-browser selection.

    ``acknowledge`` records a one-shot pending target; ``consume_pending``
    resolves it against the execution store exactly once.
    """

    def __init__(
        self,
        *,
        state: ViewState,
        tracker: ErrorAcknowledgmentTracker,
        provider: RemoteJobProvider | None = None,
        clear_remote_error: bool = False,
    ) -> None:
        """Create coordinator.

        Args:
            state: Shared view state.
            tracker: Acknowledgment tracker to update on error clicks.
            provider: Provider used for optional remote error clearing.
            clear_remote_error: Whether to also clear the error remotely.
        """
        self._state = state
        self._tracker = tracker
        self._provider = provider
        self._clear_remote_error = clear_remote_error

    @property
    def state(self) -> ViewState:
        return self._state

    async def acknowledge(self, job_name: str) -> None:
        """Open the log browser targeting one job's latest failure.

        Args:
            job_name: Job whose error affordance was clicked.
        """
        self._tracker.acknowledge(job_name)
        self._state.section = Section.LOGS
        self._state.pending_auto_open = job_name
        if self._clear_remote_error and self._provider is not None:
            try:
                await self._provider.clear_error(job_name)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.debug("Remote error clear failed for %s: %s", job_name, exc)

    def consume_pending(self, executions: ExecutionStore) -> Execution | None:
        """Resolve the pending target against the current executions.

        Waits while the execution collection is empty. Otherwise selects the
        most recent failed execution of the target job, if any, and clears the
        pending target either way.

        Args:
            executions: Current execution store.

        Returns:
            Selected execution, or ``None`` when nothing was selected.
        """
        target = self._state.pending_auto_open
        if target is None or len(executions) == 0:
            return None
        self._state.pending_auto_open = None
        match = executions.latest_failed_for(target)
        if match is None:
            _LOGGER.debug("No failed execution found yet for %s", target)
            return None
        self._state.selected_execution_id = match.id
        return match

    def select_section(self, section: Section) -> None:
        """Switch sections; leaving the log browser drops any pending target.

        Args:
            section: Target section.
        """
        self._state.section = section
        if section != Section.LOGS:
            self._state.pending_auto_open = None

    def select_execution(self, execution_id: str | None) -> None:
        """Select an execution directly and show the log browser.

        Args:
            execution_id: Execution to show, or ``None`` to clear.
        """
        self._state.section = Section.LOGS
        self._state.selected_execution_id = execution_id
