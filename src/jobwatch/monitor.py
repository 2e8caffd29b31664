"""Composition root wiring polling, shared state, and view state."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from jobwatch.config import MonitorConfig
from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.models import Execution, ExecutionStatus
from jobwatch.sync.poller import Poller, TickResult
from jobwatch.sync.store import MonitorStore
from jobwatch.view.acknowledgment import ErrorAcknowledgmentTracker
from jobwatch.view.grid import DetailCardToggle, GridCell, GridPlacementEngine
from jobwatch.view.navigation import NavigationCoordinator, Section, ViewState
from jobwatch.view.presenters import (
    ExecutionCard,
    JobCard,
    build_execution_card,
    build_job_card,
)

_LOGGER = logging.getLogger(__name__)


class Monitor:
    """Job board and log browser state bound to one polling loop.

    ``mount`` starts polling and ``unmount`` stops it. User actions
    (error clicks, card toggles, triggers, resizes) only adjust local view
    state, apart from the explicit remote ``trigger``.
    """

    def __init__(
        self,
        *,
        provider: RemoteJobProvider,
        config: MonitorConfig | None = None,
        wall_clock: Callable[[], float] = time.time,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Compose monitor components.

        Args:
            provider: Remote job provider.
            config: Monitor configuration; defaults when omitted.
            wall_clock: Epoch-seconds clock for countdowns.
            monotonic: Monotonic clock for presentational delays.
        """
        self.config = config or MonitorConfig()
        self.provider = provider
        self._wall_clock = wall_clock
        self._monotonic = monotonic
        self.store = MonitorStore()
        self.state = ViewState()
        self.tracker = ErrorAcknowledgmentTracker()
        self.navigation = NavigationCoordinator(
            state=self.state,
            tracker=self.tracker,
            provider=provider,
            clear_remote_error=self.config.navigation.clear_remote_error,
        )
        self.grid = GridPlacementEngine(
            min_item_width=self.config.grid.min_item_width,
            gap=self.config.grid.gap,
        )
        self.details = DetailCardToggle(
            self.state,
            close_delay_seconds=self.config.grid.close_delay_ms / 1000,
            clock=monotonic,
        )
        self.poller = Poller(
            provider=provider,
            store=self.store,
            interval_seconds=self.config.polling.interval_seconds,
        )
        self.poller.add_listener(self._on_tick)
        self._triggering_until: dict[str, float] = {}

    def mount(self) -> None:
        """Start polling; call from inside the running event loop."""
        self.poller.start()

    def unmount(self) -> None:
        """Stop polling; stray in-flight results are discarded."""
        self.poller.stop()

    async def __aenter__(self) -> Monitor:
        self.mount()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.unmount()

    async def refresh(self) -> TickResult:
        """Run one poll tick immediately.

        Returns:
            Tick outcome.
        """
        return await self.poller.tick()

    def select_section(self, section: Section) -> None:
        self.navigation.select_section(section)

    async def open_error(self, job_name: str) -> Execution | None:
        """Handle a click on a job card's error affordance.

        Args:
            job_name: Clicked job.

        Returns:
            Auto-selected failed execution, if one was found.
        """
        if not self.tracker.is_clickable(job_name):
            return None
        await self.navigation.acknowledge(job_name)
        return self._consume_pending()

    def toggle_execution(self, execution_id: str) -> bool:
        """Handle a click on an execution card.

        Args:
            execution_id: Clicked execution id.

        Returns:
            ``False`` when the execution is unknown or still running.
        """
        execution = self.store.executions.find(execution_id)
        if execution is None or not self.store.executions.is_selectable(execution):
            return False
        self.state.section = Section.LOGS
        self.details.toggle(execution_id)
        return True

    def resize(self, container_width: float) -> int:
        """Recompute grid columns for a new container width.

        Args:
            container_width: Rendered container width.

        Returns:
            New column count.
        """
        return self.grid.update_columns(self.state, container_width)

    def selected_execution(self) -> Execution | None:
        selected_id = self.details.selected_id
        if selected_id is None:
            return None
        return self.store.executions.find(selected_id)

    async def trigger(self, job_name: str) -> bool:
        """Request an out-of-band run with brief optimistic feedback.

        Args:
            job_name: Job to trigger.

        Returns:
            ``True`` when the provider accepted the request.
        """
        if self.is_triggering(job_name):
            return False
        self._triggering_until[job_name] = (
            self._monotonic() + self.config.board.trigger_feedback_seconds
        )
        try:
            await self.provider.trigger(job_name)
        except Exception as exc:  # noqa: BLE001
            _LOGGER.debug("Trigger failed for %s: %s", job_name, exc)
            return False
        await self.poller.refresh_jobs()
        return True

    def is_triggering(self, job_name: str) -> bool:
        until = self._triggering_until.get(job_name)
        if until is None:
            return False
        if self._monotonic() >= until:
            del self._triggering_until[job_name]
            return False
        return True

    def board_cards(self) -> list[JobCard]:
        """Build status board cards in name order.

        Returns:
            One card per known job.
        """
        now = self._wall_clock()
        executions = self.store.executions
        return [
            build_job_card(
                job,
                now=now,
                executing=executions.is_job_executing(job),
                acknowledged=self.tracker.is_acknowledged(job.name),
                triggering=self.is_triggering(job.name),
            )
            for job in self.store.jobs
        ]

    def has_enabled_jobs(self) -> bool:
        return any(job.running for job in self.store.jobs)

    def execution_cells(
        self,
        query: str = "",
        *,
        job_name: str | None = None,
        status: ExecutionStatus | None = None,
    ) -> list[GridCell[ExecutionCard]]:
        """Lay out log browser cards with the expanded detail card.

        Args:
            query: Optional search text.
            job_name: Optional job filter.
            status: Optional status filter.

        Returns:
            Grid cells, newest execution first.
        """
        executions = self.store.executions
        visible = executions.search(query, job_name=job_name, status=status)
        cards = [
            build_execution_card(item, selectable=executions.is_selectable(item))
            for item in visible
        ]
        selected_id = self.details.selected_id
        selected_index = next(
            (index for index, card in enumerate(cards) if card.id == selected_id),
            -1,
        )
        return self.grid.layout(
            cards, selected_index=selected_index, columns=self.state.columns
        )

    def _on_tick(self, result: TickResult) -> None:
        if result.jobs_updated:
            self.tracker.reconcile(self.store.jobs)
        if self.state.section == Section.LOGS:
            self._consume_pending()

    def _consume_pending(self) -> Execution | None:
        match = self.navigation.consume_pending(self.store.executions)
        if match is not None:
            _LOGGER.info("Opened failed execution %s", match.id)
        return match
