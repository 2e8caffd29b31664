"""Unit tests for the monitor composition root."""

from __future__ import annotations

import asyncio

import pytest

from jobwatch.config import MonitorConfig
from jobwatch.monitor import Monitor
from jobwatch.provider.memory import InMemoryJobProvider
from jobwatch.provider.models import ExecutionStatus
from jobwatch.view.navigation import Section
from tests.unit.helpers import BASE_TIME, execution, job


class _FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _monitor(provider: InMemoryJobProvider, **kwargs: object) -> Monitor:
    return Monitor(
        provider=provider, wall_clock=lambda: BASE_TIME.timestamp(), **kwargs
    )


@pytest.mark.unit
def test_open_error_selects_latest_failure_and_marks_seen(
    provider: InMemoryJobProvider,
) -> None:
    """Error click should jump to the job's newest failed execution."""
    # Arrange - monitor after one poll
    monitor = _monitor(provider)
    asyncio.run(monitor.refresh())

    # Act - click error on backup_grist
    selected = asyncio.run(monitor.open_error("backup_grist"))

    # Assert - logs section with latest failure open, card no longer new
    assert selected is not None
    assert selected.start_time.second == 20
    assert monitor.state.section == Section.LOGS
    assert monitor.selected_execution() == selected
    card = next(item for item in monitor.board_cards() if item.name == "backup_grist")
    assert card.is_new_error is False
    assert card.clickable is True


@pytest.mark.unit
def test_open_error_ignores_jobs_without_error(provider: InMemoryJobProvider) -> None:
    monitor = _monitor(provider)
    asyncio.run(monitor.refresh())

    assert asyncio.run(monitor.open_error("update_prices")) is None
    assert monitor.state.section == Section.BOARD


@pytest.mark.unit
def test_pending_target_resolves_on_later_tick() -> None:
    """Error click before executions load should resolve once they arrive."""
    # Arrange - executions fetch fails on the first poll
    provider = InMemoryJobProvider(
        jobs=[job("g", err="boom")],
        executions=[execution("g", status=ExecutionStatus.FAILED, execution_id="g-1")],
    )
    provider.fail_next("list_executions")
    monitor = _monitor(provider)
    asyncio.run(monitor.refresh())

    # Act - click, then poll again
    immediate = asyncio.run(monitor.open_error("g"))
    asyncio.run(monitor.refresh())

    # Assert - selected after the second tick
    assert immediate is None
    assert monitor.state.selected_execution_id == "g-1"
    assert monitor.state.pending_auto_open is None


@pytest.mark.unit
def test_error_clearing_resets_acknowledgment(provider: InMemoryJobProvider) -> None:
    """Cleared errors should come back as new if they recur."""
    monitor = _monitor(provider)
    asyncio.run(monitor.refresh())
    asyncio.run(monitor.open_error("backup_grist"))

    provider.put_job(job("backup_grist", interval=7200))
    asyncio.run(monitor.refresh())
    provider.put_job(job("backup_grist", interval=7200, err="disk full"))
    asyncio.run(monitor.refresh())

    assert monitor.tracker.is_new_error("backup_grist") is True


@pytest.mark.unit
def test_running_execution_cannot_be_toggled(provider: InMemoryJobProvider) -> None:
    """The current running execution should not open a detail card."""
    provider.add_execution(
        execution(
            "update_prices",
            offset_seconds=60,
            status=ExecutionStatus.RUNNING,
            execution_id="live",
        )
    )
    monitor = _monitor(provider)
    asyncio.run(monitor.refresh())

    assert monitor.toggle_execution("live") is False
    assert monitor.toggle_execution("missing") is False
    assert monitor.state.selected_execution_id is None


@pytest.mark.unit
def test_execution_cells_place_detail_after_row(provider: InMemoryJobProvider) -> None:
    """Toggled execution should render as a detail cell after its row."""
    monitor = _monitor(provider)
    asyncio.run(monitor.refresh())
    monitor.resize(900)
    oldest = monitor.store.executions.recent_first()[-1]

    assert monitor.toggle_execution(oldest.id) is True
    cells = monitor.execution_cells()

    assert monitor.state.columns == 3
    assert [cell.is_detail for cell in cells] == [False, False, False, True]
    assert cells[-1].item.id == oldest.id


@pytest.mark.unit
def test_trigger_shows_feedback_then_expires(provider: InMemoryJobProvider) -> None:
    """Trigger should hold brief feedback and refresh job state."""
    # Arrange - monitor with controllable monotonic clock
    clock = _FakeClock(10.0)
    monitor = _monitor(provider, monotonic=clock)
    asyncio.run(monitor.refresh())

    # Act - trigger twice in quick succession
    first = asyncio.run(monitor.trigger("update_prices"))
    second = asyncio.run(monitor.trigger("update_prices"))
    triggering = monitor.is_triggering("update_prices")
    clock.now += 2.5

    # Assert - one remote call, feedback expired
    assert first is True
    assert second is False
    assert triggering is True
    assert provider.triggered == ["update_prices"]
    assert monitor.store.job("update_prices").is_executing is True
    assert monitor.is_triggering("update_prices") is False


@pytest.mark.unit
def test_trigger_failure_returns_false(provider: InMemoryJobProvider) -> None:
    provider.fail_next("trigger")
    monitor = _monitor(provider)

    assert asyncio.run(monitor.trigger("update_prices")) is False


@pytest.mark.unit
def test_remote_clear_follows_config(provider: InMemoryJobProvider) -> None:
    """Config flag should opt into clearing errors remotely on click."""
    config = MonitorConfig.model_validate({"navigation": {"clear_remote_error": True}})
    monitor = _monitor(provider, config=config)
    asyncio.run(monitor.refresh())

    asyncio.run(monitor.open_error("backup_grist"))

    assert provider.cleared == ["backup_grist"]


@pytest.mark.unit
def test_mount_polls_until_unmount(provider: InMemoryJobProvider) -> None:
    config = MonitorConfig.model_validate({"polling": {"interval_ms": 100}})
    monitor = _monitor(provider, config=config)

    async def _main() -> None:
        async with monitor:
            for _ in range(100):
                if monitor.poller.ticks:
                    break
                await asyncio.sleep(0.01)

    asyncio.run(_main())

    assert monitor.has_enabled_jobs() is True
    assert monitor.poller.stopped is True


@pytest.mark.unit
def test_open_error_waits_for_first_job_snapshot(
    provider: InMemoryJobProvider,
) -> None:
    """A tick without job snapshots should not count as the first poll."""
    # Arrange - first poll loses both fetches
    provider.fail_next("list_jobs")
    provider.fail_next("list_executions")
    monitor = _monitor(provider)

    # Act - failed poll, then a healthy one, then the error click
    asyncio.run(monitor.refresh())
    ticks_after_failure = monitor.poller.ticks
    asyncio.run(monitor.refresh())
    selected = asyncio.run(monitor.open_error("backup_grist"))

    # Assert - failure not counted, click lands once jobs are known
    assert ticks_after_failure == 0
    assert monitor.store.jobs_version == 1
    assert selected is not None
    assert monitor.state.section == Section.LOGS
