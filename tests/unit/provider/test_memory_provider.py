"""Unit tests for the in-memory job provider."""

from __future__ import annotations

import asyncio

import pytest

from jobwatch.provider.errors import ProviderError, ProviderErrorCode
from jobwatch.provider.memory import InMemoryJobProvider, build_demo_provider
from jobwatch.provider.models import ExecutionStatus


@pytest.mark.unit
def test_trigger_then_finish_records_failed_run(provider: InMemoryJobProvider) -> None:
    """Trigger should open a running execution that finish closes as failed."""
    # Arrange / Act - trigger and fail one run
    asyncio.run(provider.trigger("update_prices"))
    started = provider.executions[0]
    provider.finish("update_prices", error="rate limited")

    # Assert - execution and snapshot updated
    finished = provider.executions[0]
    assert started.status == ExecutionStatus.RUNNING
    assert provider.jobs["update_prices"].is_executing is False
    assert provider.jobs["update_prices"].err == "rate limited"
    assert finished.id == started.id
    assert finished.status == ExecutionStatus.FAILED
    assert finished.logs[-1].message == "rate limited"
    assert provider.triggered == ["update_prices"]


@pytest.mark.unit
def test_unknown_job_raises_bad_status(provider: InMemoryJobProvider) -> None:
    """Actions on unknown jobs should fail like a 404 from the scheduler."""
    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(provider.clear_error("nope"))

    assert exc_info.value.code == ProviderErrorCode.BAD_STATUS


@pytest.mark.unit
def test_fail_next_injects_transient_failures(provider: InMemoryJobProvider) -> None:
    """Injected failures should apply only to the next N calls."""
    provider.fail_next("list_jobs", times=2)

    for _ in range(2):
        with pytest.raises(ProviderError):
            asyncio.run(provider.list_jobs())
    jobs = asyncio.run(provider.list_jobs())

    assert len(jobs) == 2
    assert provider.calls["list_jobs"] == 3


@pytest.mark.unit
def test_settings_are_copied_on_load_and_save(provider: InMemoryJobProvider) -> None:
    """Loaded settings should not alias provider state."""
    loaded = asyncio.run(provider.load_settings())
    loaded.grist.enabled = True

    assert provider.settings.grist.enabled is False

    asyncio.run(provider.save_settings(loaded))

    assert provider.settings.grist.enabled is True
    assert provider.saved[-1] is provider.settings


@pytest.mark.unit
def test_demo_provider_seeds_error_and_running_execution() -> None:
    """Demo provider should include one failing and one executing job."""
    demo = build_demo_provider()

    assert demo.jobs["backup_grist"].has_error is True
    assert demo.executions[0].status == ExecutionStatus.RUNNING
    assert any(item.status == ExecutionStatus.FAILED for item in demo.executions)
