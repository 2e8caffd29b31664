"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from jobwatch.provider.memory import InMemoryJobProvider
from jobwatch.provider.models import ExecutionStatus
from tests.unit.helpers import execution, job


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary workspace root. .jobwatch will be created under it."""
    return tmp_path


@pytest.fixture
def provider() -> InMemoryJobProvider:
    """In-memory provider with one healthy and one failing job."""
    return InMemoryJobProvider(
        jobs=[
            job("update_prices"),
            job("backup_grist", interval=7200, err="disk full"),
        ],
        executions=[
            execution("update_prices", offset_seconds=30),
            execution(
                "backup_grist",
                offset_seconds=20,
                status=ExecutionStatus.FAILED,
                messages=("disk full",),
            ),
            execution(
                "backup_grist",
                offset_seconds=10,
                status=ExecutionStatus.FAILED,
                messages=("older failure",),
            ),
        ],
    )
