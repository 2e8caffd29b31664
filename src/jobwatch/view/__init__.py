"""View-state engine: acknowledgment, navigation, grid placement, cards."""

from jobwatch.view.acknowledgment import ErrorAcknowledgmentTracker, ErrorState
from jobwatch.view.grid import DetailCardToggle, GridCell, GridPlacementEngine
from jobwatch.view.navigation import NavigationCoordinator, Section, ViewState
from jobwatch.view.presenters import (
    ExecutionCard,
    JobCard,
    JobRunState,
    build_execution_card,
    build_job_card,
    format_duration,
    format_job_name,
)

__all__ = [
    "DetailCardToggle",
    "ErrorAcknowledgmentTracker",
    "ErrorState",
    "ExecutionCard",
    "GridCell",
    "GridPlacementEngine",
    "JobCard",
    "JobRunState",
    "NavigationCoordinator",
    "Section",
    "ViewState",
    "build_execution_card",
    "build_job_card",
    "format_duration",
    "format_job_name",
]
