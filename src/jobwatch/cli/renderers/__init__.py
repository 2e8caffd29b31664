"""Rich renderers for the board, the log browser, and settings."""

from jobwatch.cli.renderers.board import render_board, render_job_card
from jobwatch.cli.renderers.executions import (
    render_execution_detail,
    render_log_browser,
)
from jobwatch.cli.renderers.settings import render_settings

__all__ = [
    "render_board",
    "render_execution_detail",
    "render_job_card",
    "render_log_browser",
    "render_settings",
]
