"""CLI bootstrap helpers: logging, config, provider construction."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from jobwatch.config import ConfigError, MonitorConfig, load_config
from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.http import HttpJobProvider

_LOGGING_CONFIGURED = False


def configure_logging(*, verbose: bool = False) -> None:
    """Configure Rich-backed logging once for CLI commands.

    Args:
        verbose: Whether to log at DEBUG level.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _LOGGING_CONFIGURED = True


def default_config_file() -> Path:
    """Return default config path for the current directory.

    Returns:
        ``.jobwatch/config.yaml``, or the JSON variant when only it exists.
    """
    root = Path.cwd() / ".jobwatch"
    yaml_path = root / "config.yaml"
    json_path = root / "config.json"
    if not yaml_path.exists() and json_path.exists():
        return json_path
    return yaml_path


def load_config_or_default(
    config_file: Path | None, *, console: Console
) -> MonitorConfig:
    """Load monitor config, falling back to defaults when invalid.

    Args:
        config_file: Optional config path override.
        console: Rich console for config warnings.

    Returns:
        Loaded or default config.
    """
    effective = config_file or default_config_file()
    try:
        return load_config(effective)
    except ConfigError as exc:
        console.print(
            f"[yellow]Config at {effective} is invalid; "
            "falling back to defaults.[/yellow]"
        )
        console.print(f"[yellow]Reason: {exc}[/yellow]")
        return MonitorConfig()


def build_provider(config: MonitorConfig) -> RemoteJobProvider:
    """Build the HTTP provider described by config.

    Args:
        config: Monitor config.

    Returns:
        Provider client.
    """
    return HttpJobProvider(
        base_url=config.provider.base_url,
        timeout_seconds=config.provider.timeout_seconds,
    )


def container_width(config: MonitorConfig, console: Console) -> int:
    """Resolve grid container width in pixels for terminal rendering.

    Args:
        config: Monitor config.
        console: Rich console providing terminal width.

    Returns:
        Configured width, or terminal columns times cell width.
    """
    if config.grid.container_width is not None:
        return config.grid.container_width
    return console.width * config.grid.cell_width_px
