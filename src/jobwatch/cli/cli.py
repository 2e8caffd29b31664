"""Typer CLI entrypoint for jobwatch."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.console import Console, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from jobwatch.cli import bootstrap
from jobwatch.cli.renderers import (
    render_board,
    render_execution_detail,
    render_log_browser,
    render_settings,
)
from jobwatch.config import MonitorConfig, write_default_config
from jobwatch.monitor import Monitor
from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.errors import ProviderError
from jobwatch.provider.memory import build_demo_provider
from jobwatch.provider.models import ExecutionStatus
from jobwatch.settings.gate import Feature, SettingsGate, SettingsSaveError
from jobwatch.view.navigation import Section

app = typer.Typer(help="Monitor remotely scheduled jobs and their execution logs.")
settings_app = typer.Typer(help="Show and toggle job features.")
app.add_typer(settings_app, name="settings")
_CONSOLE = Console()

T = TypeVar("T")


@dataclass
class CliContext:
    """Options shared by every command."""

    config_file: Path | None
    config: MonitorConfig


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            file_okay=True,
            dir_okay=False,
            help="Path to jobwatch config YAML/JSON file.",
        ),
    ] = None,
    base_url: Annotated[
        str | None,
        typer.Option(help="Override the scheduler API base URL."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log polling details."),
    ] = False,
) -> None:
    """Load config and logging shared by all commands.

    Args:
        ctx: Typer context.
        config_file: Optional config file override.
        base_url: Optional provider base URL override.
        verbose: Whether to enable debug logging.
    """
    bootstrap.configure_logging(verbose=verbose)
    config = bootstrap.load_config_or_default(config_file, console=_CONSOLE)
    if base_url is not None:
        config = config.model_copy(
            update={
                "provider": config.provider.model_copy(update={"base_url": base_url})
            }
        )
    ctx.obj = CliContext(config_file=config_file, config=config)


@app.command("init")
def init_command(
    ctx: typer.Context,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Overwrite existing config file."),
    ] = False,
) -> None:
    """Write a default config file.

    Args:
        ctx: Typer context.
        overwrite: Whether to overwrite an existing config file.
    """
    options: CliContext = ctx.obj
    target = options.config_file or bootstrap.default_config_file()
    written = write_default_config(target, overwrite=overwrite)
    status = "written" if written else "exists"
    _CONSOLE.print(
        Panel(
            f"Config: {target}\nStatus: {status}",
            title="Initialized",
            border_style="green" if written else "yellow",
            expand=True,
        )
    )


@app.command("jobs")
def jobs_command(ctx: typer.Context) -> None:
    """Show the job status board once.

    Args:
        ctx: Typer context.
    """
    options: CliContext = ctx.obj

    async def _run(provider: RemoteJobProvider) -> RenderableType:
        monitor = _build_monitor(provider, options.config)
        result = await monitor.refresh()
        if not result.jobs_updated:
            _fail("Could not fetch jobs from provider.")
        return render_board(monitor)

    _CONSOLE.print(_with_provider(options.config, _run))


@app.command("executions")
def executions_command(
    ctx: typer.Context,
    job: Annotated[str | None, typer.Option(help="Only this job.")] = None,
    status: Annotated[
        ExecutionStatus | None, typer.Option(help="Only this status.")
    ] = None,
    search: Annotated[
        str, typer.Option(help="Text matched against job names and logs.")
    ] = "",
) -> None:
    """List executions, newest first.

    Args:
        ctx: Typer context.
        job: Optional job filter.
        status: Optional status filter.
        search: Optional search text.
    """
    options: CliContext = ctx.obj

    async def _run(provider: RemoteJobProvider) -> RenderableType:
        monitor = _build_monitor(provider, options.config)
        result = await monitor.refresh()
        if not result.executions_updated:
            _fail("Could not fetch executions from provider.")
        table = Table(title="Executions", show_header=True, header_style="bold cyan")
        table.add_column("Execution ID", style="bold")
        table.add_column("Job")
        table.add_column("Status")
        table.add_column("Started")
        table.add_column("Duration", justify="right")
        for cell in monitor.execution_cells(search, job_name=job, status=status):
            card = cell.item
            table.add_row(
                card.id,
                card.title,
                f"{card.icon} {card.status_text}",
                card.started,
                card.duration or "-",
            )
        return table

    _CONSOLE.print(_with_provider(options.config, _run))


@app.command("logs")
def logs_command(
    ctx: typer.Context,
    execution_id: Annotated[str, typer.Argument(help="Execution to show.")],
) -> None:
    """Show one execution's log trail.

    Args:
        ctx: Typer context.
        execution_id: Target execution id.
    """
    options: CliContext = ctx.obj

    async def _run(provider: RemoteJobProvider) -> RenderableType:
        executions = await provider.list_executions()
        for execution in executions:
            if execution.id == execution_id:
                return render_execution_detail(execution)
        _fail(f"Execution '{execution_id}' not found.")

    _CONSOLE.print(_with_provider(options.config, _run))


@app.command("trigger")
def trigger_command(
    ctx: typer.Context,
    job_name: Annotated[str, typer.Argument(help="Job to run now.")],
) -> None:
    """Request an immediate run of one job.

    Args:
        ctx: Typer context.
        job_name: Target job name.
    """
    options: CliContext = ctx.obj

    async def _run(provider: RemoteJobProvider) -> str:
        await provider.trigger(job_name)
        return f"[green]Triggered {job_name}.[/green]"

    _CONSOLE.print(_with_provider(options.config, _run))


@app.command("clear-error")
def clear_error_command(
    ctx: typer.Context,
    job_name: Annotated[str, typer.Argument(help="Job whose error to clear.")],
) -> None:
    """Clear one job's error on the provider.

    Args:
        ctx: Typer context.
        job_name: Target job name.
    """
    options: CliContext = ctx.obj

    async def _run(provider: RemoteJobProvider) -> str:
        await provider.clear_error(job_name)
        return f"[green]Cleared error for {job_name}.[/green]"

    _CONSOLE.print(_with_provider(options.config, _run))


@settings_app.command("show")
def settings_show_command(ctx: typer.Context) -> None:
    """Show feature toggles and their prerequisites.

    Args:
        ctx: Typer context.
    """
    options: CliContext = ctx.obj

    async def _run(provider: RemoteJobProvider) -> RenderableType:
        return render_settings(await SettingsGate.load(provider))

    _CONSOLE.print(_with_provider(options.config, _run))


@settings_app.command("enable")
def settings_enable_command(
    ctx: typer.Context,
    feature: Annotated[Feature, typer.Argument(help="Feature to enable.")],
) -> None:
    """Enable one feature when its prerequisites are set.

    Args:
        ctx: Typer context.
        feature: Target feature.
    """
    _toggle_feature(ctx.obj, feature, enabled=True)


@settings_app.command("disable")
def settings_disable_command(
    ctx: typer.Context,
    feature: Annotated[Feature, typer.Argument(help="Feature to disable.")],
) -> None:
    """Disable one feature.

    Args:
        ctx: Typer context.
        feature: Target feature.
    """
    _toggle_feature(ctx.obj, feature, enabled=False)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    section: Annotated[
        Section, typer.Option(help="Section shown first.")
    ] = Section.BOARD,
    open_error: Annotated[
        str | None,
        typer.Option(help="Open this job's latest failure after the first poll."),
    ] = None,
    duration: Annotated[
        float | None,
        typer.Option(help="Stop after this many seconds."),
    ] = None,
) -> None:
    """Live job board / log browser until interrupted.

    Args:
        ctx: Typer context.
        section: Initially shown section.
        open_error: Optional job whose error to open.
        duration: Optional run time limit in seconds.
    """
    options: CliContext = ctx.obj
    provider = bootstrap.build_provider(options.config)
    _run_live(provider, options.config, section, open_error, duration)


@app.command("demo")
def demo_command(
    ctx: typer.Context,
    section: Annotated[
        Section, typer.Option(help="Section shown first.")
    ] = Section.BOARD,
    open_error: Annotated[
        str | None,
        typer.Option(help="Open this job's latest failure after the first poll."),
    ] = None,
    duration: Annotated[
        float | None,
        typer.Option(help="Stop after this many seconds."),
    ] = None,
) -> None:
    """Live view against a built-in in-memory scheduler.

    Args:
        ctx: Typer context.
        section: Initially shown section.
        open_error: Optional job whose error to open.
        duration: Optional run time limit in seconds.
    """
    options: CliContext = ctx.obj
    _run_live(build_demo_provider(), options.config, section, open_error, duration)


def _build_monitor(provider: RemoteJobProvider, config: MonitorConfig) -> Monitor:
    monitor = Monitor(provider=provider, config=config)
    monitor.resize(bootstrap.container_width(config, _CONSOLE))
    return monitor


def _with_provider(
    config: MonitorConfig,
    action: Callable[[RemoteJobProvider], Awaitable[T]],
) -> T:
    """Run one async action against a fresh provider and close it.

    Args:
        config: Monitor config.
        action: Coroutine function receiving the provider.

    Returns:
        Action result.

    Raises:
        Exit: With code 1 when the provider fails.
    """
    provider = bootstrap.build_provider(config)

    async def _run() -> T:
        try:
            return await action(provider)
        finally:
            await provider.aclose()

    try:
        return asyncio.run(_run())
    except ProviderError as exc:
        _CONSOLE.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc


def _fail(message: str) -> None:
    _CONSOLE.print(f"[bold red]{message}[/bold red]")
    raise typer.Exit(code=1)


def _toggle_feature(options: CliContext, feature: Feature, *, enabled: bool) -> None:
    async def _run(provider: RemoteJobProvider) -> RenderableType:
        gate = await SettingsGate.load(provider)
        try:
            result = await gate.set_enabled(feature, enabled)
        except SettingsSaveError as exc:
            _fail(str(exc))
        if not result.accepted:
            _fail(result.message or f"Cannot enable {feature.value}.")
        state = "enabled" if result.enabled else "disabled"
        return f"[green]{feature.value} {state}.[/green]"

    _CONSOLE.print(_with_provider(options.config, _run))


def _render_monitor(monitor: Monitor) -> RenderableType:
    if monitor.state.section == Section.LOGS:
        return render_log_browser(monitor)
    return render_board(monitor)


def _run_live(
    provider: RemoteJobProvider,
    config: MonitorConfig,
    section: Section,
    open_error: str | None,
    duration: float | None,
) -> None:
    async def _loop() -> None:
        monitor = Monitor(provider=provider, config=config)
        monitor.select_section(section)
        pending_error = open_error
        loop = asyncio.get_running_loop()
        deadline = None if duration is None else loop.time() + duration
        try:
            async with monitor:
                with Live(console=_CONSOLE, auto_refresh=False) as live:
                    while deadline is None or loop.time() < deadline:
                        monitor.resize(bootstrap.container_width(config, _CONSOLE))
                        jobs_loaded = monitor.store.jobs_version > 0
                        if pending_error is not None and jobs_loaded:
                            await monitor.open_error(pending_error)
                            pending_error = None
                        live.update(_render_monitor(monitor), refresh=True)
                        await asyncio.sleep(config.polling.interval_seconds)
        finally:
            await provider.aclose()

    try:
        asyncio.run(_loop())
    except KeyboardInterrupt:
        _CONSOLE.print("[dim]Stopped.[/dim]")
