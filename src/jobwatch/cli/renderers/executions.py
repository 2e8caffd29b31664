"""Execution log browser Rich renderer helpers."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jobwatch.monitor import Monitor
from jobwatch.provider.models import Execution, ExecutionStatus, LogLevel
from jobwatch.view.grid import GridCell
from jobwatch.view.presenters import ExecutionCard, format_job_name

_STATUS_STYLES = {
    ExecutionStatus.RUNNING: "yellow",
    ExecutionStatus.COMPLETED: "green",
    ExecutionStatus.FAILED: "red",
}

_LEVEL_STYLES = {
    LogLevel.INFO: "",
    LogLevel.ERROR: "red",
    LogLevel.SUCCESS: "green",
}


def render_log_browser(
    monitor: Monitor,
    query: str = "",
    *,
    job_name: str | None = None,
    status: ExecutionStatus | None = None,
) -> RenderableType:
    """Render execution cards with the expanded detail card below its row.

    Args:
        monitor: Monitor holding execution and selection state.
        query: Optional search text.
        job_name: Optional job filter.
        status: Optional status filter.

    Returns:
        Log browser renderable.
    """
    cells = monitor.execution_cells(query, job_name=job_name, status=status)
    if not cells:
        return Panel(
            Text(
                "No job executions found. Jobs will appear here once they run.",
                style="italic dim",
                justify="center",
            ),
            title="Logs",
            border_style="yellow",
            expand=True,
        )
    columns = max(1, monitor.state.columns)
    selected = monitor.selected_execution()
    closing = monitor.details.is_closing
    blocks: list[RenderableType] = []
    row: list[GridCell[ExecutionCard]] = []
    for cell in cells:
        if cell.is_detail:
            blocks.append(_card_row(row, columns))
            row = []
            if selected is not None:
                blocks.append(render_execution_detail(selected, closing=closing))
            continue
        row.append(cell)
        if len(row) == columns:
            blocks.append(_card_row(row, columns))
            row = []
    if row:
        blocks.append(_card_row(row, columns))
    return Panel(Group(*blocks), title="Logs", border_style="cyan", expand=True)


def render_execution_detail(
    execution: Execution, *, closing: bool = False
) -> RenderableType:
    """Render one execution's log trail.

    Args:
        execution: Execution to render.
        closing: Whether the card is in its closing phase.

    Returns:
        Detail panel.
    """
    if execution.logs:
        table = Table(show_header=False, box=None, expand=True, padding=(0, 1))
        table.add_column("Time", style="dim", no_wrap=True)
        table.add_column("Message")
        for entry in execution.logs:
            table.add_row(
                entry.timestamp, Text(entry.message, style=_LEVEL_STYLES[entry.level])
            )
        body: RenderableType = table
    else:
        body = Text("No logs available for this execution.", style="italic dim")
    started = execution.start_time.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    return Panel(
        body,
        title=f"{format_job_name(execution.job_name)} · {started}",
        subtitle=execution.status.value.upper(),
        border_style="dim" if closing else _STATUS_STYLES[execution.status],
        expand=True,
    )


def _card_row(row: list[GridCell[ExecutionCard]], columns: int) -> RenderableType:
    grid = Table.grid(expand=True, padding=(0, 1))
    for _ in range(columns):
        grid.add_column(ratio=1)
    cards: list[RenderableType] = [_render_card(cell.item) for cell in row]
    cards.extend(Text("") for _ in range(columns - len(cards)))
    grid.add_row(*cards)
    return grid


def _render_card(card: ExecutionCard) -> RenderableType:
    style = _STATUS_STYLES.get(card.status, "")
    text = Text()
    text.append(f"{card.icon} {card.status_text}", style=f"bold {style}")
    text.append(f"\n{card.title}")
    text.append(f"\n{card.started}", style="dim")
    if card.duration is not None:
        text.append(f"  Duration: {card.duration}", style="dim")
    text.append(f"\n{card.id}", style="dim italic")
    return Panel(text, border_style=style or "white", expand=True)
