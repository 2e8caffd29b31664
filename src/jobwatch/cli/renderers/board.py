"""Job status board Rich renderer helpers."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from jobwatch.monitor import Monitor
from jobwatch.view.presenters import JobCard, JobRunState

_STATE_LABELS = {
    JobRunState.EXECUTING: ("⚡ Executing", "bold yellow"),
    JobRunState.RUNNING: ("● Running", "green"),
    JobRunState.PAUSED: ("○ Paused", "dim"),
}


def render_board(monitor: Monitor) -> RenderableType:
    """Render the job status board as a card grid.

    Args:
        monitor: Monitor holding current job state.

    Returns:
        Board renderable.
    """
    if not monitor.has_enabled_jobs():
        return Panel(
            Text("No jobs currently enabled.", style="italic dim", justify="center"),
            title="Jobs",
            border_style="yellow",
            expand=True,
        )
    cards = [render_job_card(card) for card in monitor.board_cards()]
    columns = max(1, monitor.state.columns)
    grid = Table.grid(expand=True, padding=(0, 1))
    for _ in range(columns):
        grid.add_column(ratio=1)
    for start in range(0, len(cards), columns):
        row: list[RenderableType] = list(cards[start : start + columns])
        row.extend(Text("") for _ in range(columns - len(row)))
        grid.add_row(*row)
    return Panel(grid, title="Jobs", border_style="cyan", expand=True)


def render_job_card(card: JobCard) -> RenderableType:
    """Render one job card.

    Args:
        card: Job card display model.

    Returns:
        Card panel.
    """
    label, style = _STATE_LABELS[card.state]
    header = Text()
    header.append(card.title, style="bold")
    header.append("  ")
    header.append(label, style=style)
    if card.triggering:
        header.append("  ↻ triggering", style="cyan")
    lines: list[RenderableType] = [
        header,
        ProgressBar(total=100, completed=card.progress),
        Text(f"Next run in {card.countdown}", style="dim"),
    ]
    if card.status_text:
        lines.append(Text(card.status_text, style="italic"))
    border = "cyan"
    if card.is_new_error:
        lines.append(Text(f"✖ {card.error}", style="bold red"))
        border = "red"
    elif card.clickable:
        lines.append(Text(f"✖ {card.error} (seen)", style="red dim"))
        border = "magenta"
    return Panel(Group(*lines), border_style=border, expand=True)
