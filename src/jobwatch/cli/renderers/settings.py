"""Settings toggles Rich renderer helpers."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from jobwatch.settings.gate import FEATURE_RULES, Feature, SettingsGate
from jobwatch.view.presenters import format_duration


def render_settings(gate: SettingsGate) -> RenderableType:
    """Render feature toggles with intervals and validation messages.

    Args:
        gate: Settings gate over the loaded settings.

    Returns:
        Settings renderable.
    """
    table = Table(title="Features", show_header=True, header_style="bold cyan")
    table.add_column("Feature", style="bold")
    table.add_column("Enabled")
    table.add_column("Interval", justify="right")
    table.add_column("Prerequisites")
    for feature in Feature:
        section = FEATURE_RULES[feature].section(gate.draft)
        enabled = (
            Text("yes", style="green") if section.enabled else Text("no", style="dim")
        )
        ready = (
            Text("ok", style="green")
            if gate.can_enable(feature)
            else Text("missing", style="red")
        )
        table.add_row(
            feature.value, enabled, format_duration(section.interval), ready
        )
    blocks: list[RenderableType] = [table]
    for message in gate.messages.values():
        blocks.append(Text(message, style="italic red"))
    if gate.has_unsaved_changes:
        blocks.append(Text("Unsaved changes", style="yellow"))
    return Panel(Group(*blocks), title="Settings", border_style="cyan", expand=True)
