"""Monitor config models and loading helpers."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ProviderSettings(BaseModel):
    """Remote scheduler connection settings."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = "http://127.0.0.1:8765"
    timeout_seconds: float = Field(default=5.0, gt=0)


class PollingSettings(BaseModel):
    """Polling loop cadence."""

    model_config = ConfigDict(extra="forbid")

    interval_ms: int = Field(default=1000, ge=100)

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000


class GridSettings(BaseModel):
    """Log browser card grid geometry."""

    model_config = ConfigDict(extra="forbid")

    min_item_width: int = Field(default=280, ge=1)
    gap: int = Field(default=16, ge=0)
    close_delay_ms: int = Field(default=300, ge=0)
    container_width: int | None = Field(default=None, ge=1)
    cell_width_px: int = Field(default=8, ge=1)


class NavigationSettings(BaseModel):
    """Error click navigation behavior."""

    model_config = ConfigDict(extra="forbid")

    clear_remote_error: bool = False


class BoardSettings(BaseModel):
    """Status board behavior."""

    model_config = ConfigDict(extra="forbid")

    trigger_feedback_seconds: float = Field(default=2.0, ge=0)


class MonitorConfig(BaseModel):
    """Root monitor configuration model."""

    model_config = ConfigDict(extra="forbid")

    provider: ProviderSettings = ProviderSettings()
    polling: PollingSettings = PollingSettings()
    grid: GridSettings = GridSettings()
    navigation: NavigationSettings = NavigationSettings()
    board: BoardSettings = BoardSettings()


class ConfigError(RuntimeError):
    """Raised when monitor config cannot be decoded or validated."""


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode monitor config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        ConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid monitor config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid monitor config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid monitor config payload: root must be an object")
    return payload


def load_config(path: Path) -> MonitorConfig:
    """Load monitor config from disk, defaulting when missing.

    Args:
        path: Config file path.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        ConfigError: If payload decode or validation fails.
    """
    if not path.exists():
        return MonitorConfig()
    payload = _decode_config_payload(path)
    try:
        return MonitorConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid monitor config payload: {exc}") from exc


def write_default_config(path: Path, *, overwrite: bool = False) -> bool:
    """Write the default config as YAML.

    Args:
        path: Target config path.
        overwrite: Whether to replace an existing file.

    Returns:
        ``True`` when the file was written.
    """
    if path.exists() and not overwrite:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = MonitorConfig().model_dump(mode="json")
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return True
