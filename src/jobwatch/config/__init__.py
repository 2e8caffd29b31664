"""Monitor configuration loading."""

from jobwatch.config.monitor_config import (
    BoardSettings,
    ConfigError,
    GridSettings,
    MonitorConfig,
    NavigationSettings,
    PollingSettings,
    ProviderSettings,
    load_config,
    write_default_config,
)

__all__ = [
    "BoardSettings",
    "ConfigError",
    "GridSettings",
    "MonitorConfig",
    "NavigationSettings",
    "PollingSettings",
    "ProviderSettings",
    "load_config",
    "write_default_config",
]
