"""Settings object and gated feature toggles."""

from jobwatch.settings.gate import (
    FEATURE_RULES,
    GROUP_MESSAGES,
    MIN_INTERVAL_SECONDS,
    Feature,
    FeatureRule,
    GateResult,
    MessageGroup,
    SettingsGate,
    SettingsSaveError,
    is_valid_backup_path,
)
from jobwatch.settings.models import (
    ExchangeSettings,
    FeedSettings,
    GristSettings,
    KrakenSettings,
    OnChainSettings,
    PendleSettings,
    Settings,
    ToggleSettings,
    Wallet,
    WalletJobs,
    WalletType,
)

__all__ = [
    "FEATURE_RULES",
    "GROUP_MESSAGES",
    "MIN_INTERVAL_SECONDS",
    "ExchangeSettings",
    "Feature",
    "FeatureRule",
    "FeedSettings",
    "GateResult",
    "GristSettings",
    "KrakenSettings",
    "MessageGroup",
    "OnChainSettings",
    "PendleSettings",
    "Settings",
    "SettingsGate",
    "SettingsSaveError",
    "ToggleSettings",
    "Wallet",
    "WalletJobs",
    "WalletType",
    "is_valid_backup_path",
]
