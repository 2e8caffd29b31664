"""Feature toggles gated on prerequisite settings."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

from jobwatch.provider.errors import ProviderError
from jobwatch.settings.models import Settings, ToggleSettings, Wallet, WalletType

if TYPE_CHECKING:
    from jobwatch.provider.base import RemoteJobProvider

_LOGGER = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 5


class Feature(StrEnum):
    """Toggleable job features."""

    GRIST_BACKUP = "grist_backup"
    KRAKEN = "kraken"
    HYPERLIQUID = "hyperliquid"
    LIGHTER = "lighter"
    ONCHAIN_EVM = "onchain_evm"
    ONCHAIN_BITCOIN = "onchain_bitcoin"
    ONCHAIN_SOLANA = "onchain_solana"
    PRICES = "prices"
    STOCKS = "stocks"
    PENDLE_MARKETS = "pendle_markets"
    PENDLE_POSITIONS = "pendle_positions"


class MessageGroup(StrEnum):
    """Inline validation message slots, one per prerequisite group."""

    GRIST = "grist"
    KRAKEN = "kraken"
    COINSTATS = "coinstats"
    STOCKS = "stocks"


class SettingsSaveError(RuntimeError):
    """Raised when the settings object cannot be persisted."""


@dataclass(frozen=True)
class GateResult:
    """Outcome of one enable/disable attempt."""

    feature: Feature
    accepted: bool
    enabled: bool
    message: str | None = None


@dataclass(frozen=True)
class FeatureRule:
    """Where a feature's toggle lives and what it requires to turn on."""

    section: Callable[[Settings], ToggleSettings]
    prerequisite: Callable[[Settings], bool] | None = None
    group: MessageGroup | None = None


def is_valid_backup_path(path: str) -> bool:
    """Check the backup path looks like a file path.

    Args:
        path: Raw backup path.

    Returns:
        ``True`` when trimmed path is at least 3 chars and contains ``.``.
    """
    trimmed = path.strip()
    return len(trimmed) >= 3 and "." in trimmed


def _filled(*values: str) -> bool:
    return all(value.strip() for value in values)


def _coinstats_ready(settings: Settings) -> bool:
    return _filled(settings.onchain.coinstats_api_key)


GROUP_MESSAGES: MappingProxyType[MessageGroup, str] = MappingProxyType(
    {
        MessageGroup.GRIST: (
            "Enter a valid file path (e.g., /path/to/backup.json) "
            "to enable Grist backup"
        ),
        MessageGroup.KRAKEN: "Enter both API Key and API Secret to enable Kraken",
        MessageGroup.COINSTATS: "Enter CoinStats API Key to enable balance fetching",
        MessageGroup.STOCKS: "Enter TwelveData API Key to enable stocks",
    }
)

FEATURE_RULES: MappingProxyType[Feature, FeatureRule] = MappingProxyType(
    {
        Feature.GRIST_BACKUP: FeatureRule(
            section=lambda s: s.grist,
            prerequisite=lambda s: is_valid_backup_path(s.grist.backup_path),
            group=MessageGroup.GRIST,
        ),
        Feature.KRAKEN: FeatureRule(
            section=lambda s: s.exchanges.kraken,
            prerequisite=lambda s: _filled(
                s.exchanges.kraken.api_key, s.exchanges.kraken.api_secret
            ),
            group=MessageGroup.KRAKEN,
        ),
        Feature.HYPERLIQUID: FeatureRule(section=lambda s: s.exchanges.hyperliquid),
        Feature.LIGHTER: FeatureRule(section=lambda s: s.exchanges.lighter),
        Feature.ONCHAIN_EVM: FeatureRule(
            section=lambda s: s.onchain.evm,
            prerequisite=_coinstats_ready,
            group=MessageGroup.COINSTATS,
        ),
        Feature.ONCHAIN_BITCOIN: FeatureRule(
            section=lambda s: s.onchain.bitcoin,
            prerequisite=_coinstats_ready,
            group=MessageGroup.COINSTATS,
        ),
        Feature.ONCHAIN_SOLANA: FeatureRule(
            section=lambda s: s.onchain.solana,
            prerequisite=_coinstats_ready,
            group=MessageGroup.COINSTATS,
        ),
        Feature.PRICES: FeatureRule(section=lambda s: s.feeds.prices),
        Feature.STOCKS: FeatureRule(
            section=lambda s: s.feeds.stocks,
            prerequisite=lambda s: _filled(s.feeds.stocks.twelve_data_api_key),
            group=MessageGroup.STOCKS,
        ),
        Feature.PENDLE_MARKETS: FeatureRule(section=lambda s: s.pendle.markets),
        Feature.PENDLE_POSITIONS: FeatureRule(section=lambda s: s.pendle.positions),
    }
)


class SettingsGate:
    """Draft settings with gated feature toggles and a last-saved baseline.

    Toggles persist the whole draft immediately; every other edit stays in
    the draft until ``save``. ``has_unsaved_changes`` gates that manual save.
    """

    def __init__(self, provider: RemoteJobProvider, settings: Settings) -> None:
        """Create gate over loaded settings.

        Args:
            provider: Provider used to persist settings.
            settings: Settings as last loaded from the provider.
        """
        self._provider = provider
        self._last_saved = settings.model_copy(deep=True)
        self._draft = settings.model_copy(deep=True)
        self._messages: dict[MessageGroup, str] = {}

    @classmethod
    async def load(cls, provider: RemoteJobProvider) -> SettingsGate:
        """Load settings from the provider and wrap them.

        Args:
            provider: Settings provider.

        Returns:
            Gate over loaded settings.
        """
        return cls(provider, await provider.load_settings())

    @property
    def draft(self) -> Settings:
        """Current (possibly unsaved) settings."""
        return self._draft

    @property
    def last_saved(self) -> Settings:
        """Settings as last persisted."""
        return self._last_saved

    @property
    def has_unsaved_changes(self) -> bool:
        return self._draft != self._last_saved

    @property
    def messages(self) -> dict[MessageGroup, str]:
        """Currently shown validation messages by group."""
        return dict(self._messages)

    def is_enabled(self, feature: Feature) -> bool:
        return FEATURE_RULES[feature].section(self._draft).enabled

    def can_enable(self, feature: Feature) -> bool:
        """Whether prerequisites currently allow enabling a feature.

        Args:
            feature: Target feature.

        Returns:
            ``True`` when the feature has no prerequisite or it passes.
        """
        rule = FEATURE_RULES[feature]
        return rule.prerequisite is None or rule.prerequisite(self._draft)

    async def set_enabled(self, feature: Feature, enabled: bool) -> GateResult:
        """Enable or disable one feature and persist on success.

        Disabling is always allowed. Enabling with failing prerequisites is
        rejected locally, shows the group's message, and makes no remote call.

        Args:
            feature: Target feature.
            enabled: Desired enabled flag.

        Returns:
            Gate outcome.

        Raises:
            SettingsSaveError: If persisting the accepted change fails.
        """
        rule = FEATURE_RULES[feature]
        if enabled and not self.can_enable(feature):
            message = None
            if rule.group is not None:
                message = GROUP_MESSAGES[rule.group]
                self._messages[rule.group] = message
            _LOGGER.info("Rejected enabling %s: prerequisites missing", feature.value)
            return GateResult(
                feature=feature,
                accepted=False,
                enabled=rule.section(self._draft).enabled,
                message=message,
            )
        updated = self._draft.model_copy(deep=True)
        rule.section(updated).enabled = enabled
        await self._persist(updated)
        if rule.group is not None:
            self._messages.pop(rule.group, None)
        return GateResult(feature=feature, accepted=True, enabled=enabled)

    def edit(self, mutator: Callable[[Settings], None]) -> None:
        """Apply an unsaved edit to the draft.

        Args:
            mutator: Callback mutating the draft in place.
        """
        updated = self._draft.model_copy(deep=True)
        mutator(updated)
        self._draft = updated

    def set_backup_path(self, path: str) -> None:
        """Edit the backup path and hide the backup message.

        Args:
            path: New backup path.
        """

        def _apply(settings: Settings) -> None:
            settings.grist.backup_path = path

        self.edit(_apply)
        self._messages.pop(MessageGroup.GRIST, None)

    def set_interval(self, feature: Feature, seconds: int) -> None:
        """Edit one feature's run interval.

        Args:
            feature: Target feature.
            seconds: New interval in seconds.

        Raises:
            ValueError: If interval is below the scheduler minimum.
        """
        if seconds < MIN_INTERVAL_SECONDS:
            raise ValueError(
                f"interval must be at least {MIN_INTERVAL_SECONDS} seconds"
            )

        def _apply(settings: Settings) -> None:
            FEATURE_RULES[feature].section(settings).interval = seconds

        self.edit(_apply)

    def add_wallet(self, wallet: Wallet | None = None) -> None:
        new_wallet = wallet or Wallet()
        self.edit(lambda settings: settings.wallets.append(new_wallet))

    def remove_wallet(self, index: int) -> None:
        self.edit(lambda settings: settings.wallets.pop(index))

    def update_wallet(self, index: int, **changes: object) -> None:
        """Edit one wallet; non-EVM wallets lose their EVM-only job flags.

        Args:
            index: Wallet position.
            **changes: Wallet field updates.
        """

        def _apply(settings: Settings) -> None:
            wallet = settings.wallets[index]
            for field_name, value in changes.items():
                setattr(wallet, field_name, value)
            if wallet.type != WalletType.EVM:
                wallet.jobs.hyperliquid = False
                wallet.jobs.lighter = False
                wallet.jobs.pendle = False

        self.edit(_apply)

    async def save(self) -> bool:
        """Persist the draft when it differs from the last save.

        Returns:
            ``True`` when a save was performed.

        Raises:
            SettingsSaveError: If persisting fails.
        """
        if not self.has_unsaved_changes:
            return False
        await self._persist(self._draft.model_copy(deep=True))
        return True

    async def _persist(self, updated: Settings) -> None:
        try:
            await self._provider.save_settings(updated)
        except ProviderError as exc:
            raise SettingsSaveError(f"Failed to save settings: {exc}") from exc
        self._draft = updated
        self._last_saved = updated.model_copy(deep=True)
        _LOGGER.info("Settings saved")
