"""Unit tests for gated feature toggles."""

from __future__ import annotations

import asyncio

import pytest

from jobwatch.provider.memory import InMemoryJobProvider
from jobwatch.settings.gate import (
    GROUP_MESSAGES,
    Feature,
    MessageGroup,
    SettingsGate,
    SettingsSaveError,
    is_valid_backup_path,
)
from jobwatch.settings.models import Settings, Wallet, WalletType


def _gate(settings: Settings | None = None) -> tuple[SettingsGate, InMemoryJobProvider]:
    """Load a gate from an in-memory provider."""
    provider = InMemoryJobProvider(settings=settings)
    return asyncio.run(SettingsGate.load(provider)), provider


@pytest.mark.unit
@pytest.mark.parametrize(
    ("path", "expected"),
    [("", False), ("  ", False), ("ab", False), ("b.json", True), (" /x/b.json ", True), ("abc", False)],
)
def test_backup_path_validity(path: str, expected: bool) -> None:
    assert is_valid_backup_path(path) is expected


@pytest.mark.unit
def test_enable_backup_without_path_is_rejected_locally() -> None:
    """Missing prerequisite should reject, show message, and skip saving."""
    gate, provider = _gate()

    result = asyncio.run(gate.set_enabled(Feature.GRIST_BACKUP, True))

    assert result.accepted is False
    assert result.enabled is False
    assert result.message == GROUP_MESSAGES[MessageGroup.GRIST]
    assert gate.messages[MessageGroup.GRIST] == result.message
    assert provider.saved == []
    assert "save_settings" not in provider.calls


@pytest.mark.unit
def test_enable_backup_with_path_persists_and_clears_message() -> None:
    """Valid backup path should enable and persist the full settings."""
    # Arrange - rejected attempt, then a valid path
    gate, provider = _gate()
    asyncio.run(gate.set_enabled(Feature.GRIST_BACKUP, True))
    gate.set_backup_path("b.json")

    # Act - enable again
    result = asyncio.run(gate.set_enabled(Feature.GRIST_BACKUP, True))

    # Assert - saved with path and flag
    assert result.accepted is True
    assert gate.messages == {}
    assert provider.settings.grist.enabled is True
    assert provider.settings.grist.backup_path == "b.json"
    assert gate.has_unsaved_changes is False


@pytest.mark.unit
@pytest.mark.parametrize(
    ("feature", "group"),
    [
        (Feature.KRAKEN, MessageGroup.KRAKEN),
        (Feature.ONCHAIN_EVM, MessageGroup.COINSTATS),
        (Feature.ONCHAIN_SOLANA, MessageGroup.COINSTATS),
        (Feature.STOCKS, MessageGroup.STOCKS),
    ],
)
def test_credential_gated_features_reject_without_keys(
    feature: Feature, group: MessageGroup
) -> None:
    gate, provider = _gate()

    result = asyncio.run(gate.set_enabled(feature, True))

    assert result.accepted is False
    assert result.message == GROUP_MESSAGES[group]
    assert provider.saved == []


@pytest.mark.unit
def test_kraken_requires_both_key_and_secret() -> None:
    settings = Settings()
    settings.exchanges.kraken.api_key = "key"
    gate, _ = _gate(settings)

    assert gate.can_enable(Feature.KRAKEN) is False

    def _set_secret(draft: Settings) -> None:
        draft.exchanges.kraken.api_secret = "secret"

    gate.edit(_set_secret)

    assert gate.can_enable(Feature.KRAKEN) is True


@pytest.mark.unit
def test_ungated_feature_and_disable_always_accepted() -> None:
    """Features without prerequisites toggle freely, and disabling never fails."""
    settings = Settings()
    settings.grist.enabled = True
    gate, provider = _gate(settings)

    enabled = asyncio.run(gate.set_enabled(Feature.HYPERLIQUID, True))
    disabled = asyncio.run(gate.set_enabled(Feature.GRIST_BACKUP, False))

    assert enabled.accepted is True
    assert disabled.accepted is True
    assert provider.settings.exchanges.hyperliquid.enabled is True
    assert provider.settings.grist.enabled is False
    assert len(provider.saved) == 2


@pytest.mark.unit
def test_manual_edits_need_explicit_save() -> None:
    """Non-toggle edits stay in the draft until save."""
    gate, provider = _gate()

    gate.set_interval(Feature.PRICES, 120)

    assert gate.has_unsaved_changes is True
    assert asyncio.run(gate.save()) is True
    assert provider.settings.feeds.prices.interval == 120
    assert gate.has_unsaved_changes is False
    assert asyncio.run(gate.save()) is False


@pytest.mark.unit
def test_interval_below_minimum_is_rejected() -> None:
    gate, _ = _gate()

    with pytest.raises(ValueError):
        gate.set_interval(Feature.PRICES, 4)


@pytest.mark.unit
def test_non_evm_wallet_loses_evm_job_flags() -> None:
    """Switching wallet type away from EVM should reset EVM-only flags."""
    gate, _ = _gate()
    wallet = Wallet(label="main", address="0xabc")
    wallet.jobs.hyperliquid = True
    wallet.jobs.pendle = True
    gate.add_wallet(wallet)

    gate.update_wallet(0, type=WalletType.SOLANA)

    updated = gate.draft.wallets[0]
    assert updated.type == WalletType.SOLANA
    assert updated.jobs.hyperliquid is False
    assert updated.jobs.pendle is False

    gate.remove_wallet(0)
    assert gate.draft.wallets == []


@pytest.mark.unit
def test_save_failure_keeps_previous_state() -> None:
    """Provider failure should raise and leave draft and baseline unchanged."""
    gate, provider = _gate()
    provider.fail_next("save_settings")

    with pytest.raises(SettingsSaveError):
        asyncio.run(gate.set_enabled(Feature.PRICES, True))

    assert gate.is_enabled(Feature.PRICES) is False
    assert gate.has_unsaved_changes is False
