"""Settings object exchanged with the remote provider."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_SETTINGS_CONFIG = ConfigDict(
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
    validate_assignment=True,
)


class WalletType(StrEnum):
    """Supported wallet address families."""

    EVM = "evm"
    SOLANA = "solana"
    BITCOIN = "bitcoin"


class WalletJobs(BaseModel):
    """Per-wallet opt-in flags for wallet-scoped jobs."""

    model_config = _SETTINGS_CONFIG

    hyperliquid: bool = False
    lighter: bool = False
    pendle: bool = False


class Wallet(BaseModel):
    """One tracked wallet address."""

    model_config = _SETTINGS_CONFIG

    label: str = ""
    address: str = ""
    type: WalletType = WalletType.EVM
    jobs: WalletJobs = Field(default_factory=WalletJobs)


def _toggle(interval: int):  # noqa: ANN202
    return Field(default_factory=lambda: ToggleSettings(interval=interval))


class ToggleSettings(BaseModel):
    """Enable flag plus run interval shared by every job section."""

    model_config = _SETTINGS_CONFIG

    enabled: bool = False
    interval: int = Field(default=600, ge=0)


class PendleSettings(BaseModel):
    """Pendle market and position jobs."""

    model_config = _SETTINGS_CONFIG

    markets: ToggleSettings = Field(
        default_factory=lambda: ToggleSettings(enabled=True, interval=600)
    )
    positions: ToggleSettings = _toggle(600)


class KrakenSettings(ToggleSettings):
    """Kraken exchange job with API credentials."""

    api_key: str = ""
    api_secret: str = ""


class ExchangeSettings(BaseModel):
    """Exchange sync jobs."""

    model_config = _SETTINGS_CONFIG

    kraken: KrakenSettings = Field(default_factory=KrakenSettings)
    hyperliquid: ToggleSettings = _toggle(300)
    lighter: ToggleSettings = _toggle(300)


class OnChainSettings(BaseModel):
    """On-chain balance jobs sharing one CoinStats key."""

    model_config = _SETTINGS_CONFIG

    coinstats_api_key: str = ""
    evm: ToggleSettings = _toggle(1800)
    bitcoin: ToggleSettings = _toggle(10800)
    solana: ToggleSettings = _toggle(10800)


class GristSettings(ToggleSettings):
    """Grist document backup job."""

    interval: int = Field(default=7200, ge=0)
    api_key: str = ""
    document_id: str = ""
    backup_path: str = ""


class PriceFeedSettings(ToggleSettings):
    """Cryptocurrency price feed job."""

    coingecko_api_key: str = ""


class StockFeedSettings(ToggleSettings):
    """Stock price feed job."""

    twelve_data_api_key: str = ""


class FeedSettings(BaseModel):
    """Market price feed jobs."""

    model_config = _SETTINGS_CONFIG

    prices: PriceFeedSettings = Field(default_factory=PriceFeedSettings)
    stocks: StockFeedSettings = Field(default_factory=StockFeedSettings)


class Settings(BaseModel):
    """Full settings object; always loaded and saved as a whole."""

    model_config = _SETTINGS_CONFIG

    wallets: list[Wallet] = Field(default_factory=list)
    pendle: PendleSettings = Field(default_factory=PendleSettings)
    exchanges: ExchangeSettings = Field(default_factory=ExchangeSettings)
    onchain: OnChainSettings = Field(default_factory=OnChainSettings)
    grist: GristSettings = Field(default_factory=GristSettings)
    feeds: FeedSettings = Field(default_factory=FeedSettings, alias="settings")

    def to_wire(self) -> dict[str, object]:
        """Serialize with provider field names.

        Returns:
            JSON-compatible settings payload.
        """
        return self.model_dump(mode="json", by_alias=True)
