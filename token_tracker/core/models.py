"""Pydantic data models for the token tracker.

All data structures are immutable (frozen) after creation. Amounts taken
from the ledger stay Python ints, and prices travel as Decimal, so nothing
in the pipeline passes through binary floating point.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, Field, field_serializer, field_validator

from .types import UNKNOWN_LABEL, DataSource, RawAmount, StageStatus, USDAmount

T = TypeVar("T")

# Provider amounts outside 1e-100..1e100 are treated as garbage
MAX_MAGNITUDE = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_decimal(value: Any) -> Decimal | None:
    """Convert a loosely-typed API value to Decimal, or None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        # str() of a float is its shortest repr, so 2.5 stays exactly 2.5
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    if result and abs(result.adjusted()) > MAX_MAGNITUDE:
        return None
    return result


def coerce_count(value: Any) -> int | None:
    """Convert a loosely-typed API value to a non-negative int, or None."""
    number = coerce_decimal(value)
    if number is None or number < 0 or number != number.to_integral_value():
        return None
    return int(number)


def clean_text(value: Any) -> str | None:
    """Strip null padding and whitespace; empty strings become None."""
    if not isinstance(value, str):
        return None
    text = value.replace("\x00", "").strip()
    return text or None


class SourceStatus(BaseModel):
    """Record of one pipeline stage for the result's audit trail."""

    timestamp: datetime = Field(default_factory=_utcnow)
    source: DataSource
    action: str  # "mint", "metadata", "json", "price", "overview"
    status: StageStatus = StageStatus.OK
    endpoint: str | None = None
    error_message: str | None = None
    duration_ms: int | None = None

    model_config = {"frozen": True}

    @property
    def success(self) -> bool:
        return self.status in (StageStatus.OK, StageStatus.EMPTY)


class StageResult(BaseModel, Generic[T]):
    """Value produced by a best-effort stage plus how the stage went."""

    value: T | None = None
    status: SourceStatus

    model_config = {"frozen": True}

    @property
    def has_data(self) -> bool:
        """Check if the stage produced a value."""
        return self.value is not None


class ChainMintInfo(BaseModel):
    """Canonical fields of an SPL mint account."""

    address: str
    decimals: int = Field(ge=0)
    supply_raw: RawAmount = Field(ge=0)
    mint_authority: str | None = None
    freeze_authority: str | None = None
    program_id: str | None = None  # SPL Token or Token-2022
    is_initialized: bool = True

    model_config = {"frozen": True}

    @field_validator("supply_raw", mode="before")
    @classmethod
    def validate_supply(cls, v: Any) -> Any:
        if isinstance(v, (bool, float)):
            raise ValueError("supply must be an integer amount")
        return v


class OnChainMetadata(BaseModel):
    """Fields decoded from the Metaplex token-metadata account."""

    name: str | None = None
    symbol: str | None = None
    uri: str | None = None
    update_authority: str | None = None
    is_mutable: bool | None = None

    model_config = {"frozen": True}

    @field_validator("name", "symbol", "uri", mode="before")
    @classmethod
    def strip_padding(cls, v: Any) -> str | None:
        return clean_text(v)


class OffChainMetadata(BaseModel):
    """Fields read from the JSON document the metadata URI points to."""

    name: str | None = None
    symbol: str | None = None
    image: str | None = None
    description: str | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("name", "symbol", "image", "description", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        return clean_text(v)


class DescriptiveMetadata(BaseModel):
    """Display data merged from the on-chain and off-chain layers."""

    name: str | None = None
    symbol: str | None = None
    image_url: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def merge(
        cls,
        onchain: OnChainMetadata | None,
        offchain: OffChainMetadata | None,
    ) -> "DescriptiveMetadata":
        """Combine both layers; off-chain values only fill empty on-chain fields."""
        name = onchain.name if onchain else None
        symbol = onchain.symbol if onchain else None
        image_url = None
        if offchain is not None:
            name = name or offchain.name
            symbol = symbol or offchain.symbol
            image_url = offchain.image
        return cls(name=name, symbol=symbol, image_url=image_url)


class PriceQuote(BaseModel):
    """Price endpoint payload (`data` object). Unparsable values become None."""

    value: Decimal | None = None
    update_unix_time: int | None = Field(
        default=None, validation_alias=AliasChoices("updateUnixTime", "update_unix_time")
    )

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v: Any) -> Decimal | None:
        return coerce_decimal(v)

    @field_validator("update_unix_time", mode="before")
    @classmethod
    def parse_time(cls, v: Any) -> int | None:
        return coerce_count(v)


class TokenOverview(BaseModel):
    """Overview endpoint payload (`data` object). Any subset may be present."""

    liquidity: Decimal | None = None
    holders: int | None = Field(default=None, validation_alias=AliasChoices("holders", "holder"))
    volume_24h: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("volume24h", "v24hUSD", "volume_24h")
    )

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("liquidity", "volume_24h", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal | None:
        return coerce_decimal(v)

    @field_validator("holders", mode="before")
    @classmethod
    def parse_holders(cls, v: Any) -> int | None:
        return coerce_count(v)


class MarketData(BaseModel):
    """Market statistics. Every field is independently optional."""

    price: Decimal | None = None
    market_cap: USDAmount | None = None
    liquidity_usd: USDAmount | None = None
    holders: int | None = None
    volume_24h: USDAmount | None = None

    model_config = {"frozen": True}


class TokenDetails(BaseModel):
    """Composite result for one mint address."""

    address: str
    name: str = UNKNOWN_LABEL
    symbol: str = UNKNOWN_LABEL
    image_url: str | None = None

    # Mint account
    decimals: int
    total_supply: str  # Grouped, human-readable
    total_supply_raw: RawAmount
    mint_authority: str | None = None
    freeze_authority: str | None = None

    # Market data (never defaulted to zero)
    price: Decimal | None = None
    market_cap: USDAmount | None = None
    liquidity_usd: USDAmount | None = None
    holders: int | None = None
    volume_24h: USDAmount | None = None

    # Audit trail
    sources: list[SourceStatus] = Field(default_factory=list)

    fetched_at: datetime = Field(default_factory=_utcnow)
    tool_version: str = "0.1.0"

    model_config = {"frozen": True}

    @field_serializer("total_supply_raw", when_used="json")
    def serialize_raw(self, value: int) -> str:
        return str(value)

    @property
    def failed_sources(self) -> list[SourceStatus]:
        """Stages that degraded to unset fields."""
        return [s for s in self.sources if s.status == StageStatus.FAILED]


class MetadataResolution(BaseModel):
    """Both descriptive metadata layers and their merged view."""

    onchain: StageResult[OnChainMetadata]
    offchain: StageResult[OffChainMetadata] | None = None
    metadata: DescriptiveMetadata = Field(default_factory=DescriptiveMetadata)

    model_config = {"frozen": True}

    @property
    def sources(self) -> list[SourceStatus]:
        statuses = [self.onchain.status]
        if self.offchain is not None:
            statuses.append(self.offchain.status)
        return statuses


class MarketResolution(BaseModel):
    """Per-endpoint market results and the combined MarketData."""

    price: StageResult[PriceQuote]
    overview: StageResult[TokenOverview]
    market: MarketData = Field(default_factory=MarketData)

    model_config = {"frozen": True}

    @property
    def sources(self) -> list[SourceStatus]:
        return [self.price.status, self.overview.status]
