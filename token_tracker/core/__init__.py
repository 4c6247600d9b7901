"""Core module - data models, types, configuration and exceptions."""

from .config import TrackerConfig
from .models import (
    ChainMintInfo,
    DescriptiveMetadata,
    MarketData,
    MarketResolution,
    MetadataResolution,
    OffChainMetadata,
    OnChainMetadata,
    PriceQuote,
    SourceStatus,
    StageResult,
    TokenDetails,
    TokenOverview,
)
from .types import UNKNOWN_LABEL, DataSource, StageStatus
from .exceptions import (
    TokenTrackerError,
    ValidationError,
    InvalidAddressError,
    ConfigurationError,
    DataSourceError,
    MintLookupError,
    MetadataLookupError,
    MetadataJsonError,
    MarketDataError,
)

__all__ = [
    # Config
    "TrackerConfig",
    # Models
    "ChainMintInfo",
    "DescriptiveMetadata",
    "MarketData",
    "MarketResolution",
    "MetadataResolution",
    "OffChainMetadata",
    "OnChainMetadata",
    "PriceQuote",
    "SourceStatus",
    "StageResult",
    "TokenDetails",
    "TokenOverview",
    # Types
    "UNKNOWN_LABEL",
    "DataSource",
    "StageStatus",
    # Exceptions
    "TokenTrackerError",
    "ValidationError",
    "InvalidAddressError",
    "ConfigurationError",
    "DataSourceError",
    "MintLookupError",
    "MetadataLookupError",
    "MetadataJsonError",
    "MarketDataError",
]
