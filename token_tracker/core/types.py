"""Type definitions and enums for the token tracker."""

from decimal import Decimal
from enum import Enum
from typing import Literal


class DataSource(str, Enum):
    """Data source identifiers."""

    SOLANA_RPC = "solana-rpc"
    METAPLEX = "metaplex"
    OFFCHAIN_JSON = "offchain-json"
    BIRDEYE = "birdeye"
    CALCULATED = "calculated"


class StageStatus(str, Enum):
    """Outcome of a single pipeline stage."""

    OK = "ok"               # Data retrieved
    EMPTY = "empty"         # Call succeeded but returned nothing usable
    FAILED = "failed"       # Call raised, degraded to unset fields
    SKIPPED = "skipped"     # Not attempted (missing prerequisite or config)


# Marker used for name/symbol when no source could resolve them
UNKNOWN_LABEL = "N/A"

# Type aliases for common patterns
RawAmount = int         # Smallest indivisible unit, never a float
USDAmount = Decimal

OutputFormatType = Literal["json", "table"]
