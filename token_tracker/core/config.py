"""Configuration management for RPC endpoints and API keys.

Loads configuration from environment variables or a .env file. The
resulting TrackerConfig is passed explicitly to the aggregator; there is
no process-wide instance.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_BIRDEYE_URL = "https://public-api.birdeye.so"


@dataclass(frozen=True)
class TrackerConfig:
    """Settings for every external data source."""

    # Solana JSON-RPC (public endpoint is rate limited and slow)
    rpc_url: str = DEFAULT_RPC_URL
    commitment: str = "confirmed"

    # Birdeye market data (price + overview need an API key)
    birdeye_api_key: Optional[str] = None
    birdeye_base_url: str = DEFAULT_BIRDEYE_URL
    birdeye_chain: str = "solana"

    # Timeouts in seconds, applied to every call
    rpc_timeout: float = 10.0
    http_timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ConfigurationError("RPC_URL", "RPC endpoint must not be empty")
        if self.commitment not in ("processed", "confirmed", "finalized"):
            raise ConfigurationError("RPC_COMMITMENT", f"unknown commitment '{self.commitment}'")
        for key, value in (("RPC_TIMEOUT", self.rpc_timeout), ("HTTP_TIMEOUT", self.http_timeout)):
            if value <= 0:
                raise ConfigurationError(key, "timeout must be positive")

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        """Load configuration from environment variables."""
        return cls(
            rpc_url=os.getenv("RPC_URL") or DEFAULT_RPC_URL,
            commitment=os.getenv("RPC_COMMITMENT", "confirmed"),
            birdeye_api_key=os.getenv("BIRDEYE_API_KEY") or None,
            birdeye_base_url=os.getenv("BIRDEYE_BASE_URL") or DEFAULT_BIRDEYE_URL,
            birdeye_chain=os.getenv("BIRDEYE_CHAIN", "solana"),
            rpc_timeout=_float_env("RPC_TIMEOUT", 10.0),
            http_timeout=_float_env("HTTP_TIMEOUT", 10.0),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "TrackerConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the current working directory.

        Returns:
            TrackerConfig instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls.from_env()

    def has_birdeye(self) -> bool:
        """Check if a Birdeye API key is configured."""
        return bool(self.birdeye_api_key)


def _float_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(key, f"expected a number, got '{raw}'")
