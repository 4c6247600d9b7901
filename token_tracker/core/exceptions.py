"""Custom exceptions for the token tracker."""


class TokenTrackerError(Exception):
    """Base exception for all token tracker errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(TokenTrackerError):
    """Raised when data validation fails."""

    def __init__(self, field: str, value: str, reason: str):
        message = f"Validation failed for {field}={value}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class InvalidAddressError(ValidationError):
    """Raised when a string is not a well-formed Solana address."""

    def __init__(self, address: str, reason: str = "not a valid base58 public key"):
        super().__init__("address", address, reason)
        self.address = address


class ConfigurationError(TokenTrackerError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key


class DataSourceError(TokenTrackerError):
    """Raised when a data source fails or returns invalid data."""

    def __init__(
        self,
        source: str,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        full_message = f"[{source}] {message}"
        super().__init__(
            full_message,
            {
                "source": source,
                "endpoint": endpoint,
                "status_code": status_code,
            },
        )
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code


class MintLookupError(DataSourceError):
    """Raised when the mint account cannot be read from the ledger."""

    def __init__(self, address: str, message: str):
        super().__init__("solana-rpc", message, endpoint=f"getAccountInfo/{address}")
        self.address = address


class MetadataLookupError(DataSourceError):
    """Raised when the Metaplex metadata account is missing or unreadable."""

    def __init__(self, address: str, message: str):
        super().__init__("metaplex", message, endpoint=f"metadata/{address}")
        self.address = address


class MetadataJsonError(DataSourceError):
    """Raised when the off-chain metadata document cannot be fetched or parsed."""

    def __init__(self, uri: str, message: str, status_code: int | None = None):
        super().__init__("offchain-json", message, endpoint=uri, status_code=status_code)
        self.uri = uri


class MarketDataError(DataSourceError):
    """Raised when a market data endpoint fails."""

    def __init__(
        self,
        endpoint: str,
        message: str,
        status_code: int | None = None,
    ):
        super().__init__("birdeye", message, endpoint=endpoint, status_code=status_code)
