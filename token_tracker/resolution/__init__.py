"""Address resolution and validation."""

from .address import is_valid_mint_address, parse_mint_address, validate_mint_address

__all__ = ["is_valid_mint_address", "parse_mint_address", "validate_mint_address"]
