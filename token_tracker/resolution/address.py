"""Mint address validation.

Addresses are checked locally before any network activity: a string
that does not decode to a 32-byte base58 public key never reaches the
RPC or HTTP layers.
"""

import logging

from solders.pubkey import Pubkey

from ..core.exceptions import InvalidAddressError

logger = logging.getLogger(__name__)


def parse_mint_address(address: str) -> Pubkey:
    """
    Parse a base58 mint address into a Pubkey.

    Args:
        address: Candidate mint address

    Returns:
        Parsed public key

    Raises:
        InvalidAddressError: If the string is not a valid Solana address
    """
    if not isinstance(address, str):
        raise InvalidAddressError(repr(address), "address must be a string")

    candidate = address.strip()
    if not candidate:
        raise InvalidAddressError(address, "address is empty")

    try:
        return Pubkey.from_string(candidate)
    except ValueError as e:
        logger.debug(f"Rejected address {candidate!r}: {e}")
        raise InvalidAddressError(address)


def validate_mint_address(address: str) -> str:
    """Validate an address and return its canonical base58 form."""
    return str(parse_mint_address(address))


def is_valid_mint_address(address: str) -> bool:
    """Check an address without raising."""
    try:
        parse_mint_address(address)
        return True
    except InvalidAddressError:
        return False
