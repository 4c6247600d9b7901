"""Binary layouts of the SPL mint and Metaplex metadata accounts."""

from construct import (
    Bytes,
    ConstructError,
    Flag,
    GreedyBytes,
    If,
    Int8ul,
    Int16ul,
    Int32ul,
    Int64ul,
    Prefixed,
    PrefixedArray,
    Struct,
    this,
)
from solders.pubkey import Pubkey

from ...core.models import ChainMintInfo, OnChainMetadata

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

TOKEN_PROGRAMS = {
    TOKEN_PROGRAM_ID: "spl-token",
    TOKEN_2022_PROGRAM_ID: "token-2022",
}

# Token-2022 mints share the first 82 bytes, extensions follow
MINT_LAYOUT = Struct(
    "mint_authority_option" / Int32ul,
    "mint_authority" / Bytes(32),
    "supply" / Int64ul,
    "decimals" / Int8ul,
    "is_initialized" / Flag,
    "freeze_authority_option" / Int32ul,
    "freeze_authority" / Bytes(32),
)
MINT_SIZE = 82

# Borsh strings: u32 length prefix, then null-padded bytes
BORSH_STRING = Prefixed(Int32ul, GreedyBytes)

CREATOR_LAYOUT = Struct(
    "address" / Bytes(32),
    "verified" / Flag,
    "share" / Int8ul,
)

METADATA_LAYOUT = Struct(
    "key" / Int8ul,
    "update_authority" / Bytes(32),
    "mint" / Bytes(32),
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
    "seller_fee_basis_points" / Int16ul,
    "has_creators" / Flag,
    "creators" / If(this.has_creators, PrefixedArray(Int32ul, CREATOR_LAYOUT)),
    "primary_sale_happened" / Flag,
    "is_mutable" / Flag,
)


class LayoutError(ValueError):
    """Raised when account bytes do not match the expected layout."""


def metadata_pda(mint: Pubkey) -> Pubkey:
    """Derive the Metaplex metadata account address for a mint."""
    pda, _ = Pubkey.find_program_address(
        [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint)],
        TOKEN_METADATA_PROGRAM_ID,
    )
    return pda


def _optional_key(option: int, raw: bytes) -> str | None:
    return str(Pubkey.from_bytes(raw)) if option else None


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="ignore")


def parse_mint_account(address: str, data: bytes, owner: Pubkey | None = None) -> ChainMintInfo:
    """
    Decode mint account data.

    Args:
        address: Mint address the data was read from
        data: Raw account data
        owner: Owning program, recorded as program_id when known

    Raises:
        LayoutError: If the data is shorter than a mint or fails to decode
    """
    if len(data) < MINT_SIZE:
        raise LayoutError(f"account data is {len(data)} bytes, a mint needs {MINT_SIZE}")
    try:
        parsed = MINT_LAYOUT.parse(bytes(data[:MINT_SIZE]))
    except ConstructError as e:
        raise LayoutError(f"cannot decode mint: {e}")

    return ChainMintInfo(
        address=address,
        decimals=parsed.decimals,
        supply_raw=parsed.supply,
        mint_authority=_optional_key(parsed.mint_authority_option, parsed.mint_authority),
        freeze_authority=_optional_key(parsed.freeze_authority_option, parsed.freeze_authority),
        program_id=str(owner) if owner is not None else None,
        is_initialized=parsed.is_initialized,
    )


def parse_metadata_account(data: bytes) -> OnChainMetadata:
    """
    Decode a Metaplex metadata account.

    Only the data section up to is_mutable is read; later optional
    fields (collection, uses, ...) are ignored.

    Raises:
        LayoutError: If the data fails to decode
    """
    try:
        parsed = METADATA_LAYOUT.parse(bytes(data))
    except ConstructError as e:
        raise LayoutError(f"cannot decode metadata: {e}")

    return OnChainMetadata(
        name=_text(parsed.name),
        symbol=_text(parsed.symbol),
        uri=_text(parsed.uri),
        update_authority=str(Pubkey.from_bytes(parsed.update_authority)),
        is_mutable=parsed.is_mutable,
    )
