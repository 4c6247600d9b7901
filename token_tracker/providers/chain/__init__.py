"""Solana on-chain account providers."""

from .layouts import metadata_pda, parse_metadata_account, parse_mint_account
from .mint import MintInfoProvider

__all__ = ["MintInfoProvider", "metadata_pda", "parse_metadata_account", "parse_mint_account"]
