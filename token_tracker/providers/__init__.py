"""Data providers for the token tracker.

This module contains providers for:
- Mint account data (Solana RPC)
- Descriptive metadata (Metaplex account + off-chain JSON)
- Market data (Birdeye)
"""

from .base import BaseProvider, HttpJsonProvider

__all__ = ["BaseProvider", "HttpJsonProvider"]
