"""Solana Token Details Tracker.

Aggregates on-chain mint data, Metaplex descriptive metadata and
third-party market data for a single SPL token mint address.
"""

__version__ = "0.1.0"
