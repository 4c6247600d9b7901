"""Descriptive metadata providers (Metaplex account + off-chain JSON)."""

from .metaplex import MetaplexMetadataProvider
from .offchain import OffChainMetadataProvider
from .resolver import DescriptiveMetadataResolver

__all__ = [
    "DescriptiveMetadataResolver",
    "MetaplexMetadataProvider",
    "OffChainMetadataProvider",
]
