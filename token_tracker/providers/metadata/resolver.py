"""Descriptive metadata resolver.

Composes the two metadata layers:

1. Metaplex metadata account (name, symbol, URI), read on-chain
2. JSON document behind the URI (image, fallback name/symbol)

Each layer is an explicit StageResult. A failed layer contributes
nothing to the merged DescriptiveMetadata, and on-chain values are never
replaced by off-chain ones.
"""

import logging

from solders.pubkey import Pubkey

from ...core.models import DescriptiveMetadata, MetadataResolution
from .metaplex import MetaplexMetadataProvider
from .offchain import OffChainMetadataProvider

logger = logging.getLogger(__name__)


class DescriptiveMetadataResolver:
    """Resolves name, symbol and image for a mint."""

    def __init__(
        self,
        onchain: MetaplexMetadataProvider,
        offchain: OffChainMetadataProvider,
    ):
        self.onchain = onchain
        self.offchain = offchain

    async def resolve(self, mint: Pubkey) -> MetadataResolution:
        """Run both layers and merge them. Never raises on data source errors."""
        onchain_result = await self.onchain.lookup(mint)

        offchain_result = None
        uri = onchain_result.value.uri if onchain_result.has_data else None
        if uri:
            offchain_result = await self.offchain.lookup(uri)
        elif onchain_result.has_data:
            logger.info(f"No metadata URI registered for {mint}")

        metadata = DescriptiveMetadata.merge(
            onchain_result.value,
            offchain_result.value if offchain_result else None,
        )
        logger.info(
            f"Metadata for {mint}: name={metadata.name!r}, symbol={metadata.symbol!r}, "
            f"image={'yes' if metadata.image_url else 'no'}"
        )
        return MetadataResolution(
            onchain=onchain_result,
            offchain=offchain_result,
            metadata=metadata,
        )

    async def resolve_descriptive_metadata(self, mint: Pubkey) -> DescriptiveMetadata:
        """Merged metadata only, possibly empty."""
        resolution = await self.resolve(mint)
        return resolution.metadata
