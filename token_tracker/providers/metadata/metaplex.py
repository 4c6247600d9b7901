"""Metaplex token-metadata provider (on-chain layer)."""

import logging
import time

from solana.rpc.async_api import AsyncClient
from solders.pubkey import Pubkey

from ...core.exceptions import MetadataLookupError
from ...core.models import OnChainMetadata, StageResult
from ...core.types import DataSource, StageStatus
from ..base import BaseProvider
from ..chain.layouts import TOKEN_METADATA_PROGRAM_ID, LayoutError, metadata_pda, parse_metadata_account
from ..chain.mint import RPC_ERRORS

logger = logging.getLogger(__name__)


class MetaplexMetadataProvider(BaseProvider):
    """Reads name, symbol and URI from the mint's metadata PDA."""

    SOURCE = DataSource.METAPLEX

    def __init__(self, client: AsyncClient, commitment: str = "confirmed"):
        self.client = client
        self.commitment = commitment

    def is_available(self) -> bool:
        return self.client is not None

    async def fetch_onchain_metadata(self, mint: Pubkey) -> OnChainMetadata:
        """
        Fetch and decode the metadata account of a mint.

        Raises:
            MetadataLookupError: If no metadata is registered, the account
                belongs to another program, or the RPC call fails
        """
        address = str(mint)
        pda = metadata_pda(mint)
        logger.info(f"Fetching Metaplex metadata for {address} (account {pda})...")

        try:
            response = await self.client.get_account_info(pda, commitment=self.commitment)
        except RPC_ERRORS as e:
            raise MetadataLookupError(address, f"RPC request failed: {str(e) or type(e).__name__}")

        account = response.value
        if account is None:
            raise MetadataLookupError(address, "no metadata account registered")
        if account.owner != TOKEN_METADATA_PROGRAM_ID:
            raise MetadataLookupError(address, f"metadata account owned by {account.owner}")

        try:
            return parse_metadata_account(bytes(account.data))
        except LayoutError as e:
            raise MetadataLookupError(address, str(e))

    async def lookup(self, mint: Pubkey) -> StageResult[OnChainMetadata]:
        """Best-effort variant of fetch_onchain_metadata; never raises."""
        started = time.perf_counter()
        try:
            metadata = await self.fetch_onchain_metadata(mint)
        except MetadataLookupError as e:
            logger.warning(f"Could not find Metaplex metadata for {mint}: {e.message}")
            return StageResult[OnChainMetadata](
                status=self._status(
                    "metadata",
                    StageStatus.FAILED,
                    endpoint=e.endpoint,
                    error_message=e.message,
                    started=started,
                ),
            )

        return StageResult[OnChainMetadata](
            value=metadata,
            status=self._status("metadata", endpoint=f"metadata/{mint}", started=started),
        )
