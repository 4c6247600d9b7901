"""Main orchestrator for the token details pipeline.

Coordinates all providers to produce a TokenDetails record from a mint
address:

1. Validate the address (no I/O)
2. Read the mint account (required; failure means no result)
3. Resolve descriptive metadata and market data concurrently (best-effort)
4. Format the total supply
5. Assemble the frozen TokenDetails
"""

import asyncio
import logging
import time

import httpx
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment

from . import __version__
from .calculator.amounts import format_raw_amount
from .core.config import TrackerConfig
from .core.exceptions import MintLookupError
from .core.models import SourceStatus, TokenDetails
from .core.types import UNKNOWN_LABEL, DataSource, StageStatus
from .providers.chain.mint import MintInfoProvider
from .providers.market.birdeye import BirdeyeMarketProvider
from .providers.metadata.metaplex import MetaplexMetadataProvider
from .providers.metadata.offchain import OffChainMetadataProvider
from .providers.metadata.resolver import DescriptiveMetadataResolver
from .resolution.address import parse_mint_address

logger = logging.getLogger(__name__)


class TokenDetailsAggregator:
    """Orchestrates the token details pipeline for one address at a time."""

    def __init__(
        self,
        config: TrackerConfig | None = None,
        rpc_client: AsyncClient | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the aggregator with all providers.

        Args:
            config: Endpoints, API keys and timeouts (defaults to TrackerConfig())
            rpc_client: Solana RPC client; created from config if not provided
            http_client: HTTP client for off-chain JSON and Birdeye; created
                from config if not provided
        """
        self.config = config or TrackerConfig()

        # Clients created here are closed by aclose(); injected ones are not
        self._owns_rpc = rpc_client is None
        self._owns_http = http_client is None
        self.rpc_client = rpc_client or AsyncClient(
            self.config.rpc_url,
            commitment=Commitment(self.config.commitment),
            timeout=self.config.rpc_timeout,
        )
        self.http_client = http_client or httpx.AsyncClient(
            timeout=self.config.http_timeout,
            follow_redirects=True,
        )

        # Initialize providers
        self.mint_provider = MintInfoProvider(self.rpc_client, commitment=self.config.commitment)
        self.metadata_resolver = DescriptiveMetadataResolver(
            onchain=MetaplexMetadataProvider(self.rpc_client, commitment=self.config.commitment),
            offchain=OffChainMetadataProvider(self.http_client, timeout=self.config.http_timeout),
        )
        self.market_provider = BirdeyeMarketProvider(
            self.http_client,
            api_key=self.config.birdeye_api_key,
            base_url=self.config.birdeye_base_url,
            chain=self.config.birdeye_chain,
            timeout=self.config.http_timeout,
        )

    async def __aenter__(self) -> "TokenDetailsAggregator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the clients this aggregator created."""
        if self._owns_http:
            await self.http_client.aclose()
        if self._owns_rpc:
            await self.rpc_client.close()

    async def get_token_details(self, address: str) -> TokenDetails | None:
        """
        Collect details for a mint address.

        Args:
            address: Base58 mint address

        Returns:
            TokenDetails with all available data, or None if the mint
            account could not be read

        Raises:
            InvalidAddressError: If the address is malformed (before any I/O)
        """
        mint = parse_mint_address(address)
        mint_address = str(mint)
        logger.info(f"Fetching details for mint: {mint_address}")

        # Step 1: Mint account (required)
        started = time.perf_counter()
        try:
            mint_info = await self.mint_provider.fetch_mint_info(mint)
        except MintLookupError as e:
            logger.error(f"Failed to get details for mint {mint_address}: {e.message}")
            return None

        mint_status = SourceStatus(
            source=DataSource.SOLANA_RPC,
            action="mint",
            status=StageStatus.OK,
            endpoint=f"getAccountInfo/{mint_address}",
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

        # Step 2: Descriptive metadata and market data (best-effort, concurrent)
        metadata_resolution, market_resolution = await asyncio.gather(
            self.metadata_resolver.resolve(mint),
            self.market_provider.collect(mint_address, mint_info.supply_raw, mint_info.decimals),
        )

        # Step 3: Formatted supply
        total_supply = format_raw_amount(mint_info.supply_raw, mint_info.decimals)
        logger.info(f"Supply: {total_supply}, Decimals: {mint_info.decimals}")

        # Step 4: Build result
        metadata = metadata_resolution.metadata
        market = market_resolution.market
        result = TokenDetails(
            address=mint_address,
            name=metadata.name or UNKNOWN_LABEL,
            symbol=metadata.symbol or UNKNOWN_LABEL,
            image_url=metadata.image_url,
            decimals=mint_info.decimals,
            total_supply=total_supply,
            total_supply_raw=mint_info.supply_raw,
            mint_authority=mint_info.mint_authority,
            freeze_authority=mint_info.freeze_authority,
            price=market.price,
            market_cap=market.market_cap,
            liquidity_usd=market.liquidity_usd,
            holders=market.holders,
            volume_24h=market.volume_24h,
            sources=[mint_status, *metadata_resolution.sources, *market_resolution.sources],
            tool_version=__version__,
        )

        failed = len(result.failed_sources)
        if failed:
            logger.info(f"Details complete for {mint_address} ({failed} source(s) degraded)")
        else:
            logger.info(f"Details complete for {mint_address}")
        return result
