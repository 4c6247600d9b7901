"""Mint account provider.

Reads the SPL mint account for an address through Solana JSON-RPC. This
is the one required source of the pipeline: every failure here surfaces
as MintLookupError.
"""

import asyncio
import logging

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey

from ...core.exceptions import MintLookupError
from ...core.models import ChainMintInfo
from ...core.types import DataSource
from ..base import BaseProvider
from .layouts import TOKEN_PROGRAMS, LayoutError, parse_mint_account

logger = logging.getLogger(__name__)

# Errors the RPC client can raise for a failed call
RPC_ERRORS = (
    SolanaRpcException,
    RPCException,
    httpx.HTTPError,
    asyncio.TimeoutError,
    OSError,
    ValueError,  # undecodable RPC payloads
)


class MintInfoProvider(BaseProvider):
    """Fetches decimals, supply and authorities of a mint."""

    SOURCE = DataSource.SOLANA_RPC

    def __init__(self, client: AsyncClient, commitment: str = "confirmed"):
        """
        Initialize the mint provider.

        Args:
            client: Solana async RPC client, owned by the caller
            commitment: Commitment level for account reads
        """
        self.client = client
        self.commitment = commitment

    def is_available(self) -> bool:
        return self.client is not None

    async def fetch_mint_info(self, mint: Pubkey) -> ChainMintInfo:
        """
        Read and decode the mint account.

        Args:
            mint: Validated mint public key

        Returns:
            ChainMintInfo for the mint

        Raises:
            MintLookupError: If the RPC call fails, the account does not
                exist, is not owned by a token program, or cannot be decoded
        """
        address = str(mint)
        logger.info(f"Fetching mint info for {address}...")

        try:
            response = await self.client.get_account_info(mint, commitment=self.commitment)
        except RPC_ERRORS as e:
            raise MintLookupError(address, f"RPC request failed: {str(e) or type(e).__name__}")

        account = response.value
        if account is None:
            raise MintLookupError(address, "account not found")

        if account.owner not in TOKEN_PROGRAMS:
            raise MintLookupError(address, f"account is owned by {account.owner}, not a token program")

        try:
            mint_info = parse_mint_account(address, bytes(account.data), owner=account.owner)
        except LayoutError as e:
            raise MintLookupError(address, str(e))

        if not mint_info.is_initialized:
            raise MintLookupError(address, "mint account is not initialized")

        logger.info(
            f"Mint {address}: decimals={mint_info.decimals}, "
            f"supply_raw={mint_info.supply_raw} ({TOKEN_PROGRAMS[account.owner]})"
        )
        return mint_info
