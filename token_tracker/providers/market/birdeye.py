"""Birdeye market data provider.

Two independent endpoints are used:
- /defi/price           -> spot price (`data.value`)
- /defi/token_overview  -> liquidity, holders, 24h volume

Market cap is never taken from the provider; it is derived locally from
the price and the on-chain supply.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

import httpx

from ...calculator.amounts import calc_market_cap
from ...core.exceptions import DataSourceError, MarketDataError
from ...core.models import MarketData, MarketResolution, PriceQuote, StageResult, TokenOverview
from ...core.types import DataSource, RawAmount, StageStatus
from ..base import HttpJsonProvider

logger = logging.getLogger(__name__)


class BirdeyeMarketProvider(HttpJsonProvider):
    """Fetches price and overview statistics for a Solana token."""

    SOURCE = DataSource.BIRDEYE
    BASE_URL = "https://public-api.birdeye.so"
    PRICE_ENDPOINT = "/defi/price"
    OVERVIEW_ENDPOINT = "/defi/token_overview"

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str | None = None,
        base_url: str | None = None,
        chain: str = "solana",
        timeout: float = 10.0,
    ):
        """
        Initialize Birdeye provider.

        Args:
            http: Shared async HTTP client
            api_key: Birdeye API key (sent as X-API-Key)
            base_url: Override for the public API URL
            chain: Value of the x-chain header
            timeout: Per-request timeout in seconds
        """
        super().__init__(http, timeout=timeout)
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.chain = chain

    def is_available(self) -> bool:
        """Birdeye rejects keyless requests, so a key is required."""
        return bool(self.api_key)

    def _error(
        self,
        endpoint: str,
        message: str,
        status_code: int | None = None,
    ) -> DataSourceError:
        return MarketDataError(endpoint, message, status_code=status_code)

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json", "x-chain": self.chain}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    async def _fetch_data(self, endpoint: str, address: str) -> dict[str, Any]:
        """GET an endpoint and unwrap the `data` object of the envelope."""
        url = f"{self.base_url}{endpoint}"
        body = await self._get_json(url, params={"address": address}, headers=self._headers())

        if not isinstance(body, dict):
            raise MarketDataError(endpoint, f"expected a JSON object, got {type(body).__name__}")
        if body.get("success") is False:
            raise MarketDataError(endpoint, f"request rejected: {body.get('message', 'no message')}")

        data = body.get("data")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise MarketDataError(endpoint, f"`data` is {type(data).__name__}, expected an object")
        return data

    async def fetch_price(self, address: str) -> PriceQuote:
        """
        Get the spot price of a token.

        Raises:
            MarketDataError: On HTTP failure or a malformed envelope
        """
        data = await self._fetch_data(self.PRICE_ENDPOINT, address)
        return PriceQuote.model_validate(data)

    async def fetch_overview(self, address: str) -> TokenOverview:
        """
        Get liquidity, holder count and 24h volume.

        Raises:
            MarketDataError: On HTTP failure or a malformed envelope
        """
        data = await self._fetch_data(self.OVERVIEW_ENDPOINT, address)
        return TokenOverview.model_validate(data)

    async def _lookup(
        self,
        action: str,
        endpoint: str,
        fetch: Callable[[str], Awaitable[PriceQuote | TokenOverview]],
        address: str,
        result_type: type[StageResult],
    ) -> StageResult:
        started = time.perf_counter()
        try:
            value = await fetch(address)
        except MarketDataError as e:
            logger.error(f"Error fetching {action} from Birdeye: {e.message}")
            return result_type(
                status=self._status(
                    action,
                    StageStatus.FAILED,
                    endpoint=endpoint,
                    error_message=e.message,
                    started=started,
                ),
            )

        empty = all(v is None for v in value.model_dump(exclude={"update_unix_time"}).values())
        if empty:
            logger.warning(f"{action.capitalize()} data not found in Birdeye response for {address}")
        return result_type(
            value=value,
            status=self._status(
                action,
                StageStatus.EMPTY if empty else StageStatus.OK,
                endpoint=endpoint,
                started=started,
            ),
        )

    async def lookup_price(self, address: str) -> StageResult[PriceQuote]:
        """Best-effort variant of fetch_price; never raises."""
        return await self._lookup(
            "price", self.PRICE_ENDPOINT, self.fetch_price, address, StageResult[PriceQuote]
        )

    async def lookup_overview(self, address: str) -> StageResult[TokenOverview]:
        """Best-effort variant of fetch_overview; never raises."""
        return await self._lookup(
            "overview", self.OVERVIEW_ENDPOINT, self.fetch_overview, address, StageResult[TokenOverview]
        )

    def _skipped(self, action: str, endpoint: str, result_type: type[StageResult]) -> StageResult:
        return result_type(
            status=self._status(
                action,
                StageStatus.SKIPPED,
                endpoint=endpoint,
                error_message="BIRDEYE_API_KEY not configured",
            ),
        )

    async def collect(
        self,
        address: str,
        supply_raw: RawAmount,
        decimals: int,
    ) -> MarketResolution:
        """
        Query both endpoints concurrently and combine them.

        Args:
            address: Mint address
            supply_raw: Raw total supply from the mint account
            decimals: Mint decimals

        Returns:
            MarketResolution; failed endpoints leave their fields unset
        """
        if not self.is_available():
            logger.warning("BIRDEYE_API_KEY not set, skipping market data")
            return MarketResolution(
                price=self._skipped("price", self.PRICE_ENDPOINT, StageResult[PriceQuote]),
                overview=self._skipped(
                    "overview", self.OVERVIEW_ENDPOINT, StageResult[TokenOverview]
                ),
            )

        logger.info(f"Fetching market data from Birdeye for {address}...")
        price_result, overview_result = await asyncio.gather(
            self.lookup_price(address),
            self.lookup_overview(address),
        )

        price = price_result.value.value if price_result.has_data else None
        overview = overview_result.value or TokenOverview()

        market_cap = None
        if price is not None:
            market_cap = calc_market_cap(price, supply_raw, decimals)

        market = MarketData(
            price=price,
            market_cap=market_cap,
            liquidity_usd=overview.liquidity,
            holders=overview.holders,
            volume_24h=overview.volume_24h,
        )
        logger.info(
            f"Price: {market.price}, Market Cap: {market.market_cap}, "
            f"Liquidity: {market.liquidity_usd}, Holders: {market.holders}, "
            f"Volume 24h: {market.volume_24h}"
        )
        return MarketResolution(price=price_result, overview=overview_result, market=market)

    async def fetch_market_data(
        self,
        address: str,
        supply_raw: RawAmount,
        decimals: int,
    ) -> MarketData:
        """Combined market data only; never raises on provider errors."""
        resolution = await self.collect(address, supply_raw, decimals)
        return resolution.market
