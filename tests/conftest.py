"""Pytest configuration and fixtures for token tracker tests."""

import json
from types import SimpleNamespace
from typing import Any, Callable

import httpx
import pytest
from solders.pubkey import Pubkey

from token_tracker.core.config import TrackerConfig
from token_tracker.providers.chain.layouts import (
    METADATA_LAYOUT,
    MINT_LAYOUT,
    TOKEN_METADATA_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    metadata_pda,
)

# USDC mint, used only as a well-formed address
MINT_ADDRESS = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
MINT = Pubkey.from_string(MINT_ADDRESS)
AUTHORITY = Pubkey.from_string("BJE5MMbqXjVwjAF7oxwPYXnTXDyspzZyt4vwenNw5ruG")
METADATA_URI = "https://arweave.net/token-metadata.json"
BIRDEYE_URL = "https://public-api.birdeye.so"


def build_mint_data(
    decimals: int = 6,
    supply: int = 1_000_000_000_000,
    mint_authority: Pubkey | None = AUTHORITY,
    freeze_authority: Pubkey | None = None,
    is_initialized: bool = True,
) -> bytes:
    """Serialize an SPL mint account."""
    return MINT_LAYOUT.build(
        {
            "mint_authority_option": 1 if mint_authority else 0,
            "mint_authority": bytes(mint_authority) if mint_authority else bytes(32),
            "supply": supply,
            "decimals": decimals,
            "is_initialized": is_initialized,
            "freeze_authority_option": 1 if freeze_authority else 0,
            "freeze_authority": bytes(freeze_authority) if freeze_authority else bytes(32),
        }
    )


def _padded(text: str, size: int) -> bytes:
    return text.encode("utf-8").ljust(size, b"\x00")


def build_metadata_data(
    name: str = "USD Coin",
    symbol: str = "USDC",
    uri: str = METADATA_URI,
    mint: Pubkey = MINT,
) -> bytes:
    """Serialize a Metaplex metadata account with on-chain style null padding."""
    return METADATA_LAYOUT.build(
        {
            "key": 4,
            "update_authority": bytes(AUTHORITY),
            "mint": bytes(mint),
            "name": _padded(name, 32),
            "symbol": _padded(symbol, 10),
            "uri": _padded(uri, 200),
            "seller_fee_basis_points": 0,
            "has_creators": False,
            "creators": None,
            "primary_sale_happened": False,
            "is_mutable": True,
        }
    )


class FakeRpcClient:
    """Stands in for solana AsyncClient.get_account_info."""

    def __init__(self) -> None:
        self.accounts: dict[Pubkey, Any] = {}
        self.calls: list[Pubkey] = []

    def add_account(self, pubkey: Pubkey, data: bytes, owner: Pubkey) -> None:
        self.accounts[pubkey] = SimpleNamespace(data=data, owner=owner)

    def fail(self, pubkey: Pubkey, error: Exception) -> None:
        self.accounts[pubkey] = error

    async def get_account_info(self, pubkey: Pubkey, commitment: Any = None) -> Any:
        self.calls.append(pubkey)
        account = self.accounts.get(pubkey)
        if isinstance(account, Exception):
            raise account
        return SimpleNamespace(value=account)

    async def close(self) -> None:
        pass


class FakeHttp:
    """Routes httpx requests to canned responses by URL (without query)."""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def json(self, url: str, body: Any, status_code: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status_code, json=body)

    def text(self, url: str, body: str, status_code: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status_code, text=body)

    def error(self, url: str, error_type: type[Exception] = httpx.ConnectError) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise error_type("connection refused", request=request)

        self.routes[url] = raise_error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "not found"})
        return route(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def rpc() -> FakeRpcClient:
    """RPC double with a 6-decimal mint of 1,000,000 tokens and its metadata."""
    client = FakeRpcClient()
    client.add_account(MINT, build_mint_data(), TOKEN_PROGRAM_ID)
    client.add_account(metadata_pda(MINT), build_metadata_data(), TOKEN_METADATA_PROGRAM_ID)
    return client


@pytest.fixture
def http() -> FakeHttp:
    """HTTP double serving metadata JSON and both Birdeye endpoints."""
    fake = FakeHttp()
    fake.json(
        METADATA_URI,
        {
            "name": "USD Coin (json)",
            "symbol": "USDC-JSON",
            "image": "https://arweave.net/usdc.png",
            "description": "Fully reserved stablecoin",
        },
    )
    fake.routes[f"{BIRDEYE_URL}/defi/price"] = lambda request: httpx.Response(
        200, content=b'{"success": true, "data": {"value": 2.5, "updateUnixTime": 1700000000}}'
    )
    fake.json(
        f"{BIRDEYE_URL}/defi/token_overview",
        {
            "success": True,
            "data": {"liquidity": 1234567.89, "holders": 4321, "volume24h": 98765.4321},
        },
    )
    return fake


@pytest.fixture
def config() -> TrackerConfig:
    """Config with a Birdeye key so market calls are attempted."""
    return TrackerConfig(birdeye_api_key="test-key")


@pytest.fixture
def overview_payload() -> dict[str, Any]:
    """Raw Birdeye overview body using the provider's own field names."""
    return json.loads(
        '{"success": true, "data": {"liquidity": "5000.5", "holder": 12, "v24hUSD": 700}}'
    )
