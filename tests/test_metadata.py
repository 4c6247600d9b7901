"""Tests for the descriptive metadata providers and resolver."""

import httpx
import pytest

from token_tracker.core.exceptions import MetadataJsonError, MetadataLookupError
from token_tracker.core.models import DescriptiveMetadata, OffChainMetadata, OnChainMetadata
from token_tracker.core.types import StageStatus
from token_tracker.providers.chain.layouts import TOKEN_METADATA_PROGRAM_ID, TOKEN_PROGRAM_ID, metadata_pda
from token_tracker.providers.metadata import (
    DescriptiveMetadataResolver,
    MetaplexMetadataProvider,
    OffChainMetadataProvider,
)

from conftest import METADATA_URI, MINT, FakeHttp, FakeRpcClient, build_metadata_data


def make_resolver(rpc: FakeRpcClient, client: httpx.AsyncClient) -> DescriptiveMetadataResolver:
    return DescriptiveMetadataResolver(
        onchain=MetaplexMetadataProvider(rpc),
        offchain=OffChainMetadataProvider(client, timeout=2.0),
    )


class TestMerge:
    """Tests for DescriptiveMetadata.merge fallback rules."""

    def test_onchain_wins(self):
        merged = DescriptiveMetadata.merge(
            OnChainMetadata(name="Chain", symbol="CHN"),
            OffChainMetadata(name="Json", symbol="JSN", image="https://img"),
        )
        assert merged.name == "Chain"
        assert merged.symbol == "CHN"
        assert merged.image_url == "https://img"

    def test_offchain_fills_gaps(self):
        merged = DescriptiveMetadata.merge(
            OnChainMetadata(name="\x00\x00", symbol="CHN"),
            OffChainMetadata(name="Json", symbol="JSN"),
        )
        assert merged.name == "Json"
        assert merged.symbol == "CHN"
        assert merged.image_url is None

    def test_both_missing(self):
        assert DescriptiveMetadata.merge(None, None) == DescriptiveMetadata()


class TestMetaplexProvider:
    """Tests for MetaplexMetadataProvider."""

    async def test_fetch(self, rpc: FakeRpcClient):
        metadata = await MetaplexMetadataProvider(rpc).fetch_onchain_metadata(MINT)
        assert metadata.name == "USD Coin"
        assert metadata.symbol == "USDC"
        assert rpc.calls == [metadata_pda(MINT)]

    async def test_no_metadata_registered(self):
        with pytest.raises(MetadataLookupError, match="no metadata account"):
            await MetaplexMetadataProvider(FakeRpcClient()).fetch_onchain_metadata(MINT)

    async def test_wrong_owner(self):
        rpc = FakeRpcClient()
        rpc.add_account(metadata_pda(MINT), build_metadata_data(), TOKEN_PROGRAM_ID)
        with pytest.raises(MetadataLookupError):
            await MetaplexMetadataProvider(rpc).fetch_onchain_metadata(MINT)

    async def test_lookup_never_raises(self):
        rpc = FakeRpcClient()
        rpc.fail(metadata_pda(MINT), httpx.ReadTimeout("timed out"))
        result = await MetaplexMetadataProvider(rpc).lookup(MINT)

        assert not result.has_data
        assert result.status.status == StageStatus.FAILED
        assert "RPC request failed" in result.status.error_message


class TestOffChainProvider:
    """Tests for OffChainMetadataProvider."""

    async def test_fetch(self, http: FakeHttp):
        async with http.client() as client:
            document = await OffChainMetadataProvider(client).fetch_json_metadata(METADATA_URI)
        assert document.image == "https://arweave.net/usdc.png"
        assert document.description == "Fully reserved stablecoin"

    @pytest.mark.parametrize(
        "body",
        ["<html>gateway error</html>", "[1, 2, 3]", "{not json"],
    )
    async def test_malformed_body(self, body):
        fake = FakeHttp()
        fake.text(METADATA_URI, body)
        async with fake.client() as client:
            with pytest.raises(MetadataJsonError):
                await OffChainMetadataProvider(client).fetch_json_metadata(METADATA_URI)

    async def test_http_error(self):
        fake = FakeHttp()
        fake.json(METADATA_URI, {"error": "gone"}, status_code=410)
        async with fake.client() as client:
            with pytest.raises(MetadataJsonError) as exc_info:
                await OffChainMetadataProvider(client).fetch_json_metadata(METADATA_URI)
        assert exc_info.value.status_code == 410

    async def test_timeout(self):
        fake = FakeHttp()
        fake.error(METADATA_URI, httpx.ReadTimeout)
        async with fake.client() as client:
            result = await OffChainMetadataProvider(client, timeout=0.5).lookup(METADATA_URI)
        assert result.status.status == StageStatus.FAILED
        assert "timed out" in result.status.error_message

    async def test_non_string_fields_dropped(self):
        fake = FakeHttp()
        fake.json(METADATA_URI, {"name": 42, "symbol": ["X"], "image": "https://img"})
        async with fake.client() as client:
            document = await OffChainMetadataProvider(client).fetch_json_metadata(METADATA_URI)
        assert document.name is None
        assert document.symbol is None
        assert document.image == "https://img"


class TestResolver:
    """Tests for DescriptiveMetadataResolver."""

    async def test_both_layers(self, rpc: FakeRpcClient, http: FakeHttp):
        async with http.client() as client:
            resolution = await make_resolver(rpc, client).resolve(MINT)

        assert resolution.metadata.name == "USD Coin"
        assert resolution.metadata.symbol == "USDC"
        assert resolution.metadata.image_url == "https://arweave.net/usdc.png"
        assert [s.status for s in resolution.sources] == [StageStatus.OK, StageStatus.OK]

    async def test_onchain_values_not_overwritten(self, rpc: FakeRpcClient, http: FakeHttp):
        """Test the JSON name/symbol never replace non-empty on-chain ones."""
        async with http.client() as client:
            metadata = await make_resolver(rpc, client).resolve_descriptive_metadata(MINT)
        assert metadata.name != "USD Coin (json)"
        assert metadata.symbol != "USDC-JSON"

    async def test_json_fills_empty_onchain_fields(self, http: FakeHttp):
        rpc = FakeRpcClient()
        rpc.add_account(
            metadata_pda(MINT),
            build_metadata_data(name="", symbol=""),
            TOKEN_METADATA_PROGRAM_ID,
        )
        async with http.client() as client:
            metadata = await make_resolver(rpc, client).resolve_descriptive_metadata(MINT)
        assert metadata.name == "USD Coin (json)"
        assert metadata.symbol == "USDC-JSON"

    async def test_onchain_failure_skips_json(self, http: FakeHttp):
        async with http.client() as client:
            resolution = await make_resolver(FakeRpcClient(), client).resolve(MINT)

        assert resolution.metadata == DescriptiveMetadata()
        assert resolution.offchain is None
        assert http.requests == []
        assert resolution.onchain.status.status == StageStatus.FAILED

    async def test_json_failure_keeps_onchain(self, rpc: FakeRpcClient):
        fake = FakeHttp()
        fake.error(METADATA_URI)
        async with fake.client() as client:
            resolution = await make_resolver(rpc, client).resolve(MINT)

        assert resolution.metadata.name == "USD Coin"
        assert resolution.metadata.symbol == "USDC"
        assert resolution.metadata.image_url is None
        assert resolution.offchain.status.status == StageStatus.FAILED

    async def test_no_uri(self, http: FakeHttp):
        rpc = FakeRpcClient()
        rpc.add_account(metadata_pda(MINT), build_metadata_data(uri=""), TOKEN_METADATA_PROGRAM_ID)
        async with http.client() as client:
            resolution = await make_resolver(rpc, client).resolve(MINT)

        assert resolution.metadata.name == "USD Coin"
        assert resolution.offchain is None
        assert http.requests == []
