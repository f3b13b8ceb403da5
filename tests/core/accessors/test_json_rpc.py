# tests/core/accessors/test_json_rpc.py
from __future__ import annotations

import json

import httpx
import pytest

from chainmeta.contracts.accessor import AccessorUnavailable, FailureReason, URIFound
from chainmeta.core.accessors.json_rpc import (
    CONTRACT_URI_SELECTOR,
    AbiDecodeError,
    JsonRpcContractURIAccessor,
    decode_abi_string,
)
from chainmeta.core.fetcher import BatchMetadataFetcher

ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def abi_string(value: str) -> str:
    data = value.encode("utf-8")
    padded = data + b"\x00" * (-len(data) % 32)
    return "0x" + (
        (32).to_bytes(32, "big") + len(data).to_bytes(32, "big") + padded
    ).hex()


def make_accessor(handler) -> JsonRpcContractURIAccessor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JsonRpcContractURIAccessor(base_url="http://rpc/", client=client)


class TestDecodeAbiString:
    def test_decode(self):
        assert decode_abi_string(abi_string("ipfs://abc")) == "ipfs://abc"

    def test_decode_empty_string(self):
        assert decode_abi_string(abi_string("")) == ""

    def test_decode_long_string(self):
        value = "data:application/json;utf8," + "x" * 100
        assert decode_abi_string(abi_string(value)) == value

    def test_not_hex(self):
        with pytest.raises(AbiDecodeError, match="not hex"):
            decode_abi_string("0xzz")

    def test_too_short(self):
        with pytest.raises(AbiDecodeError, match="too short"):
            decode_abi_string("0x" + "00" * 31)

    def test_length_out_of_range(self):
        raw = (32).to_bytes(32, "big") + (1000).to_bytes(32, "big")
        with pytest.raises(AbiDecodeError, match="out of range"):
            decode_abi_string("0x" + raw.hex())

    def test_invalid_utf8(self):
        raw = (32).to_bytes(32, "big") + (1).to_bytes(32, "big") + b"\xff" + b"\x00" * 31
        with pytest.raises(AbiDecodeError, match="UTF-8"):
            decode_abi_string("0x" + raw.hex())


class TestJsonRpcContractURIAccessor:
    @pytest.mark.asyncio
    async def test_sends_eth_call(self):
        seen = {}

        async def handler(request):
            seen["host"] = request.url.host
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": 1, "result": abi_string("ipfs://x")}
            )

        accessor = make_accessor(handler)
        result = await accessor.read_metadata_uri(ADDRESS)

        assert result == URIFound("ipfs://x")
        assert seen["host"] == "rpc"
        assert seen["body"]["method"] == "eth_call"
        assert seen["body"]["params"] == [
            {"to": ADDRESS, "data": CONTRACT_URI_SELECTOR},
            "latest",
        ]

    @pytest.mark.asyncio
    async def test_custom_headers(self):
        async def handler(request):
            assert request.headers["Authorization"] == "Bearer abc123"
            return httpx.Response(200, json={"result": abi_string("")})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        accessor = JsonRpcContractURIAccessor(
            base_url="http://rpc",
            headers={"Authorization": "Bearer abc123"},
            client=client,
        )

        assert await accessor.read_metadata_uri(ADDRESS) == URIFound("")

    @pytest.mark.asyncio
    async def test_empty_return_is_not_implemented(self):
        async def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x"})

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert isinstance(result, AccessorUnavailable)
        assert result.reason is FailureReason.NOT_IMPLEMENTED

    @pytest.mark.asyncio
    async def test_revert(self):
        async def handler(request):
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted"}},
            )

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert result.reason is FailureReason.REVERTED
        assert "reverted" in result.detail

    @pytest.mark.asyncio
    async def test_other_rpc_error_is_transport(self):
        async def handler(request):
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "rate limited"}},
            )

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_http_error_is_transport(self):
        async def handler(request):
            return httpx.Response(502, text="bad gateway")

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert result.reason is FailureReason.TRANSPORT
        assert "502" in result.detail

    @pytest.mark.asyncio
    async def test_connection_error_is_transport(self):
        async def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_non_json_body_is_transport(self):
        async def handler(request):
            return httpx.Response(200, text="<html>")

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_garbage_result_is_malformed(self):
        async def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1234"})

        result = await make_accessor(handler).read_metadata_uri(ADDRESS)

        assert result.reason is FailureReason.MALFORMED

    @pytest.mark.asyncio
    async def test_aclose_keeps_injected_client_open(self):
        async def handler(request):
            return httpx.Response(200, json={"result": abi_string("x")})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with JsonRpcContractURIAccessor(base_url="http://rpc", client=client):
            pass

        assert client.is_closed is False
        await client.aclose()


    @pytest.mark.asyncio
    async def test_fetcher_aclose_closes_owned_client(self):
        accessor = JsonRpcContractURIAccessor(base_url="http://rpc")
        client = accessor._get_client()

        await BatchMetadataFetcher(accessor).aclose()

        assert client.is_closed is True


@pytest.mark.asyncio
async def test_batch_over_json_rpc():
    uris = {
        "0x01": 'data:application/json;utf8,{"name":"Foo"}',
        "0x03": "https://example.com/meta.json",
    }

    async def handler(request):
        to = json.loads(request.content)["params"][0]["to"]
        if to in uris:
            return httpx.Response(200, json={"result": abi_string(uris[to])})
        return httpx.Response(200, json={"error": {"code": 3, "message": "execution reverted"}})

    fetcher = BatchMetadataFetcher(make_accessor(handler), max_in_flight=2)

    records = await fetcher.fetch_many(["0x01", "0x02", "0x03"])

    assert [(r.identifier, r.has_accessor, r.is_embedded) for r in records] == [
        ("0x01", True, True),
        ("0x02", False, False),
        ("0x03", True, False),
    ]
