# chainmeta/core/accessors/json_rpc.py
"""
Async JSON-RPC accessor reading ``contractURI()`` via ``eth_call``.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx

from chainmeta.contracts.accessor import (
    AccessorResult,
    AccessorUnavailable,
    FailureReason,
    RemoteAccessor,
    URIFound,
)
from chainmeta.contracts.record import EntityIdentifier

logger = logging.getLogger(__name__)

# bytes4(keccak256("contractURI()"))
CONTRACT_URI_SELECTOR = "0xe8a3d485"
_WORD = 32
_REVERT_CODE = 3


class AbiDecodeError(ValueError):
    """Raised when call return data is not an ABI-encoded ``string``."""


def decode_abi_string(data: str) -> str:
    """Decode the hex return data of a function returning ``string``."""
    hex_body = data[2:] if data.startswith(("0x", "0X")) else data
    try:
        raw = bytes.fromhex(hex_body)
    except ValueError as exc:
        raise AbiDecodeError(f"Return data is not hex: {exc}") from exc

    if len(raw) < 2 * _WORD:
        raise AbiDecodeError(f"Return data too short ({len(raw)} bytes)")

    offset = int.from_bytes(raw[:_WORD], "big")
    if offset + _WORD > len(raw):
        raise AbiDecodeError(f"String offset {offset} out of range")

    length = int.from_bytes(raw[offset : offset + _WORD], "big")
    start = offset + _WORD
    if start + length > len(raw):
        raise AbiDecodeError(f"String length {length} out of range")

    try:
        return raw[start : start + length].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AbiDecodeError(f"String is not valid UTF-8: {exc}") from exc


class JsonRpcContractURIAccessor(RemoteAccessor):
    """Remote accessor backed by an Ethereum-style JSON-RPC endpoint.

    Contract::

        POST <base_url>
        body: {"jsonrpc": "2.0", "method": "eth_call",
               "params": [{"to": <address>, "data": "0xe8a3d485"}, <block>]}
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 10.0,
        block: str = "latest",
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._timeout = timeout
        self._block = block
        self._headers = dict(headers or {})
        self._client = client
        self._owns_client = client is None
        self._ids = itertools.count(1)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> JsonRpcContractURIAccessor:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def _payload(self, identifier: EntityIdentifier) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "eth_call",
            "params": [{"to": identifier, "data": CONTRACT_URI_SELECTOR}, self._block],
        }

    async def read_metadata_uri(self, identifier: EntityIdentifier) -> AccessorResult:
        client = self._get_client()
        try:
            resp = await client.post(
                self._base, json=self._payload(identifier), headers=self._headers
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as ex:
            logger.warning(
                "eth_call failed for %s status=%s", identifier, ex.response.status_code
            )
            return AccessorUnavailable(
                FailureReason.TRANSPORT, f"HTTP {ex.response.status_code}"
            )
        except httpx.HTTPError as ex:
            logger.warning("eth_call failed for %s: %s", identifier, ex)
            return AccessorUnavailable(FailureReason.TRANSPORT, str(ex) or type(ex).__name__)
        except ValueError as ex:
            return AccessorUnavailable(FailureReason.TRANSPORT, f"Invalid JSON response: {ex}")

        return self._interpret(identifier, body)

    def _interpret(self, identifier: EntityIdentifier, body: Any) -> AccessorResult:
        if not isinstance(body, dict):
            return AccessorUnavailable(FailureReason.TRANSPORT, "Response is not a JSON object")

        error = body.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            message = str(error.get("message", "")) if isinstance(error, dict) else str(error)
            if code == _REVERT_CODE or "revert" in message.lower():
                return AccessorUnavailable(FailureReason.REVERTED, message)
            return AccessorUnavailable(FailureReason.TRANSPORT, f"RPC error {code}: {message}")

        result = body.get("result")
        if not isinstance(result, str):
            return AccessorUnavailable(FailureReason.MALFORMED, "Missing eth_call result")
        if result in ("0x", ""):
            return AccessorUnavailable(
                FailureReason.NOT_IMPLEMENTED, "Empty return data"
            )

        try:
            uri = decode_abi_string(result)
        except AbiDecodeError as exc:
            return AccessorUnavailable(FailureReason.MALFORMED, str(exc))

        logger.debug("contractURI for %s: %d chars", identifier, len(uri))
        return URIFound(uri)
