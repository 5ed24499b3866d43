"""HTTP JSON-RPC client for ERC-721 ``ownerOf`` queries on one EVM chain."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from holdersnap.adapters.http_resilience import ClientFactory, default_client_factory
from holdersnap.adapters.jsonrpc import JsonRpcResponse, build_request
from holdersnap.domain.errors import TransientLookupError

if TYPE_CHECKING:
    from types import TracebackType

    from holdersnap.config.chains import ChainConfig

log = getLogger(__name__)

# keccak256("ownerOf(uint256)")[:4]
OWNER_OF_SELECTOR: Final[str] = "0x6352211e"
_ADDRESS_HEX_LENGTH: Final[int] = 40


class EvmRpcError(TransientLookupError):
    """Raised when an RPC call fails at the transport, HTTP or JSON-RPC level."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


def encode_owner_of(token_id: int) -> str:
    if token_id < 0:
        raise ValueError("Token id must be non-negative")
    return f"{OWNER_OF_SELECTOR}{token_id:064x}"


def decode_address(word: object) -> str:
    """Decode an ABI-encoded ``address`` return value into lower-case hex."""

    if not isinstance(word, str) or not word.startswith("0x"):
        raise EvmRpcError(f"Unexpected ownerOf result: {word!r}")
    body = word[2:]
    if len(body) < _ADDRESS_HEX_LENGTH:
        raise EvmRpcError(f"Unexpected ownerOf result: {word!r}")
    try:
        int(body, 16)
    except ValueError as exc:
        raise EvmRpcError(f"Unexpected ownerOf result: {word!r}") from exc
    return "0x" + body[-_ADDRESS_HEX_LENGTH:].lower()


class EvmRpcClient:
    """Talks JSON-RPC to one chain's endpoint over a long-lived resilient HTTP client."""

    def __init__(
        self,
        chain: ChainConfig,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        if not chain.rpc_url:
            raise ValueError(f"Chain {chain.name} has no RPC URL configured")
        self.chain = chain
        self._rpc_url = chain.rpc_url
        self._client = (client_factory or default_client_factory)(chain.resilience())

    async def __aenter__(self) -> EvmRpcClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def owner_of(self, contract_address: str, token_id: int, block: int) -> str:
        call = {"to": contract_address, "data": encode_owner_of(token_id)}
        result = await self._call("eth_call", [call, hex(block)])
        return decode_address(result)

    async def latest_block(self) -> int:
        result = await self._call("eth_blockNumber", [])
        if not isinstance(result, str):
            raise EvmRpcError(f"Unexpected eth_blockNumber result: {result!r}")
        try:
            return int(result, 16)
        except ValueError as exc:
            raise EvmRpcError(f"Unexpected eth_blockNumber result: {result!r}") from exc

    async def _call(self, method: str, params: list[object]) -> object:
        try:
            response = await self._client.post(self._rpc_url, json=build_request(method, params))
            response.raise_for_status()
            payload = JsonRpcResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise EvmRpcError(f"{self.chain.name} RPC returned HTTP {status}", code=status) from exc
        except httpx.HTTPError as exc:
            raise EvmRpcError(f"{self.chain.name} RPC transport error: {exc}") from exc
        except ValueError as exc:
            raise EvmRpcError(f"{self.chain.name} RPC returned a malformed body") from exc

        if payload.error is not None:
            raise EvmRpcError(payload.error.message, code=payload.error.code)
        return payload.result
