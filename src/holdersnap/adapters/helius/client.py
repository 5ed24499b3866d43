"""Solana JSON-RPC client (Helius) for mint holder and account owner lookups."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from holdersnap.adapters.http_resilience import ClientFactory, default_client_factory
from holdersnap.adapters.jsonrpc import JsonRpcResponse, build_request
from holdersnap.domain.errors import RateLimitedError, TransientLookupError
from holdersnap.domain.model import HoldingAccount

from .schema import AccountInfoResult, LargestAccountsResult

if TYPE_CHECKING:
    from types import TracebackType

    from holdersnap.config.helius import HeliusConfig

log = getLogger(__name__)

TOO_MANY_REQUESTS = 429


class IndexerError(TransientLookupError):
    """Raised when the Solana RPC endpoint fails or answers with an error."""


class IndexerRateLimitedError(IndexerError, RateLimitedError):
    """Raised on HTTP 429 so the owner fetcher can back off harder."""


class IndexerPayloadError(IndexerError):
    """Raised when a response body is empty or does not have the expected shape."""


class HeliusClient:
    """Thin async wrapper over the three Solana RPC methods the snapshot needs.

    Retries are left to :class:`holdersnap.domain.fetcher.IndexerOwnerFetcher`, so
    the underlying HTTP client is configured without transport retries.
    """

    def __init__(
        self,
        *,
        config: HeliusConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client = (client_factory or default_client_factory)(config.resilience)

    async def __aenter__(self) -> HeliusClient:
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

    async def largest_holding_accounts(self, mint_address: str) -> list[HoldingAccount]:
        result = await self._call(
            "getTokenLargestAccounts",
            [mint_address, {"commitment": "confirmed"}],
        )
        try:
            parsed = LargestAccountsResult.model_validate(result)
        except (ValidationError, TypeError) as exc:
            raise IndexerPayloadError(f"Malformed largest accounts for {mint_address}") from exc
        return [
            HoldingAccount(address=account.address, amount=account.amount)
            for account in parsed.value
        ]

    async def account_owner(self, account_address: str) -> str | None:
        result = await self._call(
            "getAccountInfo",
            [account_address, {"encoding": "jsonParsed"}],
        )
        try:
            parsed = AccountInfoResult.model_validate(result)
        except (ValidationError, TypeError) as exc:
            raise IndexerPayloadError(f"Malformed account info for {account_address}") from exc
        if parsed.value is None:
            return None
        return parsed.value.token_owner

    async def current_slot(self) -> int:
        result = await self._call("getSlot", [{"commitment": "confirmed"}])
        if not isinstance(result, int):
            raise IndexerPayloadError(f"Unexpected getSlot result: {result!r}")
        return result

    async def _call(self, method: str, params: list[object]) -> object:
        try:
            response = await self._client.post(
                self._config.rpc_url,
                json=build_request(method, params),
            )
        except httpx.HTTPError as exc:
            raise IndexerError(f"{method} transport error: {exc}") from exc

        if response.status_code == TOO_MANY_REQUESTS:
            raise IndexerRateLimitedError(f"{method} rate limited")
        if response.is_error:
            raise IndexerError(f"{method} returned HTTP {response.status_code}")

        try:
            payload = JsonRpcResponse.model_validate(response.json())
        except ValueError as exc:
            raise IndexerPayloadError(f"{method} returned a malformed body") from exc

        if payload.error is not None:
            if payload.error.code == TOO_MANY_REQUESTS:
                raise IndexerRateLimitedError(payload.error.message)
            raise IndexerError(f"{method} failed: {payload.error.message}")
        if payload.result is None:
            raise IndexerPayloadError(f"{method} returned no result")
        return payload.result
