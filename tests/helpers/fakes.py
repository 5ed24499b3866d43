"""Reusable fakes for snapshot tests."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from holdersnap.adapters.http_resilience import ResilientClient
from holdersnap.domain.errors import RateLimitedError, TransientLookupError
from holdersnap.domain.model import HoldingAccount, LookupResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from holdersnap.config import ResilienceConfig


class RecordingSleep:
    """Sleep stand-in that records delays and yields to the event loop once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


@dataclass
class FakeOwnerLookup:
    """Per-token owners with an optional number of leading transient failures."""

    owners: Mapping[int, str | None]
    failures: dict[int, int] = field(default_factory=dict)
    calls: list[int] = field(default_factory=list)

    async def __call__(self, token_id: int) -> str | None:
        self.calls.append(token_id)
        await asyncio.sleep(0)
        remaining = self.failures.get(token_id, 0)
        if remaining:
            self.failures[token_id] = remaining - 1
            raise TransientLookupError(f"boom {token_id}")
        return self.owners.get(token_id)


@dataclass
class ScriptedResolver:
    """Group resolver whose answer for a token is found from the ``n``-th request on.

    ``found_from[token] = n`` means the token resolves on its ``n``-th lookup
    (1-based); tokens absent from the mapping never resolve.
    """

    found_from: Mapping[int, int]
    owner: str = "0xowner"
    block: int = 100
    chain: str | None = "ethereum"
    requests: defaultdict[int, int] = field(default_factory=lambda: defaultdict(int))
    groups: list[tuple[list[int], int]] = field(default_factory=list)

    async def resolve_group(
        self,
        token_ids: Sequence[int],
        *,
        attempts: int = 1,
    ) -> list[LookupResult]:
        self.groups.append((list(token_ids), attempts))
        results: list[LookupResult] = []
        for token_id in token_ids:
            self.requests[token_id] += 1
            threshold = self.found_from.get(token_id)
            found = threshold is not None and self.requests[token_id] >= threshold
            results.append(
                LookupResult(
                    token_id=token_id,
                    owner=f"{self.owner}{token_id}" if found else None,
                    chain=self.chain,
                    block=self.block,
                )
            )
        return results


@dataclass
class FakeIndexer:
    """Two-hop Solana indexer keyed by mint and token account."""

    accounts: Mapping[str, list[HoldingAccount]]
    owners: Mapping[str, str | None]
    rate_limited: dict[str, int] = field(default_factory=dict)
    failures: dict[str, int] = field(default_factory=dict)
    account_calls: list[str] = field(default_factory=list)
    owner_calls: list[str] = field(default_factory=list)

    async def largest_holding_accounts(self, mint_address: str) -> list[HoldingAccount]:
        self.account_calls.append(mint_address)
        if self.rate_limited.get(mint_address, 0):
            self.rate_limited[mint_address] -= 1
            raise RateLimitedError("429")
        if self.failures.get(mint_address, 0):
            self.failures[mint_address] -= 1
            raise TransientLookupError("upstream failure")
        return list(self.accounts.get(mint_address, []))

    async def account_owner(self, account_address: str) -> str | None:
        self.owner_calls.append(account_address)
        return self.owners.get(account_address)


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            transport=httpx.MockTransport(async_handler),
            base_url=resilience.base_url or "",
            headers=dict(resilience.default_headers or {}),
        )
        return client

    return factory
