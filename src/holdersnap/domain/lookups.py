"""Per-token lookups that bind a port to a contract, block and rate gate."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .fetcher import IndexerOwnerFetcher
    from .ports import ChainRpcClient
    from .rate_gate import RateGate

log = getLogger(__name__)


@dataclass(slots=True)
class EvmOwnerLookup:
    """``ownerOf(token_id)`` on one contract at one pinned block."""

    client: ChainRpcClient
    contract_address: str
    block: int
    gate: RateGate

    async def __call__(self, token_id: int) -> str | None:
        async with self.gate:
            return await self.client.owner_of(self.contract_address, token_id, self.block)


@dataclass(slots=True)
class MintOwnerLookup:
    """Map a token id to its Solana mint and resolve the mint's owner."""

    fetcher: IndexerOwnerFetcher
    mints: Mapping[int, str]

    async def __call__(self, token_id: int) -> str | None:
        mint = self.mints.get(token_id)
        if mint is None:
            log.warning("No mint address known for token %s", token_id)
            return None
        return await self.fetcher.fetch_owner(mint)
