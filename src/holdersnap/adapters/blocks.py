"""Block resolver backed by chain RPC for "latest" and Moralis for timestamps."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .moralis import BlockResolutionError

if TYPE_CHECKING:
    from datetime import datetime

    from .evm import ChainClientRegistry
    from .moralis import MoralisBlockClient


class SnapshotBlockResolver:
    def __init__(
        self,
        registry: ChainClientRegistry,
        *,
        moralis: MoralisBlockClient | None = None,
    ) -> None:
        self._registry = registry
        self._moralis = moralis

    async def latest_block(self, chain: str) -> int:
        return await self._registry.get(chain).latest_block()

    async def block_for_timestamp(self, chain: str, when: datetime | int | str) -> int:
        if self._moralis is None:
            raise BlockResolutionError("Timestamp snapshots need a Moralis client")
        moralis_chain = self._registry.config(chain).moralis_chain
        return await self._moralis.date_to_block(moralis_chain, when)
