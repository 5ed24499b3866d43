"""Fan-out of group lookups across several chains with a first-chain-wins merge."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .batching import resolve_with_attempts
from .errors import SnapshotError
from .model import LookupResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import Sleep
    from .ports import GroupResolver

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChainLane:
    """One chain taking part in a cross-chain snapshot."""

    name: str
    block: int | None
    resolver: GroupResolver | None

    @property
    def eligible(self) -> bool:
        return self.block is not None and self.resolver is not None


@dataclass(slots=True)
class CrossChainDispatcher:
    """Resolve a group on every eligible chain and keep the first chain's answer.

    ``lanes`` order is the tie-break order: when two chains both report an owner
    for the same token, the lane listed first wins. Lanes without a snapshot block
    or resolver are dropped for the lifetime of the dispatcher.
    """

    lanes: Sequence[ChainLane]
    attempt_backoff_seconds: float = 1.0
    sleep: Sleep = field(default=asyncio.sleep)
    _eligible: tuple[ChainLane, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        eligible: list[ChainLane] = []
        for lane in self.lanes:
            if lane.eligible:
                eligible.append(lane)
            else:
                log.warning("Skipping chain %s: no snapshot block or RPC endpoint", lane.name)
        if not eligible:
            raise SnapshotError("No chain has both an RPC endpoint and a snapshot block")
        self._eligible = tuple(eligible)

    @property
    def chains(self) -> tuple[str, ...]:
        return tuple(lane.name for lane in self._eligible)

    async def resolve_group(
        self,
        token_ids: Sequence[int],
        *,
        attempts: int = 1,
    ) -> list[LookupResult]:
        return await resolve_with_attempts(
            self._fan_out,
            token_ids,
            attempts=attempts,
            backoff_seconds=self.attempt_backoff_seconds,
            sleep=self.sleep,
        )

    async def _fan_out(self, token_ids: Sequence[int]) -> list[LookupResult]:
        per_chain = await asyncio.gather(
            *(self._resolve_on(lane, token_ids) for lane in self._eligible)
        )
        results_by_chain = [
            {result.token_id: result for result in results if result.found}
            for results in per_chain
        ]

        merged: list[LookupResult] = []
        for token_id in token_ids:
            winner = next(
                (found[token_id] for found in results_by_chain if token_id in found),
                None,
            )
            merged.append(winner or LookupResult(token_id=token_id, owner=None))
        return merged

    @staticmethod
    async def _resolve_on(lane: ChainLane, token_ids: Sequence[int]) -> list[LookupResult]:
        if lane.resolver is None:  # pragma: no cover - filtered in __post_init__
            return []
        return await lane.resolver.resolve_group(token_ids)
