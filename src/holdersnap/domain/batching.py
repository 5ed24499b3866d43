"""Group-wise concurrent resolution of token ids."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import TransientLookupError
from .model import LookupResult, is_null_owner

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from .model import Sleep
    from .ports import GroupResolver, OwnerLookup

    LookupRound = Callable[[Sequence[int]], Awaitable[list[LookupResult]]]

log = getLogger(__name__)


def partition(token_ids: Sequence[int], size: int) -> list[list[int]]:
    """Split ``token_ids`` into consecutive groups of at most ``size`` items."""

    if size < 1:
        raise ValueError("Group size must be positive")
    return [list(token_ids[start : start + size]) for start in range(0, len(token_ids), size)]


async def resolve_with_attempts(
    lookup_round: LookupRound,
    token_ids: Sequence[int],
    *,
    attempts: int,
    backoff_seconds: float,
    sleep: Sleep,
) -> list[LookupResult]:
    """Run ``lookup_round`` up to ``attempts`` times, retrying only members still missing.

    The wait before retry ``k`` is ``backoff_seconds * k``. Results keep the order of
    ``token_ids``; ids the round never answered come back with ``owner=None``.
    """

    results = {token_id: LookupResult(token_id=token_id, owner=None) for token_id in token_ids}
    pending = list(token_ids)
    for attempt in range(max(1, attempts)):
        if not pending:
            break
        if attempt > 0:
            log.debug("Retrying %s lookups (attempt %s/%s)", len(pending), attempt + 1, attempts)
            await sleep(backoff_seconds * attempt)
        for result in await lookup_round(pending):
            if result.found and result.token_id in results:
                results[result.token_id] = result
        pending = [token_id for token_id in pending if not results[token_id].found]
    return [results[token_id] for token_id in token_ids]


@dataclass(slots=True)
class BatchResolver:
    """Resolve groups of token ids on one chain at a pinned block.

    Members of a group are looked up concurrently and joined. A member whose lookup
    raises :class:`TransientLookupError`, or whose owner is a null sentinel, is
    reported with ``owner=None`` without affecting the rest of the group.
    """

    lookup: OwnerLookup
    block: int
    chain: str | None = None
    null_owners: frozenset[str] = field(default_factory=frozenset)
    attempt_backoff_seconds: float = 1.0
    sleep: Sleep = field(default=asyncio.sleep)

    async def resolve_group(
        self,
        token_ids: Sequence[int],
        *,
        attempts: int = 1,
    ) -> list[LookupResult]:
        return await resolve_with_attempts(
            self._lookup_round,
            token_ids,
            attempts=attempts,
            backoff_seconds=self.attempt_backoff_seconds,
            sleep=self.sleep,
        )

    async def _lookup_round(self, token_ids: Sequence[int]) -> list[LookupResult]:
        owners = await asyncio.gather(*(self._lookup_member(token_id) for token_id in token_ids))
        return [
            LookupResult(token_id=token_id, owner=owner, chain=self.chain, block=self.block)
            for token_id, owner in zip(token_ids, owners, strict=True)
        ]

    async def _lookup_member(self, token_id: int) -> str | None:
        try:
            owner = await self.lookup(token_id)
        except TransientLookupError as exc:
            log.debug("Lookup failed for token %s on %s: %s", token_id, self.chain, exc)
            return None
        if is_null_owner(owner, self.null_owners):
            return None
        return owner


async def resolve_batch(
    resolver: GroupResolver,
    token_ids: Sequence[int],
    *,
    group_size: int,
    group_delay: float = 0.0,
    sleep: Sleep = asyncio.sleep,
) -> list[LookupResult]:
    """Resolve every id in ``token_ids`` group by group and return the flat result list."""

    collected: list[LookupResult] = []
    for index, group in enumerate(partition(token_ids, group_size)):
        if index > 0 and group_delay > 0:
            await sleep(group_delay)
        collected.extend(await resolver.resolve_group(group))
    return collected
