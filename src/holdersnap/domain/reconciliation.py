"""Multi-pass reconciliation of token ownership.

The engine sweeps the whole id range once, then rechecks whatever is still
unresolved in up to ``recheck_passes`` further passes. Each recheck pass uses
smaller groups, longer pauses and more attempts per group than the one before.
The engine is parameterised only by a :class:`GroupResolver`, so the same loop
serves single-chain, cross-chain and indexer-backed snapshots.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .batching import partition
from .model import to_record

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import LookupResult, OwnershipRecord, Sleep
    from .ports import GroupResolver

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PassPolicy:
    batch_size: int = 25
    recheck_passes: int = 3
    min_batch_size: int = 5
    group_delay_seconds: float = 0.2

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be positive")
        if self.recheck_passes < 0:
            raise ValueError("recheck_passes must be non-negative")

    def batch_size_for(self, pass_number: int) -> int:
        """Pass 0 uses the configured size; recheck pass p uses ``max(min, size // p)``."""
        if pass_number == 0:
            return self.batch_size
        return max(self.min_batch_size, self.batch_size // pass_number)

    def group_delay_for(self, pass_number: int) -> float:
        return self.group_delay_seconds * max(1, pass_number)

    def attempts_for(self, pass_number: int) -> int:
        return max(1, pass_number)


@dataclass(frozen=True, slots=True)
class PassReport:
    number: int
    batch_size: int
    checked: int
    resolved: int
    remaining: int


@dataclass(slots=True)
class ReconciliationResult:
    records: dict[int, OwnershipRecord]
    unresolved: tuple[int, ...]
    passes: list[PassReport] = field(default_factory=list)

    @property
    def recheck_passes(self) -> int:
        return sum(1 for report in self.passes if report.number > 0)


@dataclass(slots=True)
class _RunState:
    records: dict[int, OwnershipRecord] = field(default_factory=dict)
    unresolved: set[int] = field(default_factory=set)
    started: float = field(default_factory=time.monotonic)

    def elapsed_minutes(self) -> float:
        return (time.monotonic() - self.started) / 60


@dataclass(slots=True)
class ReconciliationEngine:
    resolver: GroupResolver
    policy: PassPolicy = field(default_factory=PassPolicy)
    sleep: Sleep = field(default=asyncio.sleep)

    async def run(self, token_ids: Sequence[int]) -> ReconciliationResult:
        """Resolve ``token_ids`` and return the final ownership map plus leftovers."""

        ids = list(dict.fromkeys(token_ids))
        state = _RunState()
        reports: list[PassReport] = []
        if not ids:
            return ReconciliationResult(records={}, unresolved=(), passes=reports)

        log.info("Starting to process %s tokens", len(ids))
        reports.append(await self._initial_sweep(ids, state))

        for pass_number in range(1, self.policy.recheck_passes + 1):
            if not state.unresolved:
                break
            reports.append(await self._recheck(pass_number, state))

        leftover = tuple(sorted(state.unresolved))
        if leftover:
            log.warning("%s tokens not found after all passes", len(leftover))
            log.debug("Unresolved tokens: %s", ", ".join(str(token_id) for token_id in leftover))
        return ReconciliationResult(records=state.records, unresolved=leftover, passes=reports)

    async def _initial_sweep(self, ids: list[int], state: _RunState) -> PassReport:
        batch_size = self.policy.batch_size_for(0)
        resolved = 0
        processed = 0
        for index, group in enumerate(partition(ids, batch_size)):
            if index > 0:
                await self._pause(self.policy.group_delay_for(0))
            log.info("Processing batch %s-%s...", min(group), max(group))
            results = await self.resolver.resolve_group(group, attempts=1)
            found = self._apply(group, results, state, pass_number=0)
            resolved += len(found)
            state.unresolved.update(token_id for token_id in group if token_id not in found)

            processed += len(group)
            log.info(
                "Progress: %.2f%% (%s/%s tokens) | Time elapsed: %.2f minutes",
                processed / len(ids) * 100,
                processed,
                len(ids),
                state.elapsed_minutes(),
            )

        return PassReport(
            number=0,
            batch_size=batch_size,
            checked=len(ids),
            resolved=resolved,
            remaining=len(state.unresolved),
        )

    async def _recheck(self, pass_number: int, state: _RunState) -> PassReport:
        batch_size = self.policy.batch_size_for(pass_number)
        delay = self.policy.group_delay_for(pass_number)
        attempts = self.policy.attempts_for(pass_number)
        candidates = sorted(state.unresolved)
        log.info("Pass %s: Rechecking %s tokens...", pass_number, len(candidates))

        resolved = 0
        for group in partition(candidates, batch_size):
            pending = [token_id for token_id in group if token_id in state.unresolved]
            if not pending:
                continue
            await self._pause(delay)
            log.info("Pass %s: Processing batch %s-%s...", pass_number, min(pending), max(pending))
            results = await self.resolver.resolve_group(pending, attempts=attempts)
            found = self._apply(pending, results, state, pass_number=pass_number)
            state.unresolved.difference_update(found)
            resolved += len(found)
            if not state.unresolved:
                break

        log.info("Pass %s complete. %s tokens remaining.", pass_number, len(state.unresolved))
        return PassReport(
            number=pass_number,
            batch_size=batch_size,
            checked=len(candidates),
            resolved=resolved,
            remaining=len(state.unresolved),
        )

    def _apply(
        self,
        group: Sequence[int],
        results: Sequence[LookupResult],
        state: _RunState,
        *,
        pass_number: int,
    ) -> set[int]:
        """Write newly found owners into the map; the first writer for an id wins."""

        members = set(group)
        found: set[int] = set()
        for result in results:
            token_id = result.token_id
            if not result.found or token_id not in members or token_id in state.records:
                continue
            state.records[token_id] = to_record(result)
            found.add(token_id)
            where = f" on {result.chain}" if result.chain else ""
            suffix = f" in pass {pass_number}" if pass_number else ""
            log.debug("Found token %s%s%s | owner: %s", token_id, where, suffix, result.owner)
        for token_id in group:
            if token_id not in state.records:
                log.debug("Token %s not found (pass %s)", token_id, pass_number)
        return found

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await self.sleep(seconds)
