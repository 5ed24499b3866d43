"""Value types shared by the snapshot domain."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Outcome of one token lookup; ``owner`` is ``None`` when nothing was found."""

    token_id: int
    owner: str | None
    chain: str | None = None
    block: int | None = None

    @property
    def found(self) -> bool:
        return self.owner is not None


@dataclass(frozen=True, slots=True)
class OwnershipRecord:
    token_id: int
    owner: str
    block: int
    chain: str | None = None


@dataclass(frozen=True, slots=True)
class HoldingAccount:
    """A token account holding some amount of a Solana mint."""

    address: str
    amount: int


def is_null_owner(owner: str | None, sentinels: frozenset[str]) -> bool:
    """Return True when ``owner`` is missing or one of the chain's burn/unminted sentinels."""

    if owner is None:
        return True
    normalized = owner.strip().lower()
    if not normalized:
        return True
    return normalized in {sentinel.lower() for sentinel in sentinels}


def to_record(result: LookupResult) -> OwnershipRecord:
    if result.owner is None or result.block is None:
        raise ValueError(f"Lookup result for token {result.token_id} is not a resolution")
    return OwnershipRecord(
        token_id=result.token_id,
        owner=result.owner,
        block=result.block,
        chain=result.chain,
    )
