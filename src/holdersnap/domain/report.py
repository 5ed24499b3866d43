"""Turn a final ownership map into CSV rows and summary statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import date

    from .model import OwnershipRecord

COLUMNS: Final[tuple[str, ...]] = ("TokenId", "Owner", "Chain", "BlockNumber")
DEFAULT_TOP_HOLDERS: Final[int] = 5


@dataclass(frozen=True, slots=True)
class HolderCount:
    address: str
    count: int


@dataclass(frozen=True, slots=True)
class SnapshotStats:
    total: int
    found: int
    missing: int
    success_rate: float
    unique_wallets: int
    average_per_wallet: float
    chain_distribution: dict[str, int] = field(default_factory=dict)
    top_holders: tuple[HolderCount, ...] = ()
    runtime_minutes: float = 0.0


def sorted_records(records: Mapping[int, OwnershipRecord]) -> list[OwnershipRecord]:
    return [records[token_id] for token_id in sorted(records)]


def build_rows(
    records: Mapping[int, OwnershipRecord],
    *,
    default_chain: str | None = None,
) -> list[dict[str, object]]:
    """Return one row per record, ordered by ascending token id."""

    return [
        {
            "TokenId": record.token_id,
            "Owner": record.owner,
            "Chain": record.chain or default_chain or "",
            "BlockNumber": record.block,
        }
        for record in sorted_records(records)
    ]


def wallet_counts(records: Mapping[int, OwnershipRecord]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in sorted_records(records):
        counts[record.owner] = counts.get(record.owner, 0) + 1
    return counts


def summarize(
    records: Mapping[int, OwnershipRecord],
    *,
    total: int,
    runtime_seconds: float = 0.0,
    chain_order: Sequence[str] = (),
    top_n: int = DEFAULT_TOP_HOLDERS,
) -> SnapshotStats:
    found = len(records)
    counts = wallet_counts(records)
    # sorted() is stable, so equal counts keep first-seen (lowest token id) order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    per_chain = Counter(record.chain for record in records.values() if record.chain)
    ordered_chains = [name for name in chain_order if per_chain.get(name)]
    ordered_chains += sorted(name for name in per_chain if name not in chain_order)

    return SnapshotStats(
        total=total,
        found=found,
        missing=max(total - found, 0),
        success_rate=(found / total * 100) if total else 0.0,
        unique_wallets=len(counts),
        average_per_wallet=(found / len(counts)) if counts else 0.0,
        chain_distribution={name: per_chain[name] for name in ordered_chains},
        top_holders=tuple(HolderCount(address, count) for address, count in ranked[:top_n]),
        runtime_minutes=runtime_seconds / 60,
    )


def output_prefix(label: str) -> str:
    return f"{label} Holders"


def output_filename(label: str, on: date) -> str:
    """``<label> Holders <M>.<D>.csv`` with neither year nor zero padding."""
    return f"{output_prefix(label)} {on.month}.{on.day}.csv"
