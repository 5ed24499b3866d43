from __future__ import annotations

from datetime import date

import pytest

from holdersnap.domain.model import OwnershipRecord
from holdersnap.domain.report import COLUMNS, build_rows, output_filename, summarize


def _records() -> dict[int, OwnershipRecord]:
    return {
        3: OwnershipRecord(token_id=3, owner="0xbbb", block=20, chain="polygon"),
        1: OwnershipRecord(token_id=1, owner="0xaaa", block=10, chain="ethereum"),
        2: OwnershipRecord(token_id=2, owner="0xbbb", block=10, chain="ethereum"),
    }


def test_rows_are_sorted_by_token_id_with_expected_columns() -> None:
    rows = build_rows(_records())

    assert [row["TokenId"] for row in rows] == [1, 2, 3]
    assert tuple(rows[0]) == COLUMNS
    assert rows[2] == {"TokenId": 3, "Owner": "0xbbb", "Chain": "polygon", "BlockNumber": 20}


def test_default_chain_fills_missing_chain() -> None:
    rows = build_rows({1: OwnershipRecord(token_id=1, owner="0xa", block=1)}, default_chain="ethereum")

    assert rows[0]["Chain"] == "ethereum"


def test_summary_counts_and_rates() -> None:
    stats = summarize(_records(), total=4, runtime_seconds=90, chain_order=("ethereum", "polygon"))

    assert (stats.found, stats.missing) == (3, 1)
    assert stats.success_rate == pytest.approx(75.0)
    assert stats.unique_wallets == 2
    assert stats.average_per_wallet == pytest.approx(1.5)
    assert stats.chain_distribution == {"ethereum": 2, "polygon": 1}
    assert stats.top_holders[0].address == "0xbbb"
    assert stats.top_holders[0].count == 2
    assert stats.runtime_minutes == pytest.approx(1.5)


def test_chain_distribution_follows_configured_order() -> None:
    stats = summarize(_records(), total=3, chain_order=("polygon", "ethereum"))

    assert list(stats.chain_distribution) == ["polygon", "ethereum"]


def test_summary_of_empty_snapshot_does_not_divide_by_zero() -> None:
    stats = summarize({}, total=0)

    assert stats.success_rate == 0.0
    assert stats.average_per_wallet == 0.0
    assert stats.top_holders == ()


def test_output_filename_has_unpadded_month_and_day() -> None:
    assert output_filename("Panda", date(2024, 3, 7)) == "Panda Holders 3.7.csv"
    assert output_filename("Solana Panda", date(2024, 11, 23)) == "Solana Panda Holders 11.23.csv"
