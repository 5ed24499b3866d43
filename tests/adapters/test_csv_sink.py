from __future__ import annotations

import csv
from typing import TYPE_CHECKING

import pytest

from holdersnap.adapters.csv_sink import CsvSink, read_mint_table
from holdersnap.domain.errors import SnapshotError

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_write_rows_creates_directory_and_header(tmp_path: Path) -> None:
    target = tmp_path / "out" / "Panda Holders 1.2.csv"

    CsvSink().write_rows(
        target,
        [{"TokenId": 1, "Owner": "0xa", "Chain": "ethereum", "BlockNumber": 10}],
        ("TokenId", "Owner", "Chain", "BlockNumber"),
    )

    with target.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert rows == [["TokenId", "Owner", "Chain", "BlockNumber"], ["1", "0xa", "ethereum", "10"]]


def test_remove_stale_only_touches_matching_prefix(tmp_path: Path) -> None:
    old = _write(tmp_path / "Panda Holders 1.1.csv", "x")
    other = _write(tmp_path / "Solana Panda Holders 1.1.csv", "x")
    notes = _write(tmp_path / "Panda Holders notes.txt", "x")

    removed = CsvSink().remove_stale(tmp_path, "Panda Holders")

    assert removed == [old]
    assert not old.exists()
    assert other.exists()
    assert notes.exists()


def test_read_mint_table_skips_blank_mints_and_keeps_first_duplicate(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "earnings.csv",
        "IntTokenId,SolanaTokenId,Earned\n"
        "1,MintA,3\n"
        "2,,4\n"
        "3,MintC,5\n"
        "3,MintDup,6\n",
    )

    assert read_mint_table(source) == {1: "MintA", 3: "MintC"}


def test_read_mint_table_falls_back_to_row_position(tmp_path: Path) -> None:
    source = _write(tmp_path / "earnings.csv", "IntTokenId,SolanaTokenId\n,MintA\nabc,MintB\n")

    assert read_mint_table(source) == {1: "MintA", 2: "MintB"}


def test_read_mint_table_handles_byte_order_mark(tmp_path: Path) -> None:
    source = tmp_path / "earnings.csv"
    source.write_text("IntTokenId,SolanaTokenId\n5,MintE\n", encoding="utf-8-sig")

    assert read_mint_table(source) == {5: "MintE"}


def test_read_mint_table_requires_mint_column(tmp_path: Path) -> None:
    source = _write(tmp_path / "earnings.csv", "IntTokenId,Other\n1,x\n")

    with pytest.raises(SnapshotError, match="SolanaTokenId"):
        read_mint_table(source)


def test_read_mint_table_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_mint_table(tmp_path / "absent.csv")
