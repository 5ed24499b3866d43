"""CSV input and output for snapshot runs."""

from __future__ import annotations

import csv
from logging import getLogger
from typing import TYPE_CHECKING

from holdersnap.domain.errors import SnapshotError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

log = getLogger(__name__)


class CsvSink:
    """Writes snapshot rows to CSV files, replacing any file at the destination."""

    def write_rows(
        self,
        path: Path,
        rows: Sequence[Mapping[str, object]],
        columns: Sequence[str],
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(columns), extrasaction="ignore")
            writer.writeheader()
            writer.writerows(rows)
        log.info("Wrote %s rows to %s", len(rows), path)
        return path

    def remove_stale(self, directory: Path, prefix: str) -> list[Path]:
        """Delete ``<prefix>*.csv`` files left in ``directory`` by earlier runs."""

        if not directory.exists():
            return []
        removed: list[Path] = []
        for candidate in sorted(directory.glob("*.csv")):
            if candidate.is_file() and candidate.name.startswith(prefix):
                log.info("Removing old snapshot: %s", candidate.name)
                candidate.unlink()
                removed.append(candidate)
        return removed


def read_rows(path: Path) -> list[dict[str, str]]:
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return [dict(row) for row in csv.DictReader(handle)]


def read_mint_table(
    path: Path,
    *,
    token_id_column: str = "IntTokenId",
    mint_column: str = "SolanaTokenId",
) -> dict[int, str]:
    """Map token ids to Solana mint addresses from an earnings-style CSV.

    Rows with a blank mint are skipped. Rows without a usable token id fall back
    to their 1-based position in the file.
    """

    log.info("Reading CSV file: %s", path)
    rows = read_rows(path)
    if not rows:
        raise SnapshotError(f"CSV file is empty: {path}")
    if mint_column not in rows[0]:
        raise SnapshotError(f"Missing required columns: {mint_column}")

    mints: dict[int, str] = {}
    skipped: list[str] = []
    for position, row in enumerate(rows, start=1):
        raw_id = (row.get(token_id_column) or "").strip()
        mint = (row.get(mint_column) or "").strip()
        if not mint:
            skipped.append(raw_id or "N/A")
            continue
        token_id = int(raw_id) if raw_id.isdigit() else position
        if token_id in mints:
            log.warning("Duplicate token id %s in %s, keeping the first mint", token_id, path)
            continue
        mints[token_id] = mint

    if skipped:
        log.warning(
            "Skipping %s rows with missing token IDs (%s=%s)",
            len(skipped),
            token_id_column,
            ", ".join(skipped),
        )
    return mints
