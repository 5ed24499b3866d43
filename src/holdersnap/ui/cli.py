from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from holdersnap.app import (
    run_all_snapshots,
    run_infinity_snapshot,
    run_panda_snapshot,
    run_solana_snapshot,
)
from holdersnap.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snapshot NFT collection holders")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    infinity = subparsers.add_parser("infinity", help="Snapshot the Ethereum Infinity collection")
    panda = subparsers.add_parser("panda", help="Snapshot the multi-chain Panda collection")
    for evm in (infinity, panda):
        evm.add_argument(
            "--at",
            type=str,
            help="Snapshot time as ISO-8601 timestamp (UTC) or unix seconds (defaults to latest block)",
        )
        evm.add_argument(
            "--batch-size",
            type=int,
            default=None,
            help="Number of tokens per concurrent group (defaults to config)",
        )
        evm.add_argument(
            "--output-dir",
            type=Path,
            help="Directory for the CSV report (defaults to HOLDERSNAP_OUTPUT_DIR or cwd)",
        )

    solana = subparsers.add_parser("solana", help="Snapshot the Solana Panda collection")
    solana.add_argument(
        "--input-file",
        type=Path,
        help="CSV listing token ids and their mint addresses",
    )
    solana.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Number of mints per concurrent group (defaults to config)",
    )
    solana.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the CSV report (defaults to HOLDERSNAP_OUTPUT_DIR or cwd)",
    )

    run_all = subparsers.add_parser("all", help="Run every snapshot in sequence")
    run_all.add_argument(
        "--input-file",
        type=Path,
        help="CSV listing Solana token ids and their mint addresses",
    )
    run_all.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the CSV reports (defaults to HOLDERSNAP_OUTPUT_DIR or cwd)",
    )

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_snapshot_time(value: str | None) -> datetime | int | None:
    if value is None:
        return None
    stripped = value.strip()
    if stripped.isdigit():
        return int(stripped)
    return _parse_iso_datetime(stripped)


def _validate(args: argparse.Namespace) -> datetime | int | None:
    batch_size = getattr(args, "batch_size", None)
    if batch_size is not None and batch_size < 1:
        raise ValueError("Batch size must be at least 1")
    return _parse_snapshot_time(getattr(args, "at", None))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        at = _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "infinity":
            run_infinity_snapshot(
                at=at,
                batch_size=parsed_args.batch_size,
                output_dir=parsed_args.output_dir,
            )
        elif parsed_args.command == "panda":
            run_panda_snapshot(
                at=at,
                batch_size=parsed_args.batch_size,
                output_dir=parsed_args.output_dir,
            )
        elif parsed_args.command == "solana":
            run_solana_snapshot(
                input_file=parsed_args.input_file,
                batch_size=parsed_args.batch_size,
                output_dir=parsed_args.output_dir,
            )
        elif parsed_args.command == "all":
            outcomes = run_all_snapshots(
                input_file=parsed_args.input_file,
                output_dir=parsed_args.output_dir,
            )
            failed = [name for name, outcome in outcomes.items() if isinstance(outcome, Exception)]
            if failed:
                log.warning("Snapshots failed: %s", ", ".join(failed))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during snapshot")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
