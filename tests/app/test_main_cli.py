from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from holdersnap.ui import cli as cli_module


def _capture(monkeypatch: pytest.MonkeyPatch, name: str) -> dict[str, object]:
    captured: dict[str, object] = {}

    def fake_run(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, name, fake_run)
    return captured


def test_infinity_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch, "run_infinity_snapshot")

    cli_module.main(["infinity"])

    assert captured == {"at": None, "batch_size": None, "output_dir": None}


def test_panda_with_iso_snapshot_time(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch, "run_panda_snapshot")

    cli_module.main(
        ["panda", "--at", "2024-01-01T03:00:00+03:00", "--batch-size", "10", "--output-dir", "snaps"]
    )

    assert captured["at"] == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)
    assert captured["batch_size"] == 10
    assert captured["output_dir"] == Path("snaps")


def test_unix_snapshot_time_is_passed_through(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch, "run_infinity_snapshot")

    cli_module.main(["infinity", "--at", "1704067200"])

    assert captured["at"] == 1704067200


def test_solana_input_file(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch, "run_solana_snapshot")

    cli_module.main(["solana", "--input-file", "mints.csv"])

    assert captured["input_file"] == Path("mints.csv")


@pytest.mark.parametrize(
    "argv",
    [
        ["infinity", "--at", "not-a-date"],
        ["panda", "--batch-size", "0"],
    ],
)
def test_invalid_arguments_exit_with_code_two(monkeypatch: pytest.MonkeyPatch, argv: list[str]) -> None:
    _capture(monkeypatch, "run_infinity_snapshot")
    _capture(monkeypatch, "run_panda_snapshot")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_fatal_error_exits_with_code_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(**_: object) -> None:
        raise RuntimeError("RPC exploded")

    monkeypatch.setattr(cli_module, "run_infinity_snapshot", failing)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["infinity"])

    assert excinfo.value.code == 1


def test_all_reports_failures_without_exiting(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_all(**_: object) -> dict[str, object]:
        return {"infinity": RuntimeError("down"), "panda": object()}

    monkeypatch.setattr(cli_module, "run_all_snapshots", fake_all)

    cli_module.main(["all"])
