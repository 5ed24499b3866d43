"""Tuning knobs for snapshot runs."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from .env import env_int

DEFAULT_BATCH_SIZE: Final[int] = 25
DEFAULT_MAX_CONCURRENT: Final[int] = 30
DEFAULT_RETRY_DELAY_MS: Final[int] = 200
SOLANA_BATCH_SIZE: Final[int] = 50
SOLANA_RETRY_DELAY_MS: Final[int] = 50
DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 0.1


@dataclass(frozen=True, slots=True)
class SnapshotSettings:
    batch_size: int = DEFAULT_BATCH_SIZE
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000

    def with_batch_size(self, batch_size: int | None) -> SnapshotSettings:
        if batch_size is None:
            return self
        if batch_size < 1:
            raise ValueError("Batch size must be positive")
        return replace(self, batch_size=batch_size)


def get_snapshot_settings() -> SnapshotSettings:
    return SnapshotSettings(
        batch_size=env_int("BATCH_SIZE", DEFAULT_BATCH_SIZE),
        max_concurrent=env_int("MAX_CONCURRENT", DEFAULT_MAX_CONCURRENT),
        retry_delay_ms=env_int("RETRY_DELAY", DEFAULT_RETRY_DELAY_MS, minimum=0),
    )


def get_solana_snapshot_settings() -> SnapshotSettings:
    return SnapshotSettings(
        batch_size=env_int("BATCH_SIZE", SOLANA_BATCH_SIZE),
        max_concurrent=env_int("MAX_CONCURRENT", DEFAULT_MAX_CONCURRENT),
        retry_delay_ms=env_int("RETRY_DELAY", SOLANA_RETRY_DELAY_MS, minimum=0),
    )
