"""Output location helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class StorageConfig:
    output_dir: Path

    def ensure_output_dir(self) -> Path:
        output_dir = self.output_dir.expanduser().resolve()
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir


def get_storage_config(*, output_dir: Path | None = None) -> StorageConfig:
    """Resolve the report directory: explicit argument, then ``HOLDERSNAP_OUTPUT_DIR``, then cwd."""
    env_dir = os.getenv("HOLDERSNAP_OUTPUT_DIR")
    return StorageConfig(output_dir=output_dir or (Path(env_dir) if env_dir else Path.cwd()))
