"""Pinning one snapshot block per chain at the start of a run."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import TransientLookupError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from .model import Sleep
    from .ports import BlockResolver

log = getLogger(__name__)


async def pin_snapshot_blocks(
    chains: Sequence[str],
    resolver: BlockResolver,
    *,
    at: datetime | int | str | None = None,
    pause_seconds: float = 0.0,
    sleep: Sleep = asyncio.sleep,
) -> dict[str, int | None]:
    """Resolve the block every lookup on each chain will use for this run.

    With ``at`` unset the latest block is used. A chain whose block cannot be
    determined maps to ``None`` and is left out of the snapshot.
    """

    blocks: dict[str, int | None] = {}
    for index, chain in enumerate(chains):
        if index > 0 and pause_seconds > 0:
            await sleep(pause_seconds)
        try:
            if at is None:
                log.info("Fetching latest block for %s...", chain)
                block = await resolver.latest_block(chain)
            else:
                log.info("Fetching snapshot block for %s at %s...", chain, at)
                block = await resolver.block_for_timestamp(chain, at)
        except TransientLookupError as exc:
            log.error("Could not determine snapshot block for %s: %s", chain, exc)
            blocks[chain] = None
            continue
        blocks[chain] = block
        log.info("Chain: %s | Snapshot block: %s", chain, block)
    return blocks
