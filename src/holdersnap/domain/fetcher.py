"""Single-item owner resolution against a Solana indexer."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import RateLimitedError, TransientLookupError

if TYPE_CHECKING:
    from .model import Sleep
    from .ports import IndexerClient
    from .rate_gate import RateGate

log = getLogger(__name__)


@dataclass(slots=True)
class IndexerOwnerFetcher:
    """Resolve a mint to its owning wallet in two hops with bounded retries.

    Each attempt asks the indexer for the largest token accounts of the mint, picks
    the first account with a positive balance, then asks for that account's owner.
    Both round trips hold a slot on ``gate``. Every failure mode ends in ``None``.
    """

    indexer: IndexerClient
    gate: RateGate
    max_retries: int = 5
    retry_base_seconds: float = 2.0
    hop_delay_seconds: float = 0.2
    sleep: Sleep = field(default=asyncio.sleep)

    async def fetch_owner(self, mint_address: str | None) -> str | None:
        if mint_address is None or not mint_address.strip():
            log.warning("Skipping empty mint address")
            return None
        mint = mint_address.strip()

        delay = 0.0
        for attempt in range(self.max_retries):
            if attempt > 0:
                await self.sleep(delay)
            # backoff before the next attempt (n = attempt + 1) unless a 429 says otherwise
            delay = self.retry_base_seconds * (attempt + 1)
            label = f"attempt {attempt + 1}/{self.max_retries}"
            try:
                owner = await self._resolve_once(mint, label)
            except RateLimitedError:
                delay = self.retry_base_seconds * (attempt + 2)
                log.warning("Rate limited on mint %s (%s), waiting %.2fs", mint, label, delay)
                continue
            except TransientLookupError as exc:
                log.warning("Error processing mint %s (%s): %s", mint, label, exc)
                continue
            if owner is not None:
                log.debug("Found owner %s for mint %s", owner, mint)
                return owner

        log.error("Failed to get owner for mint %s after %s attempts", mint, self.max_retries)
        return None

    async def _resolve_once(self, mint: str, label: str) -> str | None:
        async with self.gate:
            accounts = await self.indexer.largest_holding_accounts(mint)

        active = [account for account in accounts if account.amount > 0]
        if not active:
            log.warning("No active accounts for mint %s (%s)", mint, label)
            return None

        if self.hop_delay_seconds > 0:
            await self.sleep(self.hop_delay_seconds)

        token_account = active[0].address
        async with self.gate:
            owner = await self.indexer.account_owner(token_account)
        if owner is None:
            log.warning("Unexpected data for token account %s (%s)", token_account, label)
        return owner
