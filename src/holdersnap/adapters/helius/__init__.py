"""Public interface for the Helius (Solana RPC) adapter."""

from __future__ import annotations

from .client import (
    HeliusClient,
    IndexerError,
    IndexerPayloadError,
    IndexerRateLimitedError,
)
from .schema import AccountInfoValue, TokenAmountAccount

__all__ = [
    "AccountInfoValue",
    "HeliusClient",
    "IndexerError",
    "IndexerPayloadError",
    "IndexerRateLimitedError",
    "TokenAmountAccount",
]
