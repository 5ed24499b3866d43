"""Public interface for the Moralis block-lookup adapter."""

from __future__ import annotations

from .client import BlockResolutionError, MoralisBlockClient, format_snapshot_time
from .schema import DateToBlockResponse

__all__ = [
    "BlockResolutionError",
    "DateToBlockResponse",
    "MoralisBlockClient",
    "format_snapshot_time",
]
