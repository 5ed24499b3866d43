"""Public interface for the EVM JSON-RPC adapter."""

from __future__ import annotations

from .client import EvmRpcClient, EvmRpcError, decode_address, encode_owner_of
from .registry import ChainClientRegistry

__all__ = [
    "ChainClientRegistry",
    "EvmRpcClient",
    "EvmRpcError",
    "decode_address",
    "encode_owner_of",
]
