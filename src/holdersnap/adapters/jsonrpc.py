"""Pydantic models for JSON-RPC 2.0 envelopes shared by the EVM and Solana adapters."""

from __future__ import annotations

from itertools import count
from typing import Any

from pydantic import BaseModel, ConfigDict

_request_ids = count(1)


class JsonRpcBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class JsonRpcErrorPayload(JsonRpcBaseModel):
    code: int
    message: str
    data: Any = None


class JsonRpcResponse(JsonRpcBaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: Any = None
    error: JsonRpcErrorPayload | None = None


def build_request(method: str, params: list[object]) -> dict[str, object]:
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": method,
        "params": params,
    }
