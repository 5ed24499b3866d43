"""Pydantic models describing the Moralis ``dateToBlock`` payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DateToBlockResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    block: int
    date: str | None = None
    timestamp: int | None = None
    block_timestamp: str | None = None
    hash: str | None = None
    parent_hash: str | None = Field(default=None, alias="parentHash")

    @field_validator("block", "timestamp", mode="before")
    @classmethod
    def _parse_int(cls, value: object) -> int | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int | str):
            raise ValueError(f"expected an integer or a numeric string, got {value!r}")
        return int(value)
