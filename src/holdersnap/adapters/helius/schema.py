"""Pydantic models for the Solana RPC results used to resolve mint owners."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SolanaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TokenAmountAccount(SolanaBaseModel):
    address: str
    amount: int
    decimals: int | None = None
    ui_amount_string: str | None = Field(default=None, alias="uiAmountString")

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int | str):
            raise ValueError(f"amount must be an integer or a numeric string, got {value!r}")
        return int(value)


class LargestAccountsResult(SolanaBaseModel):
    value: list[TokenAmountAccount]


class ParsedTokenInfo(SolanaBaseModel):
    owner: str | None = None
    mint: str | None = None


class ParsedAccountData(SolanaBaseModel):
    info: ParsedTokenInfo
    type: str | None = None


class AccountData(SolanaBaseModel):
    parsed: ParsedAccountData | None = None
    program: str | None = None


class AccountInfoValue(SolanaBaseModel):
    data: AccountData | list[str] | None = None
    owner: str | None = None
    lamports: int | None = None

    @property
    def token_owner(self) -> str | None:
        if isinstance(self.data, AccountData) and self.data.parsed is not None:
            return self.data.parsed.info.owner
        return None


class AccountInfoResult(SolanaBaseModel):
    value: AccountInfoValue | None = None
