"""Ports for the external collaborators of a snapshot run."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime
    from pathlib import Path

    from .model import HoldingAccount, LookupResult


@runtime_checkable
class ChainRpcClient(Protocol):
    """Owner-of-token queries against one EVM chain."""

    async def owner_of(self, contract_address: str, token_id: int, block: int) -> str: ...

    async def latest_block(self) -> int: ...


class BlockResolver(Protocol):
    async def block_for_timestamp(self, chain: str, when: datetime | int | str) -> int: ...

    async def latest_block(self, chain: str) -> int: ...


@runtime_checkable
class IndexerClient(Protocol):
    """Solana account lookups used to resolve the owner of a mint."""

    async def largest_holding_accounts(self, mint_address: str) -> list[HoldingAccount]: ...

    async def account_owner(self, account_address: str) -> str | None: ...


class OwnerLookup(Protocol):
    """Resolve a single token id to an owner address or ``None``."""

    async def __call__(self, token_id: int) -> str | None: ...


class GroupResolver(Protocol):
    """Resolve one group of token ids with join-all semantics."""

    async def resolve_group(
        self,
        token_ids: Sequence[int],
        *,
        attempts: int = 1,
    ) -> list[LookupResult]: ...


class TabularSink(Protocol):
    def write_rows(
        self,
        path: Path,
        rows: Sequence[Mapping[str, object]],
        columns: Sequence[str],
    ) -> Path: ...

    def remove_stale(self, directory: Path, prefix: str) -> list[Path]: ...
