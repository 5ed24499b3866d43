"""Known NFT collections and their snapshot parameters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .chains import CHAIN_NAMES
from .env import env_int, optional_env_var

INFINITY_CONTRACT: Final[str] = "0x7Db7A0f8971C5d57F1ee44657B447D5D053B6bAE"
INFINITY_SUPPLY: Final[int] = 250
PANDA_CONTRACT: Final[str] = "0xaCF63E56fd08970b43401492a02F6F38B6635C91"
PANDA_SUPPLY: Final[int] = 9000
SOLANA_PANDA_INPUT: Final[str] = "Solana Panda Earnings.csv"


@dataclass(frozen=True, slots=True)
class CollectionConfig:
    """An EVM collection with a dense token range ``1..total_supply``."""

    key: str
    label: str
    contract_address: str
    total_supply: int
    chains: tuple[str, ...]

    @property
    def token_ids(self) -> range:
        return range(1, self.total_supply + 1)

    @property
    def is_multichain(self) -> bool:
        return len(self.chains) > 1


@dataclass(frozen=True, slots=True)
class SolanaCollectionConfig:
    """A Solana collection whose mint addresses come from an input CSV."""

    key: str
    label: str
    input_file: Path
    token_id_column: str = "IntTokenId"
    mint_column: str = "SolanaTokenId"


def get_infinity_collection() -> CollectionConfig:
    return CollectionConfig(
        key="infinity",
        label="Infinity",
        contract_address=INFINITY_CONTRACT,
        total_supply=INFINITY_SUPPLY,
        chains=("ethereum",),
    )


def get_panda_collection() -> CollectionConfig:
    return CollectionConfig(
        key="panda",
        label="Panda",
        contract_address=optional_env_var("CONTRACT_ADDRESS") or PANDA_CONTRACT,
        total_supply=env_int("TOTAL_SUPPLY", PANDA_SUPPLY),
        chains=CHAIN_NAMES,
    )


def get_solana_panda_collection(*, input_file: Path | None = None) -> SolanaCollectionConfig:
    return SolanaCollectionConfig(
        key="solana-panda",
        label="Solana Panda",
        input_file=input_file or Path(SOLANA_PANDA_INPUT),
    )
