"""EVM chain definitions and RPC endpoint configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .env import optional_env_var
from .errors import MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy

ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"
EVM_RPC_TIMEOUT_SECONDS: Final[float] = 30.0


@dataclass(frozen=True, slots=True)
class ChainConfig:
    """Static description of one EVM chain plus its configured RPC endpoint."""

    name: str
    chain_id: int
    rpc_env: str
    moralis_chain: str
    rpc_url: str | None = None
    null_owners: frozenset[str] = field(default_factory=lambda: frozenset({ZERO_ADDRESS}))

    @property
    def has_rpc(self) -> bool:
        return bool(self.rpc_url)

    def resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name=f"rpc:{self.name}",
            timeout_seconds=EVM_RPC_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            default_headers={"Content-Type": "application/json"},
        )


# Configuration order doubles as the cross-chain tie-break order.
_CHAIN_TABLE: Final[tuple[tuple[str, int, str, str], ...]] = (
    ("ethereum", 1, "ETH_RPC_URL", "eth"),
    ("arbitrum", 42161, "ARBITRUM_RPC_URL", "arbitrum"),
    ("optimism", 10, "OPTIMISM_RPC_URL", "optimism"),
    ("bsc", 56, "BSC_RPC_URL", "bsc"),
    ("polygon", 137, "POLYGON_RPC_URL", "polygon"),
    ("fantom", 250, "FANTOM_RPC_URL", "fantom"),
    ("avalanche", 43114, "AVALANCHE_RPC_URL", "avalanche"),
)

CHAIN_NAMES: Final[tuple[str, ...]] = tuple(entry[0] for entry in _CHAIN_TABLE)


def get_chain_configs(names: tuple[str, ...] = CHAIN_NAMES) -> tuple[ChainConfig, ...]:
    """Return chain configs in the requested order, reading RPC URLs from the environment."""

    by_name = {entry[0]: entry for entry in _CHAIN_TABLE}
    configs: list[ChainConfig] = []
    for name in names:
        try:
            _, chain_id, rpc_env, moralis_chain = by_name[name]
        except KeyError as exc:
            raise ValueError(f"Unknown chain: {name}") from exc
        configs.append(
            ChainConfig(
                name=name,
                chain_id=chain_id,
                rpc_env=rpc_env,
                moralis_chain=moralis_chain,
                rpc_url=optional_env_var(rpc_env),
            )
        )
    return tuple(configs)


def require_rpc(chain: ChainConfig) -> ChainConfig:
    if not chain.has_rpc:
        raise MissingConfigurationError(f"Missing configuration for: {chain.rpc_env}")
    return chain
