"""Helius (Solana RPC) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import NO_RETRY, ResilienceConfig

HELIUS_RPC_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={api_key}"
HELIUS_TIMEOUT_SECONDS = 60.0
HELIUS_USER_AGENT = "holdersnap/1.0"
SOLANA_NULL_OWNERS = frozenset({"11111111111111111111111111111111"})

# The owner fetcher owns retries for this endpoint, see domain.fetcher.
DEFAULT_MAX_RETRIES = 5
DEFAULT_RETRY_BASE_SECONDS = 2.0
DEFAULT_HOP_DELAY_SECONDS = 0.2


@dataclass(frozen=True, slots=True)
class HeliusConfig:
    api_key: str
    rpc_url: str
    resilience: ResilienceConfig
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_base_seconds: float = DEFAULT_RETRY_BASE_SECONDS
    hop_delay_seconds: float = DEFAULT_HOP_DELAY_SECONDS


def get_helius_config() -> HeliusConfig:
    values = require_env_vars(("HELIUS_API_KEY",))
    api_key = values["HELIUS_API_KEY"]
    rpc_url = HELIUS_RPC_TEMPLATE.format(api_key=api_key)
    return HeliusConfig(
        api_key=api_key,
        rpc_url=rpc_url,
        resilience=ResilienceConfig(
            name="helius",
            timeout_seconds=HELIUS_TIMEOUT_SECONDS,
            retry=NO_RETRY,
            default_headers={
                "Content-Type": "application/json",
                "User-Agent": HELIUS_USER_AGENT,
            },
        ),
    )
