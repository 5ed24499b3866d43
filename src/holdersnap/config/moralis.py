"""Moralis block-lookup configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

MORALIS_BASE_URL = "https://deep-index.moralis.io/api/v2.2"


@dataclass(frozen=True, slots=True)
class MoralisConfig:
    api_key: str
    resilience: ResilienceConfig


def get_moralis_config(*, resilience: ResilienceConfig | None = None) -> MoralisConfig:
    values = require_env_vars(("MORALIS_API_KEY",))
    api_key = values["MORALIS_API_KEY"]
    return MoralisConfig(
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="moralis",
            base_url=MORALIS_BASE_URL,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            retry=RetryPolicy(total=3, status_forcelist=frozenset({429, 500, 502, 503, 504})),
            cache=CacheConfig(),
            default_headers={"X-API-Key": api_key, "Accept": "application/json"},
        ),
    )
