"""Application configuration helpers."""

from __future__ import annotations

from .chains import CHAIN_NAMES, ZERO_ADDRESS, ChainConfig, get_chain_configs, require_rpc
from .collections import (
    CollectionConfig,
    SolanaCollectionConfig,
    get_infinity_collection,
    get_panda_collection,
    get_solana_panda_collection,
)
from .env import env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .helius import HeliusConfig, get_helius_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .moralis import MoralisConfig, get_moralis_config
from .snapshot import SnapshotSettings, get_snapshot_settings, get_solana_snapshot_settings
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CHAIN_NAMES",
    "ZERO_ADDRESS",
    "CacheConfig",
    "ChainConfig",
    "CollectionConfig",
    "ConfigurationError",
    "HeliusConfig",
    "MissingConfigurationError",
    "MoralisConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SnapshotSettings",
    "SolanaCollectionConfig",
    "StorageConfig",
    "configure_logging",
    "env_int",
    "get_chain_configs",
    "get_helius_config",
    "get_infinity_collection",
    "get_moralis_config",
    "get_panda_collection",
    "get_snapshot_settings",
    "get_solana_panda_collection",
    "get_solana_snapshot_settings",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
    "require_rpc",
]
