from __future__ import annotations

import pytest

_SNAPSHOT_ENV = (
    "ETH_RPC_URL",
    "ARBITRUM_RPC_URL",
    "OPTIMISM_RPC_URL",
    "BSC_RPC_URL",
    "POLYGON_RPC_URL",
    "FANTOM_RPC_URL",
    "AVALANCHE_RPC_URL",
    "MORALIS_API_KEY",
    "HELIUS_API_KEY",
    "CONTRACT_ADDRESS",
    "TOTAL_SUPPLY",
    "BATCH_SIZE",
    "MAX_CONCURRENT",
    "RETRY_DELAY",
    "HOLDERSNAP_OUTPUT_DIR",
)


@pytest.fixture(autouse=True)
def clean_snapshot_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SNAPSHOT_ENV:
        monkeypatch.delenv(name, raising=False)
