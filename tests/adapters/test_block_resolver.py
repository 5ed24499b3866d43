from __future__ import annotations

import asyncio

import httpx
import pytest

from holdersnap.adapters.blocks import SnapshotBlockResolver
from holdersnap.adapters.evm import ChainClientRegistry
from holdersnap.adapters.moralis import BlockResolutionError, MoralisBlockClient
from holdersnap.config import get_chain_configs, get_moralis_config
from tests.helpers.fakes import make_client_factory


def test_timestamp_uses_moralis_chain_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MORALIS_API_KEY", "key")
    monkeypatch.setenv("BSC_RPC_URL", "https://bsc.example")
    chains: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        chains.append(request.url.params["chain"])
        return httpx.Response(200, json={"block": 42})

    async def scenario() -> int:
        factory = make_client_factory(handler)
        async with (
            ChainClientRegistry(get_chain_configs(("bsc",)), client_factory=factory) as registry,
            MoralisBlockClient(config=get_moralis_config(), client_factory=factory) as moralis,
        ):
            resolver = SnapshotBlockResolver(registry, moralis=moralis)
            return await resolver.block_for_timestamp("bsc", 1704067200)

    assert asyncio.run(scenario()) == 42
    assert chains == ["bsc"]


def test_timestamp_without_moralis_is_a_resolution_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ETH_RPC_URL", "https://eth.example")
    resolver = SnapshotBlockResolver(ChainClientRegistry(get_chain_configs(("ethereum",))))

    with pytest.raises(BlockResolutionError):
        asyncio.run(resolver.block_for_timestamp("ethereum", 1))
