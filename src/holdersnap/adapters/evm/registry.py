"""Per-run registry of EVM RPC clients keyed by chain name."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from holdersnap.config.errors import MissingConfigurationError

from .client import EvmRpcClient

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from holdersnap.adapters.http_resilience import ClientFactory
    from holdersnap.config.chains import ChainConfig

log = getLogger(__name__)


class ChainClientRegistry:
    """Owns one lazily created :class:`EvmRpcClient` per chain for the length of a run.

    Chains are kept in the order given; chains without an RPC URL are remembered
    so callers can report them, but no client is ever built for them.
    """

    def __init__(
        self,
        chains: Iterable[ChainConfig],
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._chains = {chain.name: chain for chain in chains}
        self._client_factory = client_factory
        self._clients: dict[str, EvmRpcClient] = {}

    @property
    def chains(self) -> tuple[ChainConfig, ...]:
        return tuple(self._chains.values())

    @property
    def available(self) -> tuple[str, ...]:
        return tuple(name for name, chain in self._chains.items() if chain.has_rpc)

    @property
    def missing(self) -> tuple[str, ...]:
        return tuple(name for name, chain in self._chains.items() if not chain.has_rpc)

    def config(self, name: str) -> ChainConfig:
        try:
            return self._chains[name]
        except KeyError as exc:
            raise KeyError(f"Chain {name} is not part of this run") from exc

    def get(self, name: str) -> EvmRpcClient:
        client = self._clients.get(name)
        if client is not None:
            return client
        chain = self.config(name)
        if not chain.has_rpc:
            raise MissingConfigurationError(f"Missing configuration for: {chain.rpc_env}")
        client = EvmRpcClient(chain, client_factory=self._client_factory)
        self._clients[name] = client
        log.debug("Created RPC client for %s", name)
        return client

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()

    async def __aenter__(self) -> ChainClientRegistry:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
