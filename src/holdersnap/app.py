"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import date
from logging import getLogger
from typing import TYPE_CHECKING

from holdersnap.adapters.blocks import SnapshotBlockResolver
from holdersnap.adapters.csv_sink import CsvSink, read_mint_table
from holdersnap.adapters.evm import ChainClientRegistry
from holdersnap.adapters.helius import HeliusClient
from holdersnap.adapters.moralis import MoralisBlockClient
from holdersnap.config import (
    MissingConfigurationError,
    get_chain_configs,
    get_helius_config,
    get_infinity_collection,
    get_moralis_config,
    get_panda_collection,
    get_snapshot_settings,
    get_solana_panda_collection,
    get_solana_snapshot_settings,
    get_storage_config,
    require_rpc,
)
from holdersnap.config.helius import SOLANA_NULL_OWNERS
from holdersnap.domain.batching import BatchResolver
from holdersnap.domain.blocks import pin_snapshot_blocks
from holdersnap.domain.dispatcher import ChainLane, CrossChainDispatcher
from holdersnap.domain.errors import SnapshotError, TransientLookupError
from holdersnap.domain.fetcher import IndexerOwnerFetcher
from holdersnap.domain.lookups import EvmOwnerLookup, MintOwnerLookup
from holdersnap.domain.rate_gate import RateGate
from holdersnap.domain.reconciliation import PassPolicy, ReconciliationEngine
from holdersnap.domain.report import (
    COLUMNS,
    SnapshotStats,
    build_rows,
    output_filename,
    output_prefix,
    summarize,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from pathlib import Path

    from holdersnap.adapters.http_resilience import ClientFactory
    from holdersnap.config import (
        CollectionConfig,
        HeliusConfig,
        SnapshotSettings,
        SolanaCollectionConfig,
        StorageConfig,
    )
    from holdersnap.domain.model import Sleep
    from holdersnap.domain.ports import BlockResolver, GroupResolver, TabularSink
    from holdersnap.domain.reconciliation import ReconciliationResult

log = getLogger(__name__)


@dataclass(slots=True)
class SnapshotSummary:
    """What a finished snapshot run produced."""

    collection: str
    output_file: Path
    stats: SnapshotStats
    blocks: dict[str, int | None] = field(default_factory=dict)
    unresolved: tuple[int, ...] = ()


def pass_policy(settings: SnapshotSettings) -> PassPolicy:
    return PassPolicy(
        batch_size=settings.batch_size,
        group_delay_seconds=settings.retry_delay_seconds,
    )


async def snapshot_evm_collection(
    collection: CollectionConfig,
    *,
    registry: ChainClientRegistry,
    block_resolver: BlockResolver,
    settings: SnapshotSettings,
    storage: StorageConfig,
    sink: TabularSink,
    at: datetime | int | str | None = None,
    today: date | None = None,
    sleep: Sleep = asyncio.sleep,
) -> SnapshotSummary:
    """Snapshot an EVM collection on one or more chains and write its CSV report."""

    started = time.monotonic()
    if registry.missing:
        log.warning(
            "Missing RPC URLs for chains: %s. These chains will be skipped.",
            ", ".join(registry.missing),
        )
    if not registry.available:
        raise MissingConfigurationError(
            "Missing configuration for: " + ", ".join(chain.rpc_env for chain in registry.chains)
        )

    blocks = await pin_snapshot_blocks(
        registry.available,
        block_resolver,
        at=at,
        pause_seconds=settings.retry_delay_seconds,
        sleep=sleep,
    )
    for name in registry.missing:
        blocks.setdefault(name, None)

    lanes = [
        ChainLane(
            name=chain.name,
            block=blocks.get(chain.name),
            resolver=_chain_resolver(collection, registry, chain.name, blocks, settings, sleep),
        )
        for chain in registry.chains
    ]

    resolver: GroupResolver
    if collection.is_multichain:
        resolver = CrossChainDispatcher(lanes, sleep=sleep)
    else:
        lane = lanes[0]
        if lane.resolver is None:
            raise SnapshotError(f"No snapshot block available for {lane.name}")
        resolver = lane.resolver

    log.info(
        "Starting %s snapshot: %s tokens on %s",
        collection.label,
        collection.total_supply,
        ", ".join(name for name, block in blocks.items() if block is not None),
    )
    engine = ReconciliationEngine(resolver=resolver, policy=pass_policy(settings), sleep=sleep)
    result = await engine.run(collection.token_ids)

    return _write_report(
        collection.label,
        result,
        total=collection.total_supply,
        chain_order=collection.chains,
        blocks=blocks,
        storage=storage,
        sink=sink,
        today=today,
        started=started,
    )


def _chain_resolver(
    collection: CollectionConfig,
    registry: ChainClientRegistry,
    name: str,
    blocks: dict[str, int | None],
    settings: SnapshotSettings,
    sleep: Sleep,
) -> BatchResolver | None:
    """Bind one chain to its pinned block; each chain endpoint gets its own rate gate."""
    block = blocks.get(name)
    if block is None:
        return None
    chain = registry.config(name)
    lookup = EvmOwnerLookup(
        client=registry.get(name),
        contract_address=collection.contract_address,
        block=block,
        gate=RateGate(
            settings.max_concurrent,
            poll_interval=settings.poll_interval_seconds,
            sleep=sleep,
        ),
    )
    return BatchResolver(
        lookup=lookup,
        block=block,
        chain=name,
        null_owners=chain.null_owners,
        sleep=sleep,
    )


async def snapshot_solana_collection(
    collection: SolanaCollectionConfig,
    *,
    indexer: HeliusClient,
    helius: HeliusConfig,
    settings: SnapshotSettings,
    storage: StorageConfig,
    sink: TabularSink,
    today: date | None = None,
    sleep: Sleep = asyncio.sleep,
) -> SnapshotSummary:
    """Resolve the owner of every mint listed in the collection's input CSV."""

    started = time.monotonic()
    mints = read_mint_table(
        collection.input_file,
        token_id_column=collection.token_id_column,
        mint_column=collection.mint_column,
    )
    log.info("Processing %s %s NFTs with valid token IDs", len(mints), collection.label)

    try:
        slot = await indexer.current_slot()
    except TransientLookupError as exc:
        raise SnapshotError(f"Could not determine current Solana slot: {exc}") from exc
    log.info("Chain: solana | Snapshot slot: %s", slot)

    gate = RateGate(
        settings.max_concurrent,
        poll_interval=settings.poll_interval_seconds,
        sleep=sleep,
    )
    fetcher = IndexerOwnerFetcher(
        indexer=indexer,
        gate=gate,
        max_retries=helius.max_retries,
        retry_base_seconds=helius.retry_base_seconds,
        hop_delay_seconds=helius.hop_delay_seconds,
        sleep=sleep,
    )
    resolver = BatchResolver(
        lookup=MintOwnerLookup(fetcher=fetcher, mints=mints),
        block=slot,
        chain="solana",
        null_owners=SOLANA_NULL_OWNERS,
        sleep=sleep,
    )
    engine = ReconciliationEngine(resolver=resolver, policy=pass_policy(settings), sleep=sleep)
    result = await engine.run(sorted(mints))

    return _write_report(
        collection.label,
        result,
        total=len(mints),
        chain_order=("solana",),
        blocks={"solana": slot},
        storage=storage,
        sink=sink,
        today=today,
        started=started,
    )


def _write_report(
    label: str,
    result: ReconciliationResult,
    *,
    total: int,
    chain_order: Sequence[str],
    blocks: dict[str, int | None],
    storage: StorageConfig,
    sink: TabularSink,
    today: date | None,
    started: float,
) -> SnapshotSummary:
    output_dir = storage.ensure_output_dir()
    sink.remove_stale(output_dir, output_prefix(label))
    output_file = output_dir / output_filename(label, today or date.today())
    sink.write_rows(output_file, build_rows(result.records), COLUMNS)

    stats = summarize(
        result.records,
        total=total,
        runtime_seconds=time.monotonic() - started,
        chain_order=chain_order,
    )
    summary = SnapshotSummary(
        collection=label,
        output_file=output_file,
        stats=stats,
        blocks=blocks,
        unresolved=result.unresolved,
    )
    log_summary(summary)
    return summary


def log_summary(summary: SnapshotSummary) -> None:
    stats = summary.stats
    log.info("=== %s Snapshot Summary ===", summary.collection)
    log.info("- Total Supply: %s", stats.total)
    log.info("- Tokens Found: %s", stats.found)
    log.info("- Tokens Not Found: %s", stats.missing)
    log.info("- Success Rate: %.2f%%", stats.success_rate)
    log.info("- Total unique wallets: %s", stats.unique_wallets)
    log.info("- Average tokens per wallet: %.2f", stats.average_per_wallet)
    log.info("- Total Runtime: %.2f minutes", stats.runtime_minutes)
    if stats.chain_distribution:
        log.info("Chain Distribution:")
        for chain, count in stats.chain_distribution.items():
            log.info("- %s: %s tokens", chain, count)
    if stats.top_holders:
        log.info("Top %s Holders:", len(stats.top_holders))
        for index, holder in enumerate(stats.top_holders, start=1):
            log.info("%s. %s: %s tokens", index, holder.address, holder.count)
    log.info("Completed! Results saved to %s", summary.output_file)


async def _run_evm(
    collection: CollectionConfig,
    *,
    require_all_rpcs: bool,
    at: datetime | int | str | None,
    settings: SnapshotSettings,
    storage: StorageConfig,
    client_factory: ClientFactory | None,
    today: date | None,
) -> SnapshotSummary:
    chains = get_chain_configs(collection.chains)
    if require_all_rpcs:
        chains = tuple(require_rpc(chain) for chain in chains)
    moralis_config = get_moralis_config()

    async with (
        ChainClientRegistry(chains, client_factory=client_factory) as registry,
        MoralisBlockClient(config=moralis_config, client_factory=client_factory) as moralis,
    ):
        return await snapshot_evm_collection(
            collection,
            registry=registry,
            block_resolver=SnapshotBlockResolver(registry, moralis=moralis),
            settings=settings,
            storage=storage,
            sink=CsvSink(),
            at=at,
            today=today,
        )


def run_infinity_snapshot(
    *,
    at: datetime | int | str | None = None,
    batch_size: int | None = None,
    output_dir: Path | None = None,
    client_factory: ClientFactory | None = None,
    today: date | None = None,
) -> SnapshotSummary:
    """Snapshot the Ethereum-only Infinity collection."""

    log.info("Starting Infinity NFT holders snapshot")
    return asyncio.run(
        _run_evm(
            get_infinity_collection(),
            require_all_rpcs=True,
            at=at,
            settings=get_snapshot_settings().with_batch_size(batch_size),
            storage=get_storage_config(output_dir=output_dir),
            client_factory=client_factory,
            today=today,
        )
    )


def run_panda_snapshot(
    *,
    at: datetime | int | str | None = None,
    batch_size: int | None = None,
    output_dir: Path | None = None,
    client_factory: ClientFactory | None = None,
    today: date | None = None,
) -> SnapshotSummary:
    """Snapshot the multi-chain Panda collection; chains without an RPC URL are skipped."""

    log.info("Starting multi-chain Panda holders snapshot")
    return asyncio.run(
        _run_evm(
            get_panda_collection(),
            require_all_rpcs=False,
            at=at,
            settings=get_snapshot_settings().with_batch_size(batch_size),
            storage=get_storage_config(output_dir=output_dir),
            client_factory=client_factory,
            today=today,
        )
    )


async def _run_solana(
    collection: SolanaCollectionConfig,
    *,
    settings: SnapshotSettings,
    storage: StorageConfig,
    client_factory: ClientFactory | None,
    today: date | None,
) -> SnapshotSummary:
    helius = get_helius_config()
    if not collection.input_file.exists():
        raise FileNotFoundError(f"Input file not found: {collection.input_file}")
    async with HeliusClient(config=helius, client_factory=client_factory) as indexer:
        return await snapshot_solana_collection(
            collection,
            indexer=indexer,
            helius=helius,
            settings=settings,
            storage=storage,
            sink=CsvSink(),
            today=today,
        )


def run_solana_snapshot(
    *,
    input_file: Path | None = None,
    batch_size: int | None = None,
    output_dir: Path | None = None,
    client_factory: ClientFactory | None = None,
    today: date | None = None,
) -> SnapshotSummary:
    """Snapshot the Solana Panda collection from its earnings CSV."""

    log.info("Starting Solana Panda NFT ownership fetch")
    return asyncio.run(
        _run_solana(
            get_solana_panda_collection(input_file=input_file),
            settings=get_solana_snapshot_settings().with_batch_size(batch_size),
            storage=get_storage_config(output_dir=output_dir),
            client_factory=client_factory,
            today=today,
        )
    )


def run_all_snapshots(
    *,
    output_dir: Path | None = None,
    input_file: Path | None = None,
    client_factory: ClientFactory | None = None,
    today: date | None = None,
) -> dict[str, SnapshotSummary | Exception]:
    """Run every collection in turn; one collection failing does not stop the others."""

    runs = (
        ("infinity", lambda: run_infinity_snapshot(
            output_dir=output_dir, client_factory=client_factory, today=today
        )),
        ("panda", lambda: run_panda_snapshot(
            output_dir=output_dir, client_factory=client_factory, today=today
        )),
        ("solana", lambda: run_solana_snapshot(
            input_file=input_file,
            output_dir=output_dir,
            client_factory=client_factory,
            today=today,
        )),
    )

    outcomes: dict[str, SnapshotSummary | Exception] = {}
    for step, (name, run) in enumerate(runs, start=1):
        log.info("STEP %s/%s: %s snapshot", step, len(runs), name)
        try:
            outcomes[name] = run()
        except Exception as exc:  # noqa: BLE001
            log.error("%s snapshot failed: %s", name, exc)
            outcomes[name] = exc

    for name, outcome in outcomes.items():
        if isinstance(outcome, Exception):
            log.info("%s: FAILED - %s", name.upper(), outcome)
        else:
            log.info(
                "%s: SUCCESS - %s (found %s/%s, %.2f%%, %.2f minutes)",
                name.upper(),
                outcome.output_file,
                outcome.stats.found,
                outcome.stats.total,
                outcome.stats.success_rate,
                outcome.stats.runtime_minutes,
            )
    return outcomes
