from __future__ import annotations

import asyncio

import pytest

from holdersnap.domain.dispatcher import ChainLane, CrossChainDispatcher
from holdersnap.domain.errors import SnapshotError
from tests.helpers.fakes import RecordingSleep, ScriptedResolver


def _lane(name: str, found_from: dict[int, int], *, block: int | None = 1) -> ChainLane:
    return ChainLane(
        name=name,
        block=block,
        resolver=ScriptedResolver(found_from=found_from, owner=f"0x{name}-", chain=name, block=block or 0),
    )


def test_first_lane_wins_when_several_chains_report_an_owner() -> None:
    dispatcher = CrossChainDispatcher(
        [_lane("ethereum", {1: 1}), _lane("polygon", {1: 1, 2: 1})],
        sleep=RecordingSleep(),
    )

    results = asyncio.run(dispatcher.resolve_group([1, 2]))

    assert [(result.token_id, result.chain) for result in results] == [(1, "ethereum"), (2, "polygon")]
    assert results[0].owner == "0xethereum-1"


def test_token_missing_everywhere_reports_no_owner() -> None:
    dispatcher = CrossChainDispatcher([_lane("ethereum", {}), _lane("bsc", {})], sleep=RecordingSleep())

    results = asyncio.run(dispatcher.resolve_group([5]))

    assert not results[0].found


def test_lanes_without_block_are_skipped() -> None:
    skipped = _lane("arbitrum", {1: 1}, block=None)
    dispatcher = CrossChainDispatcher([skipped, _lane("optimism", {})], sleep=RecordingSleep())

    results = asyncio.run(dispatcher.resolve_group([1]))

    assert dispatcher.chains == ("optimism",)
    assert not results[0].found
    assert skipped.resolver is not None
    assert skipped.resolver.groups == []  # type: ignore[attr-defined]


def test_no_eligible_lane_is_an_error() -> None:
    with pytest.raises(SnapshotError):
        CrossChainDispatcher([ChainLane(name="fantom", block=None, resolver=None)])


def test_attempts_retry_the_whole_fan_out_for_missing_tokens() -> None:
    ethereum = _lane("ethereum", {})
    polygon = _lane("polygon", {2: 2})
    sleep = RecordingSleep()
    dispatcher = CrossChainDispatcher([ethereum, polygon], attempt_backoff_seconds=1.0, sleep=sleep)

    results = asyncio.run(dispatcher.resolve_group([1, 2], attempts=3))

    assert results[1].chain == "polygon"
    assert not results[0].found
    assert ethereum.resolver.groups == [([1, 2], 1), ([1, 2], 1), ([1], 1)]  # type: ignore[union-attr]
    assert sleep.calls == [1.0, 2.0]
