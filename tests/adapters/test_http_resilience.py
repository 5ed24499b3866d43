from __future__ import annotations

import asyncio

import httpx
import pytest
from hishel.httpx import AsyncCacheClient

from holdersnap.adapters.http_resilience import ResilientClient, build_retry
from holdersnap.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy


def test_build_retry_copies_policy() -> None:
    retry = build_retry(RetryPolicy(total=4, backoff_factor=0.1))

    assert retry.total == 4
    assert retry.backoff_factor == pytest.approx(0.1)


def test_cache_config_selects_caching_client() -> None:
    cached = ResilientClient(ResilienceConfig(name="cached", cache=CacheConfig()))
    plain = ResilientClient(ResilienceConfig(name="plain", cache=CacheConfig(enabled=False)))

    assert isinstance(cached._client, AsyncCacheClient)  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    assert not isinstance(plain._client, AsyncCacheClient)  # noqa: SLF001  # type: ignore[reportPrivateUsage]

    async def close_both() -> None:
        await cached.aclose()
        await plain.aclose()

    asyncio.run(close_both())


def test_rate_limited_client_still_sends_requests() -> None:
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    async def scenario() -> list[int]:
        client = ResilientClient(
            ResilienceConfig(
                name="limited",
                base_url="https://api.example",
                ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            )
        )
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            transport=httpx.MockTransport(handler),
            base_url="https://api.example",
        )
        async with client:
            responses = [await client.get("/a"), await client.post("/b", json={})]
        return [response.status_code for response in responses]

    assert asyncio.run(scenario()) == [200, 200]
    assert seen == ["/a", "/b"]
