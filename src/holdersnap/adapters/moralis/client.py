"""HTTP client resolving timestamps to block numbers through Moralis."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from holdersnap.adapters.http_resilience import ClientFactory, default_client_factory
from holdersnap.domain.errors import TransientLookupError

from .schema import DateToBlockResponse

if TYPE_CHECKING:
    from types import TracebackType

    from holdersnap.config.moralis import MoralisConfig

log = getLogger(__name__)


class BlockResolutionError(TransientLookupError):
    """Raised when Moralis cannot map a timestamp to a block."""


def format_snapshot_time(when: datetime | int | str) -> str:
    """Render ``when`` the way ``dateToBlock`` accepts it: unix seconds or a date string."""

    if isinstance(when, datetime):
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        return str(int(when.astimezone(UTC).timestamp()))
    if isinstance(when, int):
        return str(when)
    stripped = when.strip()
    if not stripped:
        raise ValueError("Snapshot time must not be blank")
    return stripped


class MoralisBlockClient:
    def __init__(
        self,
        *,
        config: MoralisConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client = (client_factory or default_client_factory)(self._resilience)

    async def __aenter__(self) -> MoralisBlockClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def date_to_block(self, moralis_chain: str, when: datetime | int | str) -> int:
        params = {"chain": moralis_chain, "date": format_snapshot_time(when)}
        try:
            response = await self._client.get("dateToBlock", params=params)
            response.raise_for_status()
            payload = DateToBlockResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            log.error(
                "Error fetching block for %s: HTTP %s %s",
                moralis_chain,
                exc.response.status_code,
                exc.response.text,
            )
            raise BlockResolutionError(
                f"Moralis returned HTTP {exc.response.status_code} for {moralis_chain}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BlockResolutionError(f"Moralis transport error for {moralis_chain}: {exc}") from exc
        except ValueError as exc:
            raise BlockResolutionError(f"Unexpected Moralis payload for {moralis_chain}") from exc
        return payload.block
