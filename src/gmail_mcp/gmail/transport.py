"""HTTP transport capability shared by the token manager and request pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol

import httpx

from gmail_mcp.config import DEFAULT_TIMEOUT
from gmail_mcp.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers (lower-cased names) and text of one HTTP exchange."""

    status: int
    text: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")


class Transport(Protocol):
    """Performs a single HTTP exchange."""

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        content: str | bytes | None = None,
    ) -> TransportResponse:
        ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    Args:
        timeout: Per-exchange deadline in seconds.
        client: Optional pre-built client. When supplied the caller keeps
            ownership and ``aclose`` leaves it open.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        content: str | bytes | None = None,
    ) -> TransportResponse:
        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(
                method, url, headers=dict(headers), content=content,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {url} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        return TransportResponse(
            status=response.status_code,
            text=response.text,
            headers={k.lower(): v for k, v in response.headers.items()},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
