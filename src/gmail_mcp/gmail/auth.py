"""OAuth2 bearer-token manager using the refresh-token grant."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlencode

from gmail_mcp.config import GOOGLE_TOKEN_URL, Credential
from gmail_mcp.exceptions import TokenRefreshError
from gmail_mcp.gmail.transport import Transport

logger = logging.getLogger(__name__)

# Tokens are treated as expired this long before the server says they are.
EXPIRY_SKEW_SECONDS = 60


@dataclass(frozen=True)
class CachedToken:
    """An access token, valid strictly before ``expires_at_ms``."""

    value: str
    expires_at_ms: int

    def is_valid(self, now_ms: int) -> bool:
        return now_ms < self.expires_at_ms


class CredentialManager:
    """Hands out a currently-valid access token, refreshing on demand.

    Concurrent callers that find the cache empty or expired share a single
    in-flight refresh; reads of a valid token never wait.

    Args:
        credential: The refresh credential for one account.
        transport: HTTP transport used for the token exchange.
        token_url: Token-issuance endpoint.
        clock: Returns the current time in seconds since the epoch.
    """

    def __init__(
        self,
        credential: Credential,
        transport: Transport,
        token_url: str = GOOGLE_TOKEN_URL,
        clock: Callable[[], float] = time.time,
    ):
        self.credential = credential
        self.token_url = token_url
        self._transport = transport
        self._clock = clock
        self._cached: CachedToken | None = None
        self._refresh_task: asyncio.Future[str] | None = None

    @property
    def cached_token(self) -> CachedToken | None:
        return self._cached

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def get_token(self) -> str:
        """Return a valid access token, refreshing it first if needed."""
        cached = self._cached
        if cached is not None and cached.is_valid(self._now_ms()):
            return cached.value

        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._refresh())
            task.add_done_callback(self._refresh_finished)
            self._refresh_task = task
        # A cancelled waiter must not cancel the refresh shared with others.
        return await asyncio.shield(task)

    def invalidate(self) -> None:
        """Drop the cached token so the next read refreshes."""
        self._cached = None

    def _refresh_finished(self, task: asyncio.Future[str]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        if not task.cancelled():
            # Mark the outcome retrieved even if every waiter went away.
            task.exception()

    async def _refresh(self) -> str:
        form = urlencode({
            "client_id": self.credential.client_id,
            "client_secret": self.credential.client_secret,
            "refresh_token": self.credential.refresh_token,
            "grant_type": "refresh_token",
        })
        logger.info("Refreshing Gmail access token")
        response = await self._transport.send(
            "POST",
            self.token_url,
            {"Content-Type": "application/x-www-form-urlencoded"},
            form,
        )
        if not response.ok:
            logger.warning(f"Token refresh rejected with status {response.status}")
            raise TokenRefreshError(response.status, response.text)

        try:
            payload = json.loads(response.text)
            access_token = payload["access_token"]
            expires_in = int(payload["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            raise TokenRefreshError(response.status, response.text) from e
        if not isinstance(access_token, str) or not access_token:
            raise TokenRefreshError(response.status, response.text)

        expires_at_ms = self._now_ms() + (expires_in - EXPIRY_SKEW_SECONDS) * 1000
        self._cached = CachedToken(value=access_token, expires_at_ms=expires_at_ms)
        logger.info(f"Access token refreshed, valid for {expires_in - EXPIRY_SKEW_SECONDS}s")
        return access_token
