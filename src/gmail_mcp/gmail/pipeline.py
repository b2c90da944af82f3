"""Authenticated request pipeline for the Gmail REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from gmail_mcp.config import GMAIL_API_BASE
from gmail_mcp.exceptions import ApiError
from gmail_mcp.gmail.auth import CredentialManager
from gmail_mcp.gmail.transport import Transport

logger = logging.getLogger(__name__)


class RequestPipeline:
    """Performs one authenticated HTTP exchange and normalizes the result.

    There is no retry: each call makes exactly one attempt and any failure
    propagates to the caller.

    Args:
        credentials: Token manager supplying the bearer token.
        transport: HTTP transport for the API call.
        base_url: Versioned API base that every path is relative to.
    """

    def __init__(
        self,
        credentials: CredentialManager,
        transport: Transport,
        base_url: str = GMAIL_API_BASE,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def execute(
        self,
        path: str,
        method: str = "GET",
        body: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send ``body`` verbatim to ``path`` and return the decoded JSON.

        Returns an empty dict when the response is not JSON.

        Raises:
            ApiError: The API answered with a non-success status.
        """
        token = await self.credentials.get_token()
        request_headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        response = await self.transport.send(
            method, f"{self.base_url}{path}", request_headers, body,
        )
        if not response.ok:
            logger.warning(f"Gmail API {method} {path} failed with status {response.status}")
            raise ApiError(response.status, response.text)

        if "application/json" in response.content_type and response.text.strip():
            return json.loads(response.text)
        return {}

    async def execute_json(
        self,
        path: str,
        method: str = "POST",
        payload: Any = None,
    ) -> dict[str, Any]:
        """Serialize ``payload`` as JSON and :meth:`execute` it."""
        body = json.dumps(payload) if payload is not None else None
        return await self.execute(path, method, body)
