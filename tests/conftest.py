"""Shared fixtures: an in-memory transport and a controllable clock."""

import json
from dataclasses import dataclass

import pytest

from gmail_mcp.config import Credential
from gmail_mcp.gmail.auth import CredentialManager
from gmail_mcp.gmail.client import GmailClient
from gmail_mcp.gmail.pipeline import RequestPipeline
from gmail_mcp.gmail.transport import TransportResponse

TOKEN_URL = "https://oauth.test/token"
API_BASE = "https://api.test/gmail/v1"


@dataclass
class SentRequest:
    method: str
    url: str
    headers: dict
    content: str | bytes | None


class FakeTransport:
    """Replays queued responses and records every request."""

    def __init__(self):
        self.responses = []
        self.requests: list[SentRequest] = []

    def add(self, status=200, text="", content_type=None):
        headers = {"content-type": content_type} if content_type else {}
        self.responses.append(TransportResponse(status=status, text=text, headers=headers))

    def add_json(self, data, status=200):
        self.add(status, json.dumps(data), "application/json; charset=UTF-8")

    def add_token(self, token="access-1", expires_in=3600):
        self.add_json({"access_token": token, "expires_in": expires_in, "token_type": "Bearer"})

    def add_error(self, exc):
        self.responses.append(exc)

    async def send(self, method, url, headers, content=None):
        self.requests.append(SentRequest(method, url, dict(headers), content))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def api_requests(self):
        return [r for r in self.requests if r.url.startswith(API_BASE)]


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def credential():
    return Credential(client_id="cid", client_secret="secret", refresh_token="refresh")


@pytest.fixture
def manager(credential, transport, clock):
    return CredentialManager(credential, transport, token_url=TOKEN_URL, clock=clock)


@pytest.fixture
def pipeline(manager, transport):
    return RequestPipeline(manager, transport, base_url=API_BASE)


@pytest.fixture
def client(pipeline, transport):
    """A client whose first call will fetch token ``access-1``."""
    transport.add_token()
    return GmailClient(pipeline)
