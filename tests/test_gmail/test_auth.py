"""Tests for the OAuth2 token manager."""

import asyncio
from urllib.parse import parse_qs

import pytest

from gmail_mcp.exceptions import TokenRefreshError, TransportError
from gmail_mcp.gmail.auth import CachedToken


@pytest.mark.asyncio
async def test_refresh_posts_form_encoded_grant(manager, transport):
    transport.add_token("tok")

    assert await manager.get_token() == "tok"

    (request,) = transport.requests
    assert request.method == "POST"
    assert request.url == "https://oauth.test/token"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(request.content) == {
        "client_id": ["cid"],
        "client_secret": ["secret"],
        "refresh_token": ["refresh"],
        "grant_type": ["refresh_token"],
    }


@pytest.mark.asyncio
async def test_valid_cached_token_is_reused(manager, transport):
    transport.add_token("tok")
    await manager.get_token()

    assert await manager.get_token() == "tok"
    assert await manager.get_token() == "tok"
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_expiry_applies_sixty_second_skew(manager, transport, clock):
    start_ms = int(clock.now * 1000)
    transport.add_token("first", expires_in=3600)
    await manager.get_token()

    assert manager.cached_token.expires_at_ms == start_ms + 3_540_000

    clock.advance(3539)
    assert await manager.get_token() == "first"
    assert len(transport.requests) == 1

    clock.advance(2)
    transport.add_token("second")
    assert await manager.get_token() == "second"
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_token_is_expired_exactly_at_expiry(manager, transport, clock):
    transport.add_token("first", expires_in=120)
    await manager.get_token()

    clock.advance(60)
    transport.add_token("second")
    assert await manager.get_token() == "second"


def test_cached_token_validity_is_strict():
    token = CachedToken(value="t", expires_at_ms=1000)
    assert token.is_valid(999)
    assert not token.is_valid(1000)


@pytest.mark.asyncio
async def test_rejected_refresh_raises_and_keeps_cache(manager, transport, clock):
    transport.add_token("old")
    await manager.get_token()
    before = manager.cached_token

    clock.advance(4000)
    transport.add(401, '{"error": "invalid_grant"}', "application/json")

    with pytest.raises(TokenRefreshError) as exc_info:
        await manager.get_token()

    assert exc_info.value.status == 401
    assert exc_info.value.body == '{"error": "invalid_grant"}'
    assert manager.cached_token is before


@pytest.mark.asyncio
async def test_malformed_success_payload_is_a_refresh_error(manager, transport):
    transport.add(200, "not json", "text/plain")

    with pytest.raises(TokenRefreshError, match="not json"):
        await manager.get_token()
    assert manager.cached_token is None


@pytest.mark.asyncio
@pytest.mark.parametrize("access_token", [None, "", 12345])
async def test_missing_access_token_is_a_refresh_error(manager, transport, clock, access_token):
    transport.add_token("old")
    await manager.get_token()
    before = manager.cached_token

    clock.advance(4000)
    transport.add_json({"access_token": access_token, "expires_in": 3600})

    with pytest.raises(TokenRefreshError) as exc_info:
        await manager.get_token()

    assert exc_info.value.status == 200
    assert manager.cached_token is before


@pytest.mark.asyncio
async def test_transport_failure_leaves_cache_empty(manager, transport):
    transport.add_error(TransportError("timed out"))

    with pytest.raises(TransportError):
        await manager.get_token()
    assert manager.cached_token is None


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh(manager, transport):
    transport.add_token("shared")

    tokens = await asyncio.gather(*(manager.get_token() for _ in range(5)))

    assert tokens == ["shared"] * 5
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_failure(manager, transport):
    transport.add(500, "boom")

    results = await asyncio.gather(
        *(manager.get_token() for _ in range(3)), return_exceptions=True,
    )

    assert len(transport.requests) == 1
    assert all(isinstance(r, TokenRefreshError) for r in results)
    assert {r.status for r in results} == {500}


@pytest.mark.asyncio
async def test_next_call_after_failure_refreshes_again(manager, transport):
    transport.add(503, "unavailable")
    with pytest.raises(TokenRefreshError):
        await manager.get_token()

    transport.add_token("recovered")
    assert await manager.get_token() == "recovered"


@pytest.mark.asyncio
async def test_invalidate_forces_refresh(manager, transport):
    transport.add_token("first")
    await manager.get_token()

    manager.invalidate()
    transport.add_token("second")
    assert await manager.get_token() == "second"
