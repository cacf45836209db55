from __future__ import annotations

import asyncio
import json
import time
from typing import Callable, List

import httpx
import pytest

from sendly.config import USER_AGENT, ClientConfig
from sendly.errors import ErrorKind, SendlyError
from sendly.http import HttpClient, RateLimitInfo

API_KEY = "sk_test_v1_abc123"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    sleep: RecordingSleep | None = None,
    jitter: Callable[[], float] | None = None,
    **overrides,
) -> HttpClient:
    cfg = ClientConfig(api_key=API_KEY, base_url="https://api.example.com/api/", **overrides)
    return HttpClient(
        cfg,
        transport=httpx.MockTransport(handler),
        sleep=sleep or RecordingSleep(),
        jitter=jitter,
    )


@pytest.mark.asyncio
async def test_request_sends_auth_headers_and_json_body() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "msg_1", "status": "queued"})

    client = make_client(handler)
    data = await client.request("POST", "/v1/messages", body={"to": "+15551234567", "text": "hi"})

    assert data == {"id": "msg_1", "status": "queued"}
    request = seen[0]
    assert str(request.url) == "https://api.example.com/api/v1/messages"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["User-Agent"] == USER_AGENT
    assert json.loads(request.content) == {"to": "+15551234567", "text": "hi"}


def test_build_url_skips_none_query_values_and_keeps_order() -> None:
    client = make_client(lambda request: httpx.Response(200))
    url = client.build_url("v1/messages", {"limit": 10, "offset": None, "status": "sent", "all": True})

    parsed = httpx.URL(url)
    assert parsed.path == "/api/v1/messages"
    assert list(parsed.params.multi_items()) == [("limit", "10"), ("status", "sent"), ("all", "true")]
    assert "offset" not in url
    assert "None" not in url


def test_caller_headers_override_defaults_case_insensitively() -> None:
    client = make_client(lambda request: httpx.Response(200))
    headers = client.build_headers({"content-type": "text/plain", "Idempotency-Key": "abc"})

    assert headers["content-type"] == "text/plain"
    assert "Content-Type" not in headers
    assert headers["Idempotency-Key"] == "abc"
    assert headers["Authorization"] == f"Bearer {API_KEY}"


@pytest.mark.asyncio
async def test_retries_server_errors_with_growing_backoff() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] < 3:
            return httpx.Response(500, json={"error": "internal_error", "message": "boom"})
        return httpx.Response(200, json={"ok": True})

    sleep = RecordingSleep()
    client = make_client(handler, sleep=sleep)

    assert await client.request("GET", "/account") == {"ok": True}
    assert attempts["count"] == 3
    assert len(sleep.delays) == 2
    assert sleep.delays[1] > sleep.delays[0]
    assert 1.0 <= sleep.delays[0] <= 1.5
    assert 2.0 <= sleep.delays[1] <= 2.5


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 402, 403, 404])
async def test_client_errors_are_not_retried(status: int) -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(status, json={"error": "invalid_api_key", "message": "nope"})

    sleep = RecordingSleep()
    client = make_client(handler, sleep=sleep)

    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/account")

    assert attempts["count"] == 1
    assert sleep.delays == []
    assert excinfo.value.status_code == status


@pytest.mark.asyncio
async def test_unauthorized_surfaces_authentication_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "key_revoked", "message": "Key revoked"})

    client = make_client(handler)
    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/account")

    assert excinfo.value.kind is ErrorKind.AUTHENTICATION
    assert excinfo.value.code == "key_revoked"


@pytest.mark.asyncio
async def test_rate_limit_error_is_not_retried() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(429, json={"error": "rate_limit_exceeded", "message": "slow down", "retryAfter": 45})

    client = make_client(handler)
    with pytest.raises(SendlyError) as excinfo:
        await client.request("POST", "/v1/messages", body={})

    assert attempts["count"] == 1
    assert excinfo.value.kind is ErrorKind.RATE_LIMIT
    assert excinfo.value.retry_after_seconds == 45


@pytest.mark.asyncio
async def test_exhausted_retries_raise_last_error() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(503, text="Service Unavailable")

    sleep = RecordingSleep()
    client = make_client(handler, sleep=sleep, max_retries=2)

    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/account")

    assert attempts["count"] == 3
    assert len(sleep.delays) == 2
    error = excinfo.value
    assert error.kind is ErrorKind.GENERIC
    assert error.code == "internal_error"
    assert error.message == "HTTP 503"
    assert error.response["body"] == "Service Unavailable"


@pytest.mark.asyncio
async def test_network_failures_are_retried_then_surfaced() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler, max_retries=1)
    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/account")

    assert attempts["count"] == 2
    assert excinfo.value.kind is ErrorKind.NETWORK
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_hanging_transport_times_out() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.Event().wait()
        return httpx.Response(200)  # pragma: no cover - never reached

    client = make_client(handler, timeout_ms=100, max_retries=0)
    started = time.monotonic()
    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/account")
    elapsed = time.monotonic() - started

    assert excinfo.value.kind is ErrorKind.TIMEOUT
    assert "100ms" in excinfo.value.message
    assert 0.095 <= elapsed < 1.0


@pytest.mark.asyncio
async def test_timeouts_participate_in_retry() -> None:
    attempts = {"count": 0}

    async def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            await asyncio.Event().wait()
        return httpx.Response(200, json={"ok": True})

    client = make_client(handler, timeout_ms=50)
    assert await client.request("GET", "/account") == {"ok": True}
    assert attempts["count"] == 2


@pytest.mark.asyncio
async def test_rate_limit_snapshot_tracks_latest_complete_headers() -> None:
    responses = [
        httpx.Response(
            200,
            json={},
            headers={"X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "30"},
        ),
        httpx.Response(200, json={}),
        httpx.Response(200, json={}, headers={"X-RateLimit-Remaining": "7"}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = make_client(handler)
    assert client.rate_limit_info is None

    await client.request("GET", "/credits")
    assert client.rate_limit_info == RateLimitInfo(limit=100, remaining=42, reset=30)

    await client.request("GET", "/credits")
    await client.request("GET", "/credits")
    assert client.rate_limit_info is not None
    assert client.rate_limit_info.remaining == 42


@pytest.mark.asyncio
async def test_rate_limit_snapshot_updates_on_error_responses() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            429,
            json={"error": "rate_limit_exceeded", "message": "slow down"},
            headers={"X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "12"},
        )

    client = make_client(handler)
    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/credits")

    assert excinfo.value.retry_after_seconds == 60
    assert client.rate_limit_info == RateLimitInfo(limit=100, remaining=0, reset=12)


@pytest.mark.asyncio
async def test_non_json_success_body_is_returned_as_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="pong", headers={"Content-Type": "text/plain"})

    client = make_client(handler)
    assert await client.request("GET", "/ping") == "pong"


@pytest.mark.asyncio
async def test_error_body_without_fields_gets_defaults() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={})

    client = make_client(handler)
    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/contacts/cnt_missing")

    assert excinfo.value.kind is ErrorKind.GENERIC
    assert excinfo.value.code == "internal_error"
    assert excinfo.value.message == "HTTP 404"


def test_backoff_grows_and_is_capped() -> None:
    client = make_client(lambda request: httpx.Response(200), jitter=lambda: 500.0)
    assert client.calculate_backoff(0) == 1500.0
    assert client.calculate_backoff(1) == 2500.0
    assert client.calculate_backoff(10) == 30_000


def test_default_jitter_stays_within_bounds() -> None:
    client = make_client(lambda request: httpx.Response(200))
    for attempt in range(4):
        delay = client.calculate_backoff(attempt)
        assert (2**attempt) * 1000 <= delay <= (2**attempt) * 1000 + 500


@pytest.mark.asyncio
async def test_nested_error_object_is_typed_and_retried() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(500, json={"error": {"code": "boom"}})

    client = make_client(handler)
    with pytest.raises(SendlyError) as excinfo:
        await client.request("GET", "/account")

    assert attempts["count"] == 4
    assert excinfo.value.kind is ErrorKind.GENERIC
    assert excinfo.value.response["error"] == {"code": "boom"}
