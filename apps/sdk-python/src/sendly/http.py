"""Resilient request layer shared by every Sendly resource."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx

from .config import USER_AGENT, ClientConfig
from .errors import ErrorKind, SendlyError, from_wire_error, network_error, timeout_error

logger = logging.getLogger(__name__)

BASE_BACKOFF_MS = 1000
MAX_BACKOFF_MS = 30_000
MAX_JITTER_MS = 500


@dataclass(frozen=True)
class RateLimitInfo:
    limit: int
    remaining: int
    reset: int


def _default_jitter() -> float:
    return random.uniform(0, MAX_JITTER_MS)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpClient:
    """Turns one logical API call into authenticated, retried HTTP attempts.

    The rate-limit snapshot is overwritten by whichever attempt finishes last.
    It is advisory only and is not guarded by a lock.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        jitter: Optional[Callable[[], float]] = None,
    ) -> None:
        self._config = config
        # Deadlines are enforced per attempt by ``_execute``.
        self._client = httpx.AsyncClient(transport=transport, timeout=None)
        self._sleep = sleep
        self._jitter = jitter or _default_jitter
        self._rate_limit: Optional[RateLimitInfo] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def rate_limit_info(self) -> Optional[RateLimitInfo]:
        return self._rate_limit

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        url = self.build_url(path, query)
        request_headers = self.build_headers(headers)
        content = json.dumps(body, separators=(",", ":")) if body is not None else None

        last_error: Optional[SendlyError] = None
        for attempt in range(self._config.max_retries + 1):
            try:
                response = await self._execute(method, url, request_headers, content)
                self._update_rate_limit(response.headers)
                return self._parse_response(response)
            except SendlyError as exc:
                last_error = exc
                if not exc.is_retryable:
                    raise
                if attempt < self._config.max_retries:
                    delay_ms = self.calculate_backoff(attempt)
                    logger.warning(
                        "%s %s failed (kind=%s status=%s), retrying attempt=%d in %.0fms",
                        method,
                        path,
                        exc.kind.value,
                        exc.status_code,
                        attempt + 1,
                        delay_ms,
                    )
                    await self._sleep(delay_ms / 1000)

        if last_error is not None:
            raise last_error
        raise network_error("Request failed after retries")

    async def _execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[str],
    ) -> httpx.Response:
        timeout_ms = self._config.timeout_ms
        try:
            return await asyncio.wait_for(
                self._client.request(method, url, headers=headers, content=content),
                timeout=timeout_ms / 1000,
            )
        except asyncio.TimeoutError as exc:
            raise timeout_error(f"Request timed out after {timeout_ms}ms") from exc
        except httpx.TimeoutException as exc:
            raise timeout_error(f"Request timed out after {timeout_ms}ms") from exc
        except httpx.HTTPError as exc:
            raise network_error(f"Network request failed: {exc}") from exc

    def _parse_response(self, response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        data: Any
        if "application/json" in content_type:
            try:
                data = response.json()
            except ValueError as exc:
                raise SendlyError(
                    f"Invalid JSON in response (HTTP {response.status_code})",
                    kind=ErrorKind.GENERIC,
                    status_code=response.status_code,
                    response=response.text,
                ) from exc
        else:
            data = response.text

        if response.is_success:
            return data

        status = response.status_code
        payload: Dict[str, Any] = dict(data) if isinstance(data, dict) else {"body": data}
        payload["error"] = payload.get("error") or "internal_error"
        payload["message"] = payload.get("message") or f"HTTP {status}"
        raise from_wire_error(status, payload)

    def build_url(self, path: str, query: Optional[Mapping[str, Any]] = None) -> str:
        base = self._config.base_url
        if base.endswith("/"):
            base = base[:-1]
        clean_path = path[1:] if path.startswith("/") else path
        url = httpx.URL(f"{base}/{clean_path}")
        if query:
            params = [(key, _stringify(value)) for key, value in query.items() if value is not None]
            if params:
                url = url.copy_merge_params(params)
        return str(url)

    def build_headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        for name, value in (extra or {}).items():
            # Header names are case-insensitive on the wire.
            for existing in [key for key in headers if key.lower() == name.lower()]:
                del headers[existing]
            headers[name] = value
        return headers

    def _update_rate_limit(self, headers: httpx.Headers) -> None:
        limit = headers.get("X-RateLimit-Limit")
        remaining = headers.get("X-RateLimit-Remaining")
        reset = headers.get("X-RateLimit-Reset")
        if not (limit and remaining and reset):
            return
        try:
            snapshot = RateLimitInfo(limit=int(limit), remaining=int(remaining), reset=int(reset))
        except ValueError:
            logger.debug("Ignoring malformed rate limit headers limit=%r remaining=%r reset=%r", limit, remaining, reset)
            return
        self._rate_limit = snapshot

    def calculate_backoff(self, attempt: int) -> float:
        """Exponential backoff in milliseconds, with jitter, capped at 30s."""
        base_delay = (2**attempt) * BASE_BACKOFF_MS
        return min(base_delay + self._jitter(), MAX_BACKOFF_MS)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["HttpClient", "RateLimitInfo"]
