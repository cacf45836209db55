"""Async Python client for the Sendly SMS API."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from .config import ClientConfig
from .http import HttpClient, RateLimitInfo
from .resources import (
    AccountResource,
    CampaignsResource,
    ContactsResource,
    MessagesResource,
    WebhooksResource,
)


class Sendly:
    """Entry point bundling every Sendly resource over one request layer.

    ``Sendly("sk_live_v1_...")`` uses the default base URL, timeout and
    retry ceiling; pass a :class:`ClientConfig` to override them.
    """

    def __init__(
        self,
        config: Union[ClientConfig, str],
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        jitter: Optional[Callable[[], float]] = None,
    ) -> None:
        self._config = ClientConfig(api_key=config) if isinstance(config, str) else config
        http_kwargs: dict[str, Any] = {"transport": transport, "jitter": jitter}
        if sleep is not None:
            http_kwargs["sleep"] = sleep
        self._http = HttpClient(self._config, **http_kwargs)

        self.messages = MessagesResource(self._http)
        self.contacts = ContactsResource(self._http)
        self.campaigns = CampaignsResource(self._http)
        self.account = AccountResource(self._http)
        self.webhooks = WebhooksResource(self._http)

    async def __aenter__(self) -> "Sendly":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def http(self) -> HttpClient:
        return self._http

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def rate_limit_info(self) -> Optional[RateLimitInfo]:
        """Quota reported by the most recent response that carried rate limit headers."""
        return self._http.rate_limit_info

    def is_test_mode(self) -> bool:
        return self._config.is_test_mode

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["Sendly"]
