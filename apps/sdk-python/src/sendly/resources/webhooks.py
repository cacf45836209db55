"""Management of webhook endpoints registered with Sendly.

Verifying the callbacks those endpoints receive lives in
:mod:`sendly.webhooks`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..errors import validation_error
from ..validation import validate_prefixed_id
from .base import Resource, compact, quote_id


def _require_https(url: Optional[str]) -> None:
    if not url or not url.startswith("https://"):
        raise validation_error("Webhook URL must be HTTPS")


class WebhooksResource(Resource):
    async def create(
        self,
        url: str,
        events: Sequence[str],
        *,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Register an endpoint. The signing secret is only returned by this call."""
        _require_https(url)
        if not events:
            raise validation_error("At least one event type is required")
        return await self._http.request(
            "POST",
            "/webhooks",
            body=compact(url=url, events=list(events), description=description or None, metadata=metadata or None),
        )

    async def list(self) -> List[Dict[str, Any]]:
        return await self._http.request("GET", "/webhooks")

    async def get(self, webhook_id: str) -> Dict[str, Any]:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        return await self._http.request("GET", f"/webhooks/{quote_id(webhook_id)}")

    async def update(
        self,
        webhook_id: str,
        *,
        url: Optional[str] = None,
        events: Optional[Sequence[str]] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        if url is not None:
            _require_https(url)
        return await self._http.request(
            "PATCH",
            f"/webhooks/{quote_id(webhook_id)}",
            body=compact(
                url=url,
                events=list(events) if events is not None else None,
                description=description,
                is_active=is_active,
                metadata=metadata,
            ),
        )

    async def delete(self, webhook_id: str) -> None:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        await self._http.request("DELETE", f"/webhooks/{quote_id(webhook_id)}")

    async def test(self, webhook_id: str) -> Dict[str, Any]:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        return await self._http.request("POST", f"/webhooks/{quote_id(webhook_id)}/test")

    async def rotate_secret(self, webhook_id: str) -> Dict[str, Any]:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        return await self._http.request("POST", f"/webhooks/{quote_id(webhook_id)}/rotate-secret")

    async def get_deliveries(self, webhook_id: str) -> List[Dict[str, Any]]:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        return await self._http.request("GET", f"/webhooks/{quote_id(webhook_id)}/deliveries")

    async def retry_delivery(self, webhook_id: str, delivery_id: str) -> None:
        validate_prefixed_id(webhook_id, "whk_", "webhook")
        validate_prefixed_id(delivery_id, "del_", "delivery")
        await self._http.request(
            "POST",
            f"/webhooks/{quote_id(webhook_id)}/deliveries/{quote_id(delivery_id)}/retry",
        )

    async def list_event_types(self) -> List[Dict[str, Any]]:
        return await self._http.request("GET", "/webhooks/event-types")


__all__ = ["WebhooksResource"]
