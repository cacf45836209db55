"""Bulk SMS campaigns."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..validation import require, validate_message_text
from .base import Resource, compact, quote_id


class CampaignsResource(Resource):
    async def create(
        self,
        name: str,
        text: str,
        *,
        contact_list_ids: Sequence[str],
        template_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        require(name, "Campaign name is required")
        validate_message_text(text)
        require(contact_list_ids, "At least one contact list is required")
        return await self._http.request(
            "POST",
            "/campaigns",
            body=compact(
                name=name,
                text=text,
                templateId=template_id,
                contactListIds=list(contact_list_ids),
            ),
        )

    async def list(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._http.request(
            "GET",
            "/campaigns",
            query={"limit": limit, "offset": offset, "status": status},
        )

    async def get(self, campaign_id: str) -> Dict[str, Any]:
        require(campaign_id, "Campaign ID is required")
        return await self._http.request("GET", f"/campaigns/{quote_id(campaign_id)}")

    async def update(
        self,
        campaign_id: str,
        *,
        name: Optional[str] = None,
        text: Optional[str] = None,
        template_id: Optional[str] = None,
        contact_list_ids: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        require(campaign_id, "Campaign ID is required")
        return await self._http.request(
            "PATCH",
            f"/campaigns/{quote_id(campaign_id)}",
            body=compact(
                name=name,
                text=text,
                template_id=template_id,
                contact_list_ids=list(contact_list_ids) if contact_list_ids is not None else None,
            ),
        )

    async def delete(self, campaign_id: str) -> None:
        require(campaign_id, "Campaign ID is required")
        await self._http.request("DELETE", f"/campaigns/{quote_id(campaign_id)}")

    async def preview(self, campaign_id: str) -> Dict[str, Any]:
        """Recipient count and credit estimate for a draft campaign."""
        require(campaign_id, "Campaign ID is required")
        return await self._http.request("GET", f"/campaigns/{quote_id(campaign_id)}/preview")

    async def send(self, campaign_id: str) -> Dict[str, Any]:
        require(campaign_id, "Campaign ID is required")
        return await self._http.request("POST", f"/campaigns/{quote_id(campaign_id)}/send")

    async def schedule(
        self,
        campaign_id: str,
        scheduled_at: str,
        *,
        timezone: Optional[str] = None,
    ) -> Dict[str, Any]:
        require(campaign_id, "Campaign ID is required")
        require(scheduled_at, "scheduled_at is required")
        return await self._http.request(
            "POST",
            f"/campaigns/{quote_id(campaign_id)}/schedule",
            body=compact(scheduledAt=scheduled_at, timezone=timezone),
        )

    async def cancel(self, campaign_id: str) -> Dict[str, Any]:
        require(campaign_id, "Campaign ID is required")
        return await self._http.request("POST", f"/campaigns/{quote_id(campaign_id)}/cancel")

    async def clone(self, campaign_id: str) -> Dict[str, Any]:
        require(campaign_id, "Campaign ID is required")
        return await self._http.request("POST", f"/campaigns/{quote_id(campaign_id)}/clone")


__all__ = ["CampaignsResource"]
