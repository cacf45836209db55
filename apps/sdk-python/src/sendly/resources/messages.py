"""Sending, scheduling and batching SMS messages."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Union

from ..errors import validation_error
from ..validation import (
    validate_limit,
    validate_message_id,
    validate_message_text,
    validate_phone_number,
    validate_sender_id,
)
from .base import Resource, compact, quote_id

MAX_BATCH_SIZE = 1000
MIN_SCHEDULE_LEAD = timedelta(minutes=1)


def _normalize_schedule_time(scheduled_at: Union[str, datetime]) -> str:
    if isinstance(scheduled_at, datetime):
        when = scheduled_at
    else:
        try:
            when = datetime.fromisoformat(str(scheduled_at).replace("Z", "+00:00"))
        except ValueError as exc:
            raise validation_error("Invalid scheduled_at format. Use ISO 8601 format.") from exc
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    if when <= datetime.now(timezone.utc) + MIN_SCHEDULE_LEAD:
        raise validation_error("scheduled_at must be at least 1 minute in the future.")
    if isinstance(scheduled_at, datetime):
        return when.isoformat()
    return str(scheduled_at)


class MessagesResource(Resource):
    async def send(self, to: str, text: str, *, from_: Optional[str] = None) -> Dict[str, Any]:
        """Send one SMS. ``from_`` is a phone number or 2-11 character sender ID."""
        validate_phone_number(to)
        validate_message_text(text)
        validate_sender_id(from_)
        return await self._http.request(
            "POST",
            "/v1/messages",
            body=compact(to=to, text=text, **{"from": from_ or None}),
        )

    async def list(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        validate_limit(limit)
        return await self._http.request(
            "GET",
            "/v1/messages",
            query={"limit": limit, "offset": offset, "status": status},
        )

    async def get(self, message_id: str) -> Dict[str, Any]:
        validate_message_id(message_id)
        return await self._http.request("GET", f"/v1/messages/{quote_id(message_id)}")

    async def list_all(self, *, batch_size: int = 100) -> AsyncIterator[Dict[str, Any]]:
        """Yield every message, paging with limit/offset until a short page."""
        limit = min(batch_size or 100, 100)
        validate_limit(limit)
        offset = 0
        while True:
            page = await self._http.request(
                "GET",
                "/v1/messages",
                query={"limit": limit, "offset": offset},
            )
            items: List[Dict[str, Any]] = (page.get("data") if isinstance(page, dict) else None) or []
            for message in items:
                yield message
            if len(items) < limit:
                return
            offset += limit

    async def schedule(
        self,
        to: str,
        text: str,
        scheduled_at: Union[str, datetime],
        *,
        from_: Optional[str] = None,
    ) -> Dict[str, Any]:
        validate_phone_number(to)
        validate_message_text(text)
        validate_sender_id(from_)
        when = _normalize_schedule_time(scheduled_at)
        return await self._http.request(
            "POST",
            "/v1/messages/schedule",
            body=compact(to=to, text=text, scheduledAt=when, **{"from": from_ or None}),
        )

    async def list_scheduled(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        validate_limit(limit)
        return await self._http.request(
            "GET",
            "/v1/messages/scheduled",
            query={"limit": limit, "offset": offset, "status": status},
        )

    async def get_scheduled(self, message_id: str) -> Dict[str, Any]:
        validate_message_id(message_id)
        return await self._http.request("GET", f"/v1/messages/scheduled/{quote_id(message_id)}")

    async def cancel_scheduled(self, message_id: str) -> Dict[str, Any]:
        validate_message_id(message_id)
        return await self._http.request("DELETE", f"/v1/messages/scheduled/{quote_id(message_id)}")

    async def send_batch(
        self,
        messages: Sequence[Mapping[str, Any]],
        *,
        from_: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send up to 1000 ``{"to": ..., "text": ...}`` messages in one request."""
        if not messages:
            raise validation_error("messages must be a non-empty list")
        if len(messages) > MAX_BATCH_SIZE:
            raise validation_error(f"Maximum {MAX_BATCH_SIZE} messages per batch")
        for message in messages:
            validate_phone_number(message.get("to"))
            validate_message_text(message.get("text"))
        validate_sender_id(from_)
        return await self._http.request(
            "POST",
            "/v1/messages/batch",
            body=compact(messages=[dict(m) for m in messages], **{"from": from_ or None}),
        )

    async def get_batch(self, batch_id: str) -> Dict[str, Any]:
        if not batch_id or not batch_id.startswith("batch_"):
            raise validation_error("Invalid batch ID format")
        return await self._http.request("GET", f"/v1/messages/batch/{quote_id(batch_id)}")

    async def list_batches(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        validate_limit(limit)
        return await self._http.request(
            "GET",
            "/v1/messages/batches",
            query={"limit": limit, "offset": offset, "status": status},
        )


__all__ = ["MessagesResource"]
