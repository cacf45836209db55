"""Contacts and contact lists."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..http import HttpClient
from ..validation import require, validate_phone_number
from .base import Resource, compact, quote_id


class ContactsResource(Resource):
    def __init__(self, http: HttpClient) -> None:
        super().__init__(http)
        self.lists = ContactListsResource(http)

    async def list(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
        list_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._http.request(
            "GET",
            "/contacts",
            query={"limit": limit, "offset": offset, "search": search, "list_id": list_id},
        )

    async def get(self, contact_id: str) -> Dict[str, Any]:
        require(contact_id, "Contact ID is required")
        return await self._http.request("GET", f"/contacts/{quote_id(contact_id)}")

    async def create(
        self,
        phone_number: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        validate_phone_number(phone_number)
        return await self._http.request(
            "POST",
            "/contacts",
            body=compact(phone_number=phone_number, name=name, email=email, metadata=metadata),
        )

    async def update(
        self,
        contact_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        require(contact_id, "Contact ID is required")
        return await self._http.request(
            "PATCH",
            f"/contacts/{quote_id(contact_id)}",
            body=compact(name=name, email=email, metadata=metadata),
        )

    async def delete(self, contact_id: str) -> None:
        require(contact_id, "Contact ID is required")
        await self._http.request("DELETE", f"/contacts/{quote_id(contact_id)}")


class ContactListsResource(Resource):
    async def list(self) -> Dict[str, Any]:
        return await self._http.request("GET", "/contact-lists")

    async def get(
        self,
        list_id: str,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, Any]:
        require(list_id, "Contact list ID is required")
        return await self._http.request(
            "GET",
            f"/contact-lists/{quote_id(list_id)}",
            query={"limit": limit, "offset": offset},
        )

    async def create(self, name: str, *, description: Optional[str] = None) -> Dict[str, Any]:
        require(name, "Contact list name is required")
        return await self._http.request(
            "POST",
            "/contact-lists",
            body=compact(name=name, description=description),
        )

    async def update(
        self,
        list_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        require(list_id, "Contact list ID is required")
        return await self._http.request(
            "PATCH",
            f"/contact-lists/{quote_id(list_id)}",
            body=compact(name=name, description=description),
        )

    async def delete(self, list_id: str) -> None:
        require(list_id, "Contact list ID is required")
        await self._http.request("DELETE", f"/contact-lists/{quote_id(list_id)}")

    async def add_contacts(self, list_id: str, contact_ids: Sequence[str]) -> Dict[str, Any]:
        require(list_id, "Contact list ID is required")
        require(contact_ids, "At least one contact ID is required")
        return await self._http.request(
            "POST",
            f"/contact-lists/{quote_id(list_id)}/contacts",
            body={"contact_ids": list(contact_ids)},
        )

    async def remove_contact(self, list_id: str, contact_id: str) -> None:
        require(list_id, "Contact list ID is required")
        require(contact_id, "Contact ID is required")
        await self._http.request(
            "DELETE",
            f"/contact-lists/{quote_id(list_id)}/contacts/{quote_id(contact_id)}",
        )


__all__ = ["ContactListsResource", "ContactsResource"]
