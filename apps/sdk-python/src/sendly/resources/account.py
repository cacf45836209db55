"""Account, credit balance and API key management."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..validation import require
from .base import Resource, compact, quote_id


class AccountResource(Resource):
    async def get(self) -> Dict[str, Any]:
        return await self._http.request("GET", "/account")

    async def get_credits(self) -> Dict[str, Any]:
        return await self._http.request("GET", "/credits")

    async def get_credit_transactions(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return await self._http.request(
            "GET",
            "/credits/transactions",
            query={"limit": limit, "offset": offset},
        )

    async def list_api_keys(self) -> List[Dict[str, Any]]:
        """Key metadata only; secret key values are never returned here."""
        return await self._http.request("GET", "/keys")

    async def get_api_key(self, key_id: str) -> Dict[str, Any]:
        require(key_id, "API key ID is required")
        return await self._http.request("GET", f"/keys/{quote_id(key_id)}")

    async def get_api_key_usage(self, key_id: str) -> Dict[str, Any]:
        require(key_id, "API key ID is required")
        return await self._http.request("GET", f"/keys/{quote_id(key_id)}/usage")

    async def create_api_key(self, name: str, *, expires_at: Optional[str] = None) -> Dict[str, Any]:
        require(name, "API key name is required")
        return await self._http.request(
            "POST",
            "/account/keys",
            body=compact(name=name, expiresAt=expires_at),
        )

    async def revoke_api_key(self, key_id: str) -> None:
        require(key_id, "API key ID is required")
        await self._http.request("DELETE", f"/account/keys/{quote_id(key_id)}")

    async def rename_api_key(self, key_id: str, name: str) -> Dict[str, Any]:
        require(key_id, "API key ID is required")
        require(name, "New name is required")
        return await self._http.request(
            "PATCH",
            f"/account/keys/{quote_id(key_id)}/rename",
            body={"name": name},
        )

    async def rotate_api_key(self, key_id: str, *, grace_period_hours: Optional[int] = None) -> Dict[str, Any]:
        """Issue a replacement key; the old key stays valid for the grace period."""
        require(key_id, "API key ID is required")
        return await self._http.request(
            "POST",
            f"/account/keys/{quote_id(key_id)}/rotate",
            body=compact(gracePeriodHours=grace_period_hours or None),
        )


__all__ = ["AccountResource"]
