"""Shared plumbing for the resource facades."""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

from ..http import HttpClient


class Resource:
    def __init__(self, http: HttpClient) -> None:
        self._http = http


def compact(**fields: Any) -> Dict[str, Any]:
    """Drop fields left as ``None`` so they are not sent as JSON nulls."""
    return {key: value for key, value in fields.items() if value is not None}


def quote_id(value: str) -> str:
    return quote(str(value), safe="")


__all__ = ["Resource", "compact", "quote_id"]
