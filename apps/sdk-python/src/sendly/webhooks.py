"""Verification and parsing of inbound Sendly webhook callbacks.

Sendly signs every callback body with HMAC-SHA256 using the endpoint's
secret and sends the result in the ``X-Sendly-Signature`` header as
``sha256=<hex>``. Pass the request body exactly as received: re-serialising
parsed JSON changes the bytes the signature was computed over.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError, ErrorKind, SendlyError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Sendly-Signature"
SIGNATURE_PREFIX = "sha256="

Payload = Union[str, bytes]


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    created_at: datetime = Field(..., alias="createdAt")
    data: Any = None


def _as_bytes(value: Payload) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def sign(payload: Payload, secret: str) -> str:
    digest = hmac.new(_as_bytes(secret), _as_bytes(payload), hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify(payload: Optional[Payload], signature: Optional[str], secret: Optional[str]) -> bool:
    """Return True only if ``signature`` is the valid signature of ``payload``.

    Never raises. Comparison is constant-time for equal-length inputs. A
    length mismatch is rejected outright, since every valid signature has
    the same fixed length.
    """
    if not payload or not signature or not secret:
        return False
    if not isinstance(signature, (str, bytes)):
        return False
    expected = sign(payload, secret)
    return hmac.compare_digest(expected.encode("ascii"), _as_bytes(signature))


def parse(payload: Payload, signature: Optional[str], secret: str) -> WebhookEvent:
    if not verify(payload, signature, secret):
        logger.warning("Rejected webhook with invalid signature (payload_length=%d)", len(payload or ""))
        raise SendlyError(
            "Invalid webhook signature",
            kind=ErrorKind.WEBHOOK_SIGNATURE,
            code="invalid_signature",
        )
    try:
        return WebhookEvent.model_validate_json(payload)
    except ValidationError as exc:
        if any(err.get("type") == "json_invalid" for err in exc.errors()):
            message = "Failed to parse webhook payload"
        else:
            message = "Invalid webhook event structure"
        raise SendlyError(message, kind=ErrorKind.WEBHOOK_PAYLOAD, code="invalid_payload") from exc


class Webhooks:
    """Binds a webhook secret so handlers only pass the body and header."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationError("Webhook secret is required")
        self._secret = secret

    def __repr__(self) -> str:
        return "Webhooks(secret=***)"

    def verify(self, payload: Payload, signature: Optional[str]) -> bool:
        return verify(payload, signature, self._secret)

    def parse(self, payload: Payload, signature: Optional[str]) -> WebhookEvent:
        return parse(payload, signature, self._secret)

    def sign(self, payload: Payload) -> str:
        """Generate a signature, mainly for testing webhook handlers."""
        return sign(payload, self._secret)


__all__ = [
    "SIGNATURE_HEADER",
    "WebhookEvent",
    "Webhooks",
    "parse",
    "sign",
    "verify",
]
