"""Client-side input checks run before a request leaves the process."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

from .errors import validation_error

logger = logging.getLogger(__name__)

E164_RE = re.compile(r"^\+[1-9]\d{1,14}$")
SENDER_ID_RE = re.compile(r"^[a-zA-Z0-9]{2,11}$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
PREFIXED_ID_RE = re.compile(r"^(msg|schd|batch)_[a-zA-Z0-9]+$")

LONG_MESSAGE_CHARS = 1600
MAX_PAGE_LIMIT = 100


def validate_phone_number(phone: Optional[str]) -> None:
    if not phone:
        raise validation_error("Phone number is required")
    if not isinstance(phone, str) or not E164_RE.match(phone):
        raise validation_error(f"Invalid phone number format: {phone}. Expected E.164 format (e.g., +15551234567)")


def validate_message_text(text: Any) -> None:
    if not text:
        raise validation_error("Message text is required")
    if not isinstance(text, str):
        raise validation_error("Message text must be a string")
    if len(text) > LONG_MESSAGE_CHARS:
        logger.warning(
            "Message is %d characters. This will be split into %d segments.",
            len(text),
            math.ceil(len(text) / 160),
        )


def validate_sender_id(sender: Optional[str]) -> None:
    if not sender:
        return
    if sender.startswith("+"):
        validate_phone_number(sender)
        return
    if not SENDER_ID_RE.match(sender):
        raise validation_error(
            f"Invalid sender ID: {sender}. Must be 2-11 alphanumeric characters or a valid phone number."
        )


def validate_limit(limit: Optional[int]) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise validation_error("Limit must be an integer")
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise validation_error(f"Limit must be between 1 and {MAX_PAGE_LIMIT}")


def validate_message_id(message_id: Optional[str]) -> None:
    if not message_id:
        raise validation_error("Message ID is required")
    if not isinstance(message_id, str):
        raise validation_error("Message ID must be a string")
    if not UUID_RE.match(message_id) and not PREFIXED_ID_RE.match(message_id):
        raise validation_error(f"Invalid message ID format: {message_id}")


def validate_prefixed_id(value: Optional[str], prefix: str, label: str) -> None:
    if not value or not isinstance(value, str) or not value.startswith(prefix):
        raise validation_error(f"Invalid {label} ID format")


def require(value: Any, message: str) -> None:
    if not value:
        raise validation_error(message)


__all__ = [
    "require",
    "validate_limit",
    "validate_message_id",
    "validate_message_text",
    "validate_phone_number",
    "validate_prefixed_id",
    "validate_sender_id",
]
