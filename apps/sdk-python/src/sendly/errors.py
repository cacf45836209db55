"""Typed failures raised by the Sendly SDK.

Every failure is a single :class:`SendlyError` tagged with an
:class:`ErrorKind`, so callers branch on ``err.kind`` rather than on
exception subclasses or message text. Kind-specific fields
(``retry_after_seconds``, ``credits_needed``, ``current_balance``) are
``None`` for kinds they do not apply to.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional


class ErrorKind(str, Enum):
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    WEBHOOK_SIGNATURE = "webhook_signature"
    WEBHOOK_PAYLOAD = "webhook_payload"
    GENERIC = "generic"


AUTHENTICATION_CODES = frozenset(
    {
        "unauthorized",
        "invalid_auth_format",
        "invalid_key_format",
        "invalid_api_key",
        "key_revoked",
        "key_expired",
        "insufficient_permissions",
    }
)
VALIDATION_CODES = frozenset({"invalid_request", "unsupported_destination"})

# Caller-fixable or quota conditions: repeating the request cannot help.
NON_RETRYABLE_STATUSES = frozenset({400, 401, 402, 403, 404})

DEFAULT_RETRY_AFTER_SECONDS = 60
DEFAULT_ERROR_CODE = "internal_error"
DEFAULT_ERROR_MESSAGE = "An unknown error occurred"


class ConfigurationError(ValueError):
    """Raised when a client or verifier is constructed with unusable settings."""


class SendlyError(Exception):
    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.GENERIC,
        code: str = DEFAULT_ERROR_CODE,
        status_code: Optional[int] = None,
        response: Any = None,
        retry_after_seconds: Optional[int] = None,
        credits_needed: Optional[int] = None,
        current_balance: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.status_code = status_code
        self.response = response
        self.retry_after_seconds = retry_after_seconds
        self.credits_needed = credits_needed
        self.current_balance = current_balance

    @property
    def is_retryable(self) -> bool:
        if self.kind is ErrorKind.RATE_LIMIT:
            return False
        return self.status_code not in NON_RETRYABLE_STATUSES

    def __repr__(self) -> str:
        return (
            f"SendlyError(kind={self.kind.value!r}, code={self.code!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


def from_wire_error(status_code: Optional[int], body: Mapping[str, Any]) -> SendlyError:
    """Map an API error body ``{"error": code, "message": ...}`` to a typed error.

    Pure: the same status and body always produce an equal error.
    """
    code = body.get("error")
    if not code or not isinstance(code, str):
        code = DEFAULT_ERROR_CODE
    message = body.get("message")
    if not message or not isinstance(message, str):
        message = DEFAULT_ERROR_MESSAGE
    common: dict[str, Any] = {"status_code": status_code, "response": body}

    if code in AUTHENTICATION_CODES:
        return SendlyError(message, kind=ErrorKind.AUTHENTICATION, code=code, **common)
    if code == "rate_limit_exceeded":
        retry_after = body.get("retryAfter")
        return SendlyError(
            message,
            kind=ErrorKind.RATE_LIMIT,
            code=code,
            retry_after_seconds=DEFAULT_RETRY_AFTER_SECONDS if retry_after is None else retry_after,
            **common,
        )
    if code == "insufficient_credits":
        needed = body.get("creditsNeeded")
        balance = body.get("currentBalance")
        return SendlyError(
            message,
            kind=ErrorKind.INSUFFICIENT_CREDITS,
            code=code,
            credits_needed=0 if needed is None else needed,
            current_balance=0 if balance is None else balance,
            **common,
        )
    if code in VALIDATION_CODES:
        return SendlyError(message, kind=ErrorKind.VALIDATION, code=code, **common)
    if code == "not_found":
        return SendlyError(message, kind=ErrorKind.NOT_FOUND, code=code, **common)
    return SendlyError(message, kind=ErrorKind.GENERIC, code=code, **common)


def network_error(message: str) -> SendlyError:
    return SendlyError(message, kind=ErrorKind.NETWORK)


def timeout_error(message: str = "Request timed out") -> SendlyError:
    return SendlyError(message, kind=ErrorKind.TIMEOUT)


def validation_error(message: str) -> SendlyError:
    return SendlyError(message, kind=ErrorKind.VALIDATION, code="invalid_request")


__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "SendlyError",
    "from_wire_error",
    "network_error",
    "timeout_error",
    "validation_error",
]
