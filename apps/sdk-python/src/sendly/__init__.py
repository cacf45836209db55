"""Sendly Python SDK."""

from .client import Sendly
from .config import ClientConfig, __version__
from .errors import ConfigurationError, ErrorKind, SendlyError, from_wire_error
from .http import HttpClient, RateLimitInfo
from .webhooks import SIGNATURE_HEADER, WebhookEvent, Webhooks

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "ErrorKind",
    "HttpClient",
    "RateLimitInfo",
    "SIGNATURE_HEADER",
    "Sendly",
    "SendlyError",
    "WebhookEvent",
    "Webhooks",
    "__version__",
    "from_wire_error",
]
