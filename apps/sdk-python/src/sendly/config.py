"""Configuration objects for the Sendly Python SDK."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

import httpx

from .errors import ConfigurationError

__version__ = "0.1.0"

DEFAULT_BASE_URL = "https://sendly.live/api"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 3
USER_AGENT = f"sendly-python/{__version__}"

API_KEY_RE = re.compile(r"^sk_(test|live)_v1_[a-zA-Z0-9_-]+$")
LOCAL_HOSTS = ("localhost", "127.0.0.1")


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not API_KEY_RE.fullmatch(self.api_key):
            raise ConfigurationError("Invalid API key format. Expected sk_test_v1_xxx or sk_live_v1_xxx")
        if not _is_secure_base_url(self.base_url):
            raise ConfigurationError(
                "API key must only be transmitted over HTTPS. Use https:// or localhost for development."
            )
        if self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be a positive number of milliseconds")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries cannot be negative")

    @property
    def is_test_mode(self) -> bool:
        return self.api_key.startswith("sk_test_")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        api_key = os.environ.get("SENDLY_API_KEY")
        if not api_key:
            raise ConfigurationError("SENDLY_API_KEY must be set")
        return cls(
            api_key=api_key,
            base_url=os.environ.get("SENDLY_BASE_URL") or DEFAULT_BASE_URL,
            timeout_ms=int(os.environ.get("SENDLY_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
            max_retries=int(os.environ.get("SENDLY_MAX_RETRIES", str(DEFAULT_MAX_RETRIES))),
        )


def _is_secure_base_url(base_url: str) -> bool:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigurationError(f"Invalid base URL: {base_url!r}") from exc
    if url.scheme == "https":
        return True
    # Plain HTTP is only tolerated against a local development server.
    if url.scheme != "http":
        return False
    return url.host in LOCAL_HOSTS or url.host.endswith(".localhost")


__all__ = [
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT_MS",
    "USER_AGENT",
]
