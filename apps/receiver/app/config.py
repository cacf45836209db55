"""Webhook receiver configuration utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from sendly import SIGNATURE_HEADER


@dataclass(frozen=True)
class ReceiverSettings:
    webhook_secret: Optional[str] = None
    signature_header: str = SIGNATURE_HEADER
    accepted_event_types: tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> "ReceiverSettings":
        secret = os.environ.get("SENDLY_WEBHOOK_SECRET") or None
        accepted = tuple(
            event_type.strip()
            for event_type in os.environ.get("RECEIVER_ACCEPTED_EVENTS", "").split(",")
            if event_type.strip()
        )
        return cls(webhook_secret=secret, accepted_event_types=accepted)


settings = ReceiverSettings.from_env()

__all__ = ["ReceiverSettings", "settings"]
