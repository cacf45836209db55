"""Pydantic models for the webhook receiver."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "receiver"


class WebhookAck(BaseModel):
    status: str = "accepted"
    id: str
    type: str
