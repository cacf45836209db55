"""FastAPI reference receiver for Sendly webhook callbacks."""

from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import Counter, generate_latest
from sendly import ErrorKind, SendlyError, Webhooks

from .config import ReceiverSettings, settings
from .models import HealthResponse, WebhookAck

logger = logging.getLogger("receiver")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Sendly Webhook Receiver", version="0.1.0")

WEBHOOK_COUNTER = Counter("receiver_webhooks_total", "Verified webhook events received", ["type", "status"])
REJECTED_COUNTER = Counter("receiver_webhooks_rejected_total", "Webhook callbacks rejected", ["reason"])

_verifier: Optional[Webhooks] = Webhooks(settings.webhook_secret) if settings.webhook_secret else None


def get_settings() -> ReceiverSettings:
    return settings


def get_verifier() -> Optional[Webhooks]:
    return _verifier


@app.get("/healthz", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse()


@app.get("/metrics")
def metrics() -> PlainTextResponse:
    data = generate_latest()
    return PlainTextResponse(data, media_type="text/plain; version=0.0.4")


@app.post("/v1/webhooks/sendly", status_code=202, response_model=WebhookAck)
async def receive_webhook(
    request: Request,
    verifier: Optional[Webhooks] = Depends(get_verifier),
    receiver_settings: ReceiverSettings = Depends(get_settings),
) -> WebhookAck:
    if verifier is None:
        raise HTTPException(status_code=503, detail="Webhook secret not configured")

    # The signature covers the exact bytes sent, so the body is read unparsed.
    body = await request.body()
    signature = request.headers.get(receiver_settings.signature_header)
    try:
        event = verifier.parse(body, signature)
    except SendlyError as exc:
        if exc.kind is ErrorKind.WEBHOOK_SIGNATURE:
            REJECTED_COUNTER.labels(reason="signature").inc()
            raise HTTPException(status_code=401, detail=exc.message) from exc
        REJECTED_COUNTER.labels(reason="payload").inc()
        raise HTTPException(status_code=400, detail=exc.message) from exc

    accepted = receiver_settings.accepted_event_types
    status = "accepted" if not accepted or event.type in accepted else "ignored"
    WEBHOOK_COUNTER.labels(type=event.type, status=status).inc()
    logger.info("webhook id=%s type=%s status=%s", event.id, event.type, status)
    return WebhookAck(status=status, id=event.id, type=event.type)


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
