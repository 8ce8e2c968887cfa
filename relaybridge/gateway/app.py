"""FastAPI application receiving WAHA webhook events."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from relaybridge.admission.allow_list import load_allow_list_from_file
from relaybridge.admission.filter import AdmissionFilter
from relaybridge.config import Settings
from relaybridge.dispatcher import MessageDispatcher
from relaybridge.transport.waha import WahaTransport
from relaybridge.webhook.relay import WebhookRelay

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook/waha"
_BANNER = "-" * 50


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    return create_app(Settings.from_env())


def build_dispatcher(
    settings: Settings,
    transport: WahaTransport,
) -> MessageDispatcher:
    admission = AdmissionFilter(load_allow_list_from_file(settings.allow_list_path))
    relay = WebhookRelay(settings.webhook_url, transport)
    return MessageDispatcher(admission, relay, max_concurrency=settings.max_concurrency)


def create_app(
    settings: Settings,
    transport: WahaTransport | None = None,
    dispatcher: MessageDispatcher | None = None,
) -> FastAPI:
    """Create the gateway app wired to a WAHA session."""
    if transport is None:
        transport = WahaTransport(
            settings.waha_url,
            session=settings.waha_session,
            api_key=settings.waha_api_key,
            hmac_key=settings.waha_hmac_key,
        )
    if dispatcher is None:
        dispatcher = build_dispatcher(settings, transport)
    if not settings.webhook_url:
        logger.error("N8N_WEBHOOK_URL is not set; messages will not be relayed")

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("Initializing WhatsApp client (session %s)...", transport.session)
        if settings.waha_auto_start:
            try:
                await transport.start_session()
            except httpx.HTTPError as exc:
                logger.error("Failed to start WAHA session: %s", exc)
        yield
        await dispatcher.drain()

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(WEBHOOK_PATH)
    async def waha_webhook(request: Request) -> JSONResponse:
        body = await request.body()
        if not transport.verify_signature(dict(request.headers), body):
            return JSONResponse({"error": "Invalid signature"}, status_code=401)

        try:
            event = json.loads(body)
        except json.JSONDecodeError:
            return JSONResponse({"error": "Invalid JSON"}, status_code=400)
        if not isinstance(event, dict):
            return JSONResponse({"error": "Invalid event"}, status_code=400)

        if event.get("event") == "session.status":
            await _handle_session_status(transport, event)
            return JSONResponse({"status": "ok"})

        message = transport.extract_message(event)
        if message is None:
            return JSONResponse({"status": "ignored"})

        dispatcher.submit(message)
        return JSONResponse({"status": "accepted"})

    return app


async def _handle_session_status(transport: WahaTransport, event: dict[str, Any]) -> None:
    payload = event.get("payload") or {}
    status = payload.get("status")
    logger.info("WAHA session %s status: %s", event.get("session"), status)

    if status == "WORKING":
        logger.info("WhatsApp client is ready!")
    elif status == "SCAN_QR_CODE":
        try:
            qr = await transport.fetch_qr()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to fetch QR code: %s", exc)
            return
        if qr is None:
            logger.warning("WAHA reported SCAN_QR_CODE but returned no QR value")
            return
        logger.info(_BANNER)
        logger.info("QR CODE RECEIVED! Scan this to connect.")
        logger.info("If scanning fails, paste this raw string into a QR generator:")
        logger.info("%s", qr)
        logger.info(_BANNER)
