"""WAHA (WhatsApp HTTP API) transport.

WAHA runs the WhatsApp Web session and pushes events to us as HTTP webhooks.
This module handles webhook signature verification, event extraction, session
lifecycle calls, and replies via ``/api/sendText``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any

import httpx

from relaybridge.models import InboundMessage
from relaybridge.transport.base import Transport

logger = logging.getLogger(__name__)

# WAHA delivers an incoming message as both "message" and "message.any".
MESSAGE_EVENT = "message.any"


class WahaTransport(Transport):
    """Talks to a WAHA gateway for one session."""

    def __init__(
        self,
        base_url: str,
        session: str = "default",
        api_key: str | None = None,
        hmac_key: str | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._api_key = api_key
        self._hmac_key = hmac_key
        self._http_transport = http_transport

    @property
    def session(self) -> str:
        return self._session

    def _client(self) -> httpx.AsyncClient:
        headers = {"X-Api-Key": self._api_key} if self._api_key else None
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            transport=self._http_transport,
        )

    def verify_signature(self, headers: dict[str, str], body: bytes) -> bool:
        """Verify the ``X-Webhook-Hmac`` SHA-512 signature of a webhook body.

        Without a configured key every request is accepted.
        """
        if not self._hmac_key:
            return True
        signature = headers.get("x-webhook-hmac", "")
        if not signature:
            return False
        expected = hmac.new(
            self._hmac_key.encode(), body, hashlib.sha512,
        ).hexdigest()
        return hmac.compare_digest(signature, expected)

    def extract_message(self, event: dict[str, Any]) -> InboundMessage | None:
        """Build an InboundMessage from a ``message.any`` event.

        Returns None for other events and for payloads missing an id or sender.
        Fields of the wrong type are treated as absent.
        """
        if event.get("event") != MESSAGE_EVENT:
            return None
        payload = event.get("payload")
        if not isinstance(payload, dict):
            return None

        message_id = payload.get("id")
        sender_id = payload.get("from")
        if not message_id or not sender_id:
            return None

        from_me = bool(payload.get("fromMe", False))
        # For our own messages "from" is us; the conversation is "to".
        chat_id = payload.get("to") if from_me else sender_id
        data = payload.get("_data")
        if not isinstance(data, dict):
            data = {}
        mentions = payload.get("mentionedIds") or data.get("mentionedJidList")
        if not isinstance(mentions, list):
            mentions = []
        body = payload.get("body")
        sender_name = data.get("notifyName")

        return InboundMessage(
            id=str(message_id),
            chat_id=str(chat_id or sender_id),
            sender_id=str(sender_id),
            body=body if isinstance(body, str) else "",
            from_me=from_me,
            sender_name=sender_name if isinstance(sender_name, str) else "",
            mentioned_ids=tuple(m for m in mentions if isinstance(m, str)),
        )

    async def reply(self, message: InboundMessage, text: str) -> None:
        """Reply in the originating chat, quoting the triggering message."""
        payload = {
            "session": self._session,
            "chatId": message.chat_id,
            "text": text,
            "reply_to": message.id,
        }
        async with self._client() as client:
            resp = await client.post("/api/sendText", json=payload)
            resp.raise_for_status()

    async def start_session(self) -> None:
        async with self._client() as client:
            resp = await client.post(f"/api/sessions/{self._session}/start")
            resp.raise_for_status()

    async def fetch_qr(self) -> str | None:
        """Return the raw QR string for pairing, or None if WAHA has none."""
        async with self._client() as client:
            resp = await client.get(
                f"/api/{self._session}/auth/qr", params={"format": "raw"},
            )
            resp.raise_for_status()
            value = resp.json().get("value")
        return value if isinstance(value, str) and value else None
