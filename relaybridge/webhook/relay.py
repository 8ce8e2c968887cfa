"""Webhook relay — forwards one admitted message and replies with the result.

Pipeline per message:
1. Guard: webhook URL configured, message body non-empty
2. Build the relay payload
3. Single POST to the workflow webhook (httpx defaults, no retry)
4. Extract the reply text from the response
5. Reply in the originating chat
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from relaybridge.models import InboundMessage
from relaybridge.webhook.models import RelayOutcome, RelayPayload, RelayResult
from relaybridge.webhook.response import extract_reply

if TYPE_CHECKING:
    from relaybridge.transport.base import Transport

logger = logging.getLogger(__name__)


class WebhookRelay:
    """Performs at most one webhook call and at most one reply per message."""

    def __init__(
        self,
        webhook_url: str | None,
        transport: Transport,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._transport = transport
        self._http_transport = http_transport

    async def relay(self, message: InboundMessage) -> RelayResult:
        if not self._webhook_url:
            logger.error("N8N_WEBHOOK_URL is not set; dropping message %s", message.id)
            return RelayResult(RelayOutcome.NOT_CONFIGURED)

        if not message.body:
            logger.info("Message %s has no body; nothing to relay", message.id)
            return RelayResult(RelayOutcome.EMPTY_BODY)

        payload = RelayPayload.from_message(message)
        logger.info("Sending data to webhook: %s", payload.to_json())

        try:
            data = await self._post(payload)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.error("Error calling webhook for message %s: %s", message.id, exc)
            return RelayResult(RelayOutcome.UPSTREAM_ERROR)

        logger.info("Received response from webhook")
        reply = extract_reply(data)
        if reply is None:
            logger.warning("No 'output' field found in the webhook response. Nothing to send.")
            return RelayResult(RelayOutcome.NO_OUTPUT)

        logger.info('Replying with: "%s"', reply)
        try:
            await self._transport.reply(message, reply)
        except Exception:
            logger.exception("Failed to send reply for message %s", message.id)
            return RelayResult(RelayOutcome.REPLY_FAILED, reply)

        return RelayResult(RelayOutcome.REPLIED, reply)

    async def _post(self, payload: RelayPayload) -> object:
        async with httpx.AsyncClient(transport=self._http_transport) as client:
            resp = await client.post(self._webhook_url, json=payload.to_json())
            resp.raise_for_status()
            return resp.json()
