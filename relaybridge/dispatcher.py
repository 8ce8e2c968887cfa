"""Message dispatcher — one asyncio task per inbound message.

Tasks share no mutable state: the allow-list is read-only and every relay
payload is local to its task. Concurrency is unbounded unless
``max_concurrency`` is given.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import TYPE_CHECKING

from relaybridge.models import InboundMessage

if TYPE_CHECKING:
    from relaybridge.admission.filter import AdmissionFilter
    from relaybridge.webhook.models import RelayResult
    from relaybridge.webhook.relay import WebhookRelay

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """Runs admission then relay for each message."""

    def __init__(
        self,
        admission: AdmissionFilter,
        relay: WebhookRelay,
        max_concurrency: int | None = None,
    ) -> None:
        self._admission = admission
        self._relay = relay
        self._semaphore = (
            asyncio.Semaphore(max_concurrency) if max_concurrency else None
        )
        self._tasks: set[asyncio.Task[RelayResult | None]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def handle(self, message: InboundMessage) -> RelayResult | None:
        """Admit and relay a single message. Returns None when rejected."""
        logger.info('MESSAGE RECEIVED from %s: "%s"', message.sender_id, message.body)

        decision = self._admission.evaluate(message)
        if not decision.admitted:
            logger.info(
                "Ignoring message %s from %s (%s)",
                message.id, message.sender_id, decision.reason,
            )
            return None

        logger.info(
            "Sender %s admitted (%s). Responding...", message.sender_id, decision.reason,
        )
        guard: AbstractAsyncContextManager[object] = self._semaphore or nullcontext()
        async with guard:
            return await self._relay.relay(message)

    def submit(self, message: InboundMessage) -> asyncio.Task[RelayResult | None]:
        """Schedule ``handle`` in its own task and keep it referenced until done."""
        task = asyncio.create_task(self.handle(message), name=f"relay-{message.id}")
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[RelayResult | None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Unhandled error in %s", task.get_name(), exc_info=exc,
            )

    async def drain(self) -> None:
        """Wait for every in-flight message to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
