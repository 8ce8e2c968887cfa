"""Transport capability seen by the relay."""

from __future__ import annotations

from abc import ABC, abstractmethod

from relaybridge.models import InboundMessage


class Transport(ABC):
    """Chat platform client: the relay only needs to reply."""

    @abstractmethod
    async def reply(self, message: InboundMessage, text: str) -> None:
        """Send ``text`` to the conversation of ``message``, quoting it."""
