"""Data models for the webhook relay pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from relaybridge.models import InboundMessage


class RelayPayload(BaseModel):
    """Outbound request body: ``{"msg": ..., "from": ..., "from_name": ...}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    msg: str
    sender: str = Field(alias="from")
    from_name: str

    @classmethod
    def from_message(cls, message: InboundMessage) -> RelayPayload:
        return cls(
            msg=message.body,
            sender=message.sender_id,
            from_name=message.sender_name,
        )

    def to_json(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class RelayOutcome(str, Enum):
    REPLIED = "replied"
    NOT_CONFIGURED = "not_configured"
    EMPTY_BODY = "empty_body"
    UPSTREAM_ERROR = "upstream_error"
    NO_OUTPUT = "no_output"
    REPLY_FAILED = "reply_failed"


@dataclass(frozen=True)
class RelayResult:
    outcome: RelayOutcome
    reply: str | None = None
