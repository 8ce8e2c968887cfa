"""Shared Pydantic data models for relaybridge."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, RootModel, field_validator

# --- Enums ---


class ConversationKind(str, Enum):
    PERSONAL = "personal"
    GROUP = "group"
    OTHER = "other"


# --- Chat Models ---


class InboundMessage(BaseModel):
    """A single chat message as delivered by the transport."""

    model_config = ConfigDict(frozen=True)

    id: str
    chat_id: str
    sender_id: str
    body: str = ""
    from_me: bool = False
    sender_name: str = ""
    mentioned_ids: tuple[str, ...] = ()


class AllowList(RootModel[tuple[str, ...]]):
    """Identity tokens permitted to trigger a relay.

    Membership is exact string equality: no case folding, no suffix stripping.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _no_blank_entries(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not token.strip() for token in value):
            raise ValueError("allow-list entries must be non-empty")
        return value

    def __contains__(self, token: object) -> bool:
        return token in self.root

    def __iter__(self):  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

