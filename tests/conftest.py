"""Shared test fixtures for relaybridge."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from relaybridge.models import AllowList, InboundMessage
from relaybridge.transport.base import Transport

ALLOWED_USER = "15550001111@c.us"
OTHER_ALLOWED_USER = "15550002222@c.us"
STRANGER = "15559999999@c.us"
GROUP_CHAT = "120363000000000001@g.us"


class RecordingTransport(Transport):
    """Transport double that records replies instead of sending them."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.replies: list[tuple[InboundMessage, str]] = []
        self._fail_with = fail_with

    async def reply(self, message: InboundMessage, text: str) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self.replies.append((message, text))


@pytest.fixture
def allow_list() -> AllowList:
    return AllowList((ALLOWED_USER, OTHER_ALLOWED_USER))


@pytest.fixture
def allow_list_file(tmp_path: Path):
    """Write an allow-list JSON file and return its path."""

    def _create(tokens: Any = (ALLOWED_USER, OTHER_ALLOWED_USER)) -> str:
        path = tmp_path / "allow-list.json"
        path.write_text(json.dumps(list(tokens) if isinstance(tokens, tuple) else tokens))
        return str(path)

    return _create


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def config_dir() -> Path:
    return Path(__file__).parent.parent / "config"


# --- Factory functions for test data ---


def make_message(**kwargs: Any) -> InboundMessage:
    """Factory for a personal-chat InboundMessage from an allow-listed sender."""
    defaults: dict[str, Any] = {
        "id": "false_15550001111@c.us_3EB0ABCDEF",
        "chat_id": ALLOWED_USER,
        "sender_id": ALLOWED_USER,
        "body": "hello",
        "from_me": False,
        "sender_name": "Alice",
        "mentioned_ids": (),
    }
    defaults.update(kwargs)
    return InboundMessage(**defaults)


def make_group_message(**kwargs: Any) -> InboundMessage:
    defaults: dict[str, Any] = {
        "id": "false_120363000000000001@g.us_3EB0FEDCBA",
        "chat_id": GROUP_CHAT,
        "sender_id": GROUP_CHAT,
        "body": "@bot what's up",
        "sender_name": "Bob",
        "mentioned_ids": (ALLOWED_USER,),
    }
    defaults.update(kwargs)
    return make_message(**defaults)


def make_waha_event(event: str = "message.any", **payload: Any) -> dict[str, Any]:
    """Factory for a WAHA webhook event carrying a text message."""
    body: dict[str, Any] = {
        "id": "false_15550001111@c.us_3EB0ABCDEF",
        "timestamp": 1700000000,
        "from": ALLOWED_USER,
        "fromMe": False,
        "to": "15550000000@c.us",
        "body": "hello",
        "hasMedia": False,
        "_data": {"notifyName": "Alice"},
    }
    body.update(payload)
    return {"id": "evt_1", "event": event, "session": "default", "payload": body}
