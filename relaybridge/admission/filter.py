"""Admission filter — decides which inbound messages are relayed.

Rules, in order:
1. Messages sent by the bot's own account are always rejected.
2. Personal chats: admitted iff the sender is on the allow-list.
3. Group chats: admitted iff at least one mentioned identity is on the
   allow-list. The group sender is not consulted.
4. Any other conversation kind is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from relaybridge.models import AllowList, ConversationKind, InboundMessage

GROUP_SUFFIX = "@g.us"
PERSONAL_SUFFIXES = ("@c.us", "@s.whatsapp.net", "@lid")


def conversation_kind(chat_id: str) -> ConversationKind:
    """Classify a conversation by the suffix of its identity."""
    if chat_id.endswith(GROUP_SUFFIX):
        return ConversationKind.GROUP
    if chat_id.endswith(PERSONAL_SUFFIXES):
        return ConversationKind.PERSONAL
    return ConversationKind.OTHER


@dataclass(frozen=True)
class AdmissionDecision:
    admitted: bool
    reason: str
    kind: ConversationKind


class AdmissionFilter:
    """Read-only access-control predicate over inbound messages."""

    def __init__(self, allow_list: AllowList) -> None:
        self._allow_list = allow_list

    @property
    def allow_list(self) -> AllowList:
        return self._allow_list

    def evaluate(self, message: InboundMessage) -> AdmissionDecision:
        kind = conversation_kind(message.chat_id)

        if message.from_me:
            return AdmissionDecision(False, "self_sent", kind)

        if kind is ConversationKind.PERSONAL:
            if message.sender_id in self._allow_list:
                return AdmissionDecision(True, "sender_allowed", kind)
            return AdmissionDecision(False, "sender_not_allowed", kind)

        if kind is ConversationKind.GROUP:
            if not message.mentioned_ids:
                return AdmissionDecision(False, "no_mentions", kind)
            if any(m in self._allow_list for m in message.mentioned_ids):
                return AdmissionDecision(True, "mention_allowed", kind)
            return AdmissionDecision(False, "mention_not_allowed", kind)

        return AdmissionDecision(False, "unsupported_conversation", kind)

    def admits(self, message: InboundMessage) -> bool:
        return self.evaluate(message).admitted
