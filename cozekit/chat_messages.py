"""Listing the messages produced by a chat."""

from __future__ import annotations

from dataclasses import dataclass, field

from .core import ApiModel, Core
from .messages import Message


@dataclass
class MessageList(ApiModel):
    """The messages of one chat."""

    messages: list[Message] = field(default_factory=list)


class ChatMessages:
    """Messages belonging to chats."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def list(self, conversation_id: str = "", chat_id: str = "") -> MessageList:
        """Return every message of a chat in a conversation."""
        response = self._core.request(
            "GET",
            "/v3/chat/message/list",
            params={"conversation_id": conversation_id, "chat_id": chat_id},
        )
        payload = response.payload if isinstance(response.payload, dict) else {}
        items = payload.get("data")
        messages = [Message.from_dict(item) for item in items or [] if isinstance(item, dict)]
        result = MessageList(messages=messages)
        result.http_response = response
        return result