"""Conversation endpoints: list, create, retrieve and clear conversations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .core import ApiModel, Core, HTTPResponse, Page
from .messages import Message


def _data(response: HTTPResponse) -> Mapping[str, Any]:
    payload = response.payload if isinstance(response.payload, dict) else {}
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


@dataclass
class Conversation(ApiModel):
    """A conversation between a user and a bot."""

    id: str = ""
    created_at: int = 0
    meta_data: dict[str, str] | None = None
    last_section_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Conversation:
        meta = data.get("meta_data")
        return cls(
            id=data.get("id") or "",
            created_at=int(data.get("created_at") or 0),
            meta_data=dict(meta) if meta else None,
            last_section_id=data.get("last_section_id") or "",
        )


@dataclass
class ClearedConversation(ApiModel):
    """Result of clearing a conversation: the new context section."""

    id: str = ""
    conversation_id: str = ""


class Conversations:
    """Operations on conversations."""

    def __init__(self, core: Core) -> None:
        self._core = core

    def list(self, bot_id: str, page_num: int = 0, page_size: int = 0) -> Page[Conversation]:
        """List the conversations of a bot, one page at a time."""
        page_size = page_size or 20
        page_num = page_num or 1

        def fetch(num: int, size: int) -> tuple[list[Conversation], bool, int, str]:
            response = self._core.request(
                "GET",
                "/v1/conversations",
                params={"bot_id": bot_id, "page_num": str(num), "page_size": str(size)},
            )
            data = _data(response)
            items = [
                Conversation.from_dict(item)
                for item in data.get("conversations") or []
                if isinstance(item, dict)
            ]
            return items, bool(data.get("has_more")), 0, response.log_id()

        return Page(fetch, page_num, page_size)

    def create(
        self,
        messages: Iterable[Message] | None = None,
        meta_data: Mapping[str, str] | None = None,
        bot_id: str = "",
        connector_id: str = "",
    ) -> Conversation:
        """Create a conversation, optionally seeded with messages."""
        body: dict[str, Any] = {}
        wire_messages = [message.to_dict() for message in messages or ()]
        if wire_messages:
            body["messages"] = wire_messages
        if meta_data:
            body["meta_data"] = dict(meta_data)
        if bot_id:
            body["bot_id"] = bot_id
        body["connector_id"] = connector_id
        response = self._core.request("POST", "/v1/conversation/create", body)
        conversation = Conversation.from_dict(_data(response))
        conversation.http_response = response
        return conversation

    def retrieve(self, conversation_id: str) -> Conversation:
        """Fetch a conversation by id."""
        response = self._core.request(
            "GET", "/v1/conversation/retrieve", params={"conversation_id": conversation_id}
        )
        conversation = Conversation.from_dict(_data(response))
        conversation.http_response = response
        return conversation

    def clear(self, conversation_id: str) -> ClearedConversation:
        """Clear the context of a conversation, starting a new section."""
        response = self._core.request("POST", f"/v1/conversations/{conversation_id}/clear")
        data = _data(response)
        result = ClearedConversation(
            id=data.get("id") or "",
            conversation_id=data.get("conversation_id") or "",
        )
        result.http_response = response
        return result