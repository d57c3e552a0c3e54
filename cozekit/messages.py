"""Chat message models and helpers for building messages."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, TypeVar

E = TypeVar("E", bound=Enum)


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class MessageRole(_StrEnum):
    """Who sent a message."""

    UNKNOWN = "unknown"
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(_StrEnum):
    """What kind of message it is."""

    QUESTION = "question"
    ANSWER = "answer"
    FUNCTION_CALL = "function_call"
    TOOL_OUTPUT = "tool_output"
    TOOL_RESPONSE = "tool_response"
    FOLLOW_UP = "follow_up"
    UNKNOWN = ""


class MessageContentType(_StrEnum):
    """How the content of a message is encoded."""

    TEXT = "text"
    OBJECT_STRING = "object_string"
    CARD = "card"
    AUDIO = "audio"


class MessageObjectStringType(_StrEnum):
    """Kind of one part of a multimodal message."""

    TEXT = "text"
    FILE = "file"
    IMAGE = "image"
    AUDIO = "audio"


def _coerce(enum_cls: type[E], value: Any, default: E) -> E | str:
    """Map a wire value onto ``enum_cls``, keeping unknown strings as they are."""
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def _wire(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass
class MessageObjectString:
    """One part of a multimodal message: text, or a file, image or audio."""

    type: MessageObjectStringType
    text: str = ""
    file_id: str = ""
    file_url: str = ""

    def to_dict(self) -> dict[str, str]:
        data = {"type": _wire(self.type)}
        for key in ("text", "file_id", "file_url"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data


@dataclass
class Message:
    """A message in a conversation."""

    role: MessageRole | str = MessageRole.UNKNOWN
    type: MessageType | str = MessageType.UNKNOWN
    content: str = ""
    reasoning_content: str = ""
    content_type: MessageContentType | str = ""
    meta_data: dict[str, str] | None = None
    id: str = ""
    conversation_id: str = ""
    section_id: str = ""
    bot_id: str = ""
    chat_id: str = ""
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "role": _wire(self.role),
            "type": _wire(self.type),
            "content": self.content,
            "reasoning_content": self.reasoning_content,
            "content_type": _wire(self.content_type),
        }
        if self.meta_data:
            data["meta_data"] = dict(self.meta_data)
        data.update(
            id=self.id,
            conversation_id=self.conversation_id,
            section_id=self.section_id,
            bot_id=self.bot_id,
            chat_id=self.chat_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        content_type = data.get("content_type")
        meta = data.get("meta_data")
        return cls(
            role=_coerce(MessageRole, data.get("role"), MessageRole.UNKNOWN),
            type=_coerce(MessageType, data.get("type"), MessageType.UNKNOWN),
            content=data.get("content") or "",
            reasoning_content=data.get("reasoning_content") or "",
            content_type=_coerce(MessageContentType, content_type, "") if content_type else "",
            meta_data=dict(meta) if meta else None,
            id=data.get("id") or "",
            conversation_id=data.get("conversation_id") or "",
            section_id=data.get("section_id") or "",
            bot_id=data.get("bot_id") or "",
            chat_id=data.get("chat_id") or "",
            created_at=int(data.get("created_at") or 0),
            updated_at=int(data.get("updated_at") or 0),
        )


def build_user_question_text(content: str, meta_data: dict[str, str] | None = None) -> Message:
    """A plain-text question from the user."""
    return Message(
        role=MessageRole.USER,
        type=MessageType.QUESTION,
        content=content,
        content_type=MessageContentType.TEXT,
        meta_data=meta_data,
    )


def build_user_question_objects(
    objects: Iterable[MessageObjectString], meta_data: dict[str, str] | None = None
) -> Message:
    """A multimodal question from the user, its parts encoded as JSON."""
    content = json.dumps(
        [obj.to_dict() for obj in objects], separators=(",", ":"), ensure_ascii=False
    )
    return Message(
        role=MessageRole.USER,
        type=MessageType.QUESTION,
        content=content,
        content_type=MessageContentType.OBJECT_STRING,
        meta_data=meta_data,
    )


def build_assistant_answer(content: str, meta_data: dict[str, str] | None = None) -> Message:
    """A plain-text answer from the assistant."""
    return Message(
        role=MessageRole.ASSISTANT,
        type=MessageType.ANSWER,
        content=content,
        content_type=MessageContentType.TEXT,
        meta_data=meta_data,
    )


def new_text_message_object(text: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.TEXT, text=text)


def new_image_message_object_by_url(file_url: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.IMAGE, file_url=file_url)


def new_image_message_object_by_id(file_id: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.IMAGE, file_id=file_id)


def new_file_message_object_by_id(file_id: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.FILE, file_id=file_id)


def new_file_message_object_by_url(file_url: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.FILE, file_url=file_url)


def new_audio_message_object_by_id(file_id: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.AUDIO, file_id=file_id)


def new_audio_message_object_by_url(file_url: str) -> MessageObjectString:
    return MessageObjectString(type=MessageObjectStringType.AUDIO, file_url=file_url)