import json

import httpx
import pytest

from cozekit.core import Core, CozeAPIError
from cozekit.conversations import Conversations
from cozekit.messages import Message


def _reply(status, data=None):
    payload = {"code": 0, "msg": ""}
    if data is not None:
        payload["data"] = data
    return httpx.Response(status, json=payload, headers={"X-Tt-Logid": "test_log_id"})


def _make(handler):
    seen = []

    def wrapped(request):
        seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(wrapped))
    return Conversations(Core(client=client)), seen


def test_list_conversations_success():
    data = {
        "has_more": True,
        "conversations": [
            {"id": "conv1", "created_at": 1234567890, "last_section_id": "section1",
             "meta_data": {"key1": "value1"}},
            {"id": "conv2", "created_at": 1234567891, "last_section_id": "section2",
             "meta_data": {"key2": "value2"}},
        ],
    }
    conversations, seen = _make(lambda req: _reply(200, data))
    page = conversations.list("test_bot_id", page_num=1, page_size=20)

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/v1/conversations"
    assert request.url.params["bot_id"] == "test_bot_id"
    assert request.url.params["page_num"] == "1"
    assert request.url.params["page_size"] == "20"

    assert page.has_more is True
    assert len(page.items) == 2
    first, second = page.items
    assert first.id == "conv1"
    assert first.created_at == 1234567890
    assert first.last_section_id == "section1"
    assert first.meta_data["key1"] == "value1"
    assert second.id == "conv2"
    assert second.created_at == 1234567891
    assert second.last_section_id == "section2"
    assert second.meta_data["key2"] == "value2"


def test_create_conversation_success():
    data = {"id": "conv1", "created_at": 1234567890, "last_section_id": "section1",
            "meta_data": {"key1": "value1"}}
    conversations, seen = _make(lambda req: _reply(200, data))
    resp = conversations.create(
        messages=[Message(role="user", content="Hello")],
        meta_data={"key1": "value1"},
        bot_id="test_bot_id",
    )

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/conversation/create"
    body = json.loads(request.content)
    assert body["bot_id"] == "test_bot_id"
    assert body["meta_data"] == {"key1": "value1"}
    assert body["messages"][0]["content"] == "Hello"
    assert body["connector_id"] == ""

    assert resp.log_id() == "test_log_id"
    assert resp.id == "conv1"
    assert resp.created_at == 1234567890
    assert resp.last_section_id == "section1"
    assert resp.meta_data["key1"] == "value1"


def test_create_omits_empty_optional_fields():
    conversations, seen = _make(lambda req: _reply(200, {"id": "conv9"}))
    resp = conversations.create()
    body = json.loads(seen[0].content)
    assert body == {"connector_id": ""}
    assert resp.id == "conv9"


def test_retrieve_conversation_success():
    data = {"id": "conv1", "created_at": 1234567890, "last_section_id": "section1",
            "meta_data": {"key1": "value1"}}
    conversations, seen = _make(lambda req: _reply(200, data))
    resp = conversations.retrieve("conv1")

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/v1/conversation/retrieve"
    assert request.url.params["conversation_id"] == "conv1"

    assert resp.log_id() == "test_log_id"
    assert resp.id == "conv1"
    assert resp.created_at == 1234567890
    assert resp.last_section_id == "section1"
    assert resp.meta_data["key1"] == "value1"


def test_clear_conversation_success():
    data = {"conversation_id": "conv1", "id": "new_section"}
    conversations, seen = _make(lambda req: _reply(200, data))
    resp = conversations.clear("conv1")

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/v1/conversations/conv1/clear"
    assert resp.log_id() == "test_log_id"
    assert resp.conversation_id == "conv1"
    assert resp.id == "new_section"


def test_list_conversations_default_pagination():
    conversations, seen = _make(
        lambda req: _reply(200, {"has_more": False, "conversations": []})
    )
    page = conversations.list("test_bot_id")

    assert seen[0].url.params["page_num"] == "1"
    assert seen[0].url.params["page_size"] == "20"
    assert page.has_more is False
    assert page.items == []


def test_list_iterates_following_pages():
    def handler(request):
        num = request.url.params["page_num"]
        if num == "1":
            return _reply(200, {"has_more": True, "conversations": [{"id": "a"}]})
        return _reply(200, {"has_more": False, "conversations": [{"id": "b"}]})

    conversations, seen = _make(handler)
    ids = [conv.id for conv in conversations.list("bot", page_size=1)]
    assert ids == ["a", "b"]
    assert len(seen) == 2


def test_retrieve_error_raises():
    conversations, _ = _make(lambda req: _reply(400))
    with pytest.raises(CozeAPIError) as info:
        conversations.retrieve("missing")
    assert info.value.status == 400