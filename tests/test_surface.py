"""Tests for the chat transcript and the Python chat client."""

import asyncio
import json

import httpx
import pytest

from memchat.chat.models import ChatMessage
from memchat.chat.surface import (
    SEND_FAILED_MESSAGE,
    WELCOME_MESSAGE,
    ChatSurface,
    Transcript,
)

# -- Transcript ----------------------------------------------------------------


def test_welcome_seeds_one_message() -> None:
    t = Transcript.welcome()
    assert len(t.entries) == 1
    assert t.messages[0].role == "assistant"
    assert t.messages[0].content == WELCOME_MESSAGE
    assert not t.is_loading


def test_begin_is_pending_and_does_not_mutate() -> None:
    t0 = Transcript()
    user = ChatMessage.user("hi")
    t1 = t0.begin(user)

    assert t0.entries == ()
    assert t1.entries[-1].status == "pending"
    assert t1.is_loading


def test_confirm_settles_and_appends_reply() -> None:
    user = ChatMessage.user("hi")
    reply = ChatMessage.assistant("hello!", memory_created=False)
    t = Transcript().begin(user).confirm(user.id, reply)

    assert [e.status for e in t.entries] == ["confirmed", "confirmed"]
    assert t.messages == [user, reply]
    assert not t.is_loading


def test_fail_settles_and_appends_error() -> None:
    user = ChatMessage.user("hi")
    t = Transcript().begin(user).fail(user.id, "❌ Error: nope")

    assert t.entries[0].status == "error"
    assert t.messages[-1].role == "assistant"
    assert t.messages[-1].content == "❌ Error: nope"
    assert not t.is_loading


def test_confirm_unknown_id_raises() -> None:
    with pytest.raises(KeyError):
        Transcript().confirm("missing", ChatMessage.assistant("x"))


# -- ChatSurface ---------------------------------------------------------------


def _reply_body(content: str = "👋 Hello!", memory_created: bool = False) -> dict:
    return {
        "success": True,
        "userMessage": ChatMessage.user("hello").to_wire(),
        "assistantMessage": ChatMessage.assistant(content, memory_created).to_wire(),
        "memoriesFound": 0,
    }


def _surface(handler) -> ChatSurface:
    return ChatSurface(
        user_id="u1",
        base_url="http://chat.test",
        transport=httpx.MockTransport(handler),
    )


async def test_send_appends_user_and_reply() -> None:
    seen: list[httpx.Request] = []
    body = _reply_body(memory_created=True)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=body)

    surface = _surface(handler)
    assert await surface.send("  hello  ") is True

    assert json.loads(seen[0].content) == {"userId": "u1", "message": "hello"}
    assert str(seen[0].url) == "http://chat.test/api/chat"

    messages = surface.transcript.messages
    assert [m.role for m in messages] == ["assistant", "user", "assistant"]
    assert messages[1].content == "hello"
    assert messages[2].content == "👋 Hello!"
    assert messages[2].memory_created is True
    assert not surface.is_loading


async def test_reply_timestamp_is_parsed() -> None:
    body = _reply_body()
    surface = _surface(lambda request: httpx.Response(200, json=body))
    await surface.send("hello")

    reply = surface.transcript.messages[-1]
    assert reply.timestamp == ChatMessage.model_validate(body["assistantMessage"]).timestamp
    assert reply.timestamp.tzinfo is not None


async def test_handler_error_becomes_error_bubble() -> None:
    surface = _surface(
        lambda request: httpx.Response(500, json={"error": "Failed to process message"})
    )
    await surface.send("hello")

    assert surface.transcript.entries[1].status == "error"
    assert surface.transcript.messages[-1].content == "❌ Error: Failed to process message"
    assert not surface.is_loading


async def test_transport_failure_becomes_error_bubble() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    surface = _surface(handler)
    await surface.send("hello")

    assert surface.transcript.messages[-1].content == SEND_FAILED_MESSAGE
    assert not surface.is_loading


async def test_non_json_reply_is_transport_failure() -> None:
    surface = _surface(lambda request: httpx.Response(502, text="Bad Gateway"))
    await surface.send("hello")
    assert surface.transcript.messages[-1].content == SEND_FAILED_MESSAGE


async def test_unexpected_error_settles_turn_and_allows_next_send() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return httpx.Response(200, json=_reply_body())

    surface = _surface(handler)
    await surface.send("hello")

    assert surface.transcript.entries[1].status == "error"
    assert surface.transcript.messages[-1].content == SEND_FAILED_MESSAGE
    assert not surface.is_loading

    assert await surface.send("again") is True
    assert surface.transcript.entries[-2].status == "confirmed"
    assert len(calls) == 2


async def test_invalid_base_url_settles_turn() -> None:
    surface = ChatSurface(user_id="u1", base_url="http://[::1")
    await surface.send("hello")

    assert surface.transcript.messages[-1].content == SEND_FAILED_MESSAGE
    assert not surface.is_loading


async def test_cancelled_send_settles_turn() -> None:
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(60)
        return httpx.Response(200, json=_reply_body())

    surface = _surface(handler)
    task = asyncio.create_task(surface.send("hello"))
    await started.wait()
    assert surface.is_loading

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert surface.transcript.entries[1].status == "error"
    assert not surface.is_loading


async def test_blank_input_is_rejected() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_reply_body())

    surface = _surface(handler)
    assert await surface.send("   ") is False
    assert calls == []
    assert len(surface.transcript.entries) == 1


async def test_send_rejected_while_loading() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_reply_body())

    surface = _surface(handler)
    surface.transcript = surface.transcript.begin(ChatMessage.user("in flight"))

    assert await surface.send("second") is False
    assert calls == []
