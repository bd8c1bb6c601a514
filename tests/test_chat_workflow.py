from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from legallens.errors import TransportFailure, UnknownDocument
from legallens.models import DocumentSummary
from legallens.registry.service import DocumentRegistry
from legallens.services.chat import ChatWorkflow
from legallens.services.generation import DEFAULT_REPLY, TemplateReplyGenerator
from legallens.services.notifications import QueueNotificationSink


class EchoGenerator:
    def __init__(self, delays: dict[str, float] | None = None) -> None:
        self.delays = delays or {}

    async def reply(self, document_id: str, text: str) -> str:
        await asyncio.sleep(self.delays.get(text, 0))
        return f"echo:{text}"


class BrokenGenerator:
    async def reply(self, document_id: str, text: str) -> str:
        raise TransportFailure("timeout")


def _registry() -> DocumentRegistry:
    registry = DocumentRegistry()
    registry.store_history(
        [
            DocumentSummary(
                id="42",
                name="Lease.pdf",
                type="lease",
                uploaded_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                status="completed",
                risk_level="low",
            ),
        ],
    )
    return registry


@pytest.mark.asyncio
async def test_send_appends_user_message_then_reply():
    registry = _registry()
    chat = ChatWorkflow(registry, EchoGenerator(), QueueNotificationSink())

    exchange = await chat.send("42", "  What is the rent?  ")

    assert exchange is not None and not exchange.failed
    assert exchange.user.content == "What is the rent?"
    assert exchange.user.delivery_status == "sent"
    assert exchange.reply.content == "echo:What is the rent?"
    messages = registry.get_conversation("42").messages
    assert [m.role for m in messages] == ["assistant", "user", "assistant"]


@pytest.mark.asyncio
async def test_reply_failure_marks_user_message_error():
    registry = _registry()
    sink = QueueNotificationSink()
    chat = ChatWorkflow(registry, BrokenGenerator(), sink)

    exchange = await chat.send("42", "hello")

    assert exchange.failed
    messages = registry.get_conversation("42").messages
    assert len(messages) == 2
    assert messages[1].delivery_status == "error"
    assert [(n.level, n.message) for n in sink.drain()] == [("error", "Failed to send message")]


@pytest.mark.asyncio
async def test_blank_message_is_ignored():
    registry = _registry()
    chat = ChatWorkflow(registry, EchoGenerator(), QueueNotificationSink())
    assert await chat.send("42", "   ") is None
    assert len(registry.get_conversation("42")) == 1


@pytest.mark.asyncio
async def test_concurrent_sends_keep_send_order():
    registry = _registry()
    chat = ChatWorkflow(registry, EchoGenerator({"first": 0.03, "second": 0.0}), QueueNotificationSink())

    await asyncio.gather(chat.send("42", "first"), chat.send("42", "second"))

    contents = [m.content for m in registry.get_conversation("42").messages[1:]]
    assert contents == ["first", "echo:first", "second", "echo:second"]


@pytest.mark.asyncio
async def test_exchange_survives_caller_cancellation():
    registry = _registry()
    chat = ChatWorkflow(registry, EchoGenerator({"slow": 0.02}), QueueNotificationSink())

    caller = asyncio.create_task(chat.send("42", "slow"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    caller.cancel()
    await chat.drain()

    contents = [m.content for m in registry.get_conversation("42").messages]
    assert contents[-2:] == ["slow", "echo:slow"]


@pytest.mark.asyncio
async def test_unknown_document_surfaces_to_caller():
    chat = ChatWorkflow(DocumentRegistry(), EchoGenerator(), QueueNotificationSink())
    with pytest.raises(UnknownDocument):
        await chat.send("missing", "hi")


@pytest.mark.asyncio
async def test_template_generator_matches_keywords():
    generator = TemplateReplyGenerator()
    assert "key risks" in await generator.reply("1", "What are the RISKS here?")
    assert "compensation package" in await generator.reply("1", "tell me about salary")
    assert await generator.reply("1", "hello") == DEFAULT_REPLY
