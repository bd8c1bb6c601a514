"""Chat workflow: append the user's message, ask the reply generator, append the answer."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Dict
from uuid import uuid4

from legallens.metrics.observability import WorkflowMetrics, bind_correlation_id, clear_correlation_id, get_logger
from legallens.models import Message
from legallens.registry.service import DocumentRegistry
from legallens.services.generation import ReplyGenerator
from legallens.services.notifications import NotificationSink


@dataclass(frozen=True)
class ChatExchange:
    """Outcome of one send: the user's message and the reply, if any."""

    user: Message
    reply: Message | None

    @property
    def failed(self) -> bool:
        return self.reply is None


class ChatWorkflow:
    """Sends chat messages for a document.

    Sends to the same conversation run one at a time in call order, so a
    user message is always followed by its own reply. Exchanges run in
    their own task; cancelling the caller does not cancel the exchange.
    """

    def __init__(self, registry: DocumentRegistry, generator: ReplyGenerator, notifications: NotificationSink) -> None:
        self._registry = registry
        self._generator = generator
        self._notifications = notifications
        self._queues: Dict[str, asyncio.Lock] = {}
        self._inflight: set[asyncio.Task[ChatExchange]] = set()
        self._logger = get_logger("chat")

    async def send(self, document_id: str, text: str) -> ChatExchange | None:
        content = text.strip()
        if not content:
            return None
        task = asyncio.create_task(self._exchange(document_id, content))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return await asyncio.shield(task)

    async def drain(self) -> None:
        """Wait for every exchange still in flight."""

        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _exchange(self, document_id: str, content: str) -> ChatExchange:
        queue = self._queues.setdefault(document_id, asyncio.Lock())
        async with queue:
            bind_correlation_id(uuid4().hex)
            try:
                return await self._send_one(document_id, content)
            finally:
                clear_correlation_id()

    async def _send_one(self, document_id: str, content: str) -> ChatExchange:
        user = Message(id=f"user-{uuid4().hex}", role="user", content=content, delivery_status="sending")
        self._registry.append_message(document_id, user)
        user = self._registry.set_delivery_status(document_id, user.id, "sent")
        start = time.perf_counter()
        try:
            answer = await self._generator.reply(document_id, content)
        except Exception as exc:
            WorkflowMetrics.observe_reply(time.perf_counter() - start, "error")
            self._logger.warning("chat.reply_failed", document_id=document_id, error=str(exc))
            user = self._registry.set_delivery_status(document_id, user.id, "error")
            self._notifications.error("Failed to send message")
            return ChatExchange(user=user, reply=None)
        WorkflowMetrics.observe_reply(time.perf_counter() - start, "success")
        reply = Message(id=f"assistant-{uuid4().hex}", role="assistant", content=answer)
        self._registry.append_message(document_id, reply)
        self._logger.info("chat.reply", document_id=document_id, length=len(answer))
        return ChatExchange(user=user, reply=reply)
