"""Async message bus between the chat channel, the command loop and the webhook."""

import asyncio
from typing import Callable, Awaitable

from loguru import logger

from newsbot.bus.events import ChatMessage, OutboundMessage


class MessageBus:
    """Inbound chat messages in, outbound messages out.

    Outbound messages are delivered by ``dispatch_outbound`` to every
    subscribed callback. Producers only wait for the enqueue, never for the
    actual send.
    """

    def __init__(self):
        self.inbound: asyncio.Queue[ChatMessage] = asyncio.Queue()
        self.outbound: asyncio.Queue[OutboundMessage] = asyncio.Queue()
        self._outbound_subscribers: list[Callable[[OutboundMessage], Awaitable[None]]] = []
        self._running = False

    async def publish_inbound(self, msg: ChatMessage) -> None:
        await self.inbound.put(msg)

    async def consume_inbound(self) -> ChatMessage:
        return await self.inbound.get()

    async def publish_outbound(self, msg: OutboundMessage) -> None:
        await self.outbound.put(msg)

    def subscribe_outbound(self, callback: Callable[[OutboundMessage], Awaitable[None]]) -> None:
        self._outbound_subscribers.append(callback)

    async def dispatch_outbound(self) -> None:
        """Deliver outbound messages until ``stop()`` is called."""
        self._running = True
        while self._running:
            try:
                msg = await asyncio.wait_for(self.outbound.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            for callback in self._outbound_subscribers:
                try:
                    await callback(msg)
                except Exception as e:
                    logger.error(f"Error dispatching message to chat {msg.chat_id}: {e}")

    def stop(self) -> None:
        self._running = False

