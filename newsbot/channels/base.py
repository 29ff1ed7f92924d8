"""Base class for chat channels."""

from abc import ABC, abstractmethod
from typing import Any

from newsbot.bus.events import ChatMessage, OutboundMessage
from newsbot.bus.queue import MessageBus


class BaseChannel(ABC):
    """A chat service: publishes inbound messages, delivers outbound ones."""

    name: str = "base"

    def __init__(self, config: Any, bus: MessageBus):
        self.config = config
        self.bus = bus
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """Connect and receive messages until stopped. Raises on fatal errors."""

    @abstractmethod
    async def stop(self) -> None:
        pass

    @abstractmethod
    async def send(self, msg: OutboundMessage) -> None:
        """Deliver a message, splitting it as the service requires."""

    async def _handle_message(
        self,
        chat_id: int,
        text: str,
        message_id: int | None = None,
        sender_id: str = "",
    ) -> None:
        msg = ChatMessage(
            chat_id=chat_id,
            text=text,
            message_id=message_id,
            sender_id=sender_id,
        )
        await self.bus.publish_inbound(msg)