"""Event types carried by the message bus."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ChatMessage:
    """A text message received from a chat."""

    chat_id: int
    text: str
    message_id: int | None = None  # Used to tag the reply
    sender_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class WebhookAlert:
    """A trading alert posted to the webhook by the charting service."""

    strategy_name: str = ""
    ticker: str = ""
    price: float = 0.0
    message: str = ""


@dataclass(frozen=True)
class OutboundMessage:
    """A message to deliver to a chat. Length is unbounded; channels chunk it."""

    chat_id: int
    content: str
    reply_to: int | None = None
