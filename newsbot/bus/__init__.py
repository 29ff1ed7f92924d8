"""Message bus package."""

from newsbot.bus.events import ChatMessage, OutboundMessage, WebhookAlert
from newsbot.bus.queue import MessageBus

__all__ = ["MessageBus", "ChatMessage", "WebhookAlert", "OutboundMessage"]
