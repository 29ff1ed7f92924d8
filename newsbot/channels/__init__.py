"""Chat channels."""

from newsbot.channels.base import BaseChannel
from newsbot.channels.telegram import TelegramChannel

__all__ = ["BaseChannel", "TelegramChannel"]
