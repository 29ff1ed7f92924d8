"""Shared utilities."""

from newsbot.utils.helpers import MAX_MESSAGE_LENGTH, split_message

__all__ = ["MAX_MESSAGE_LENGTH", "split_message"]
