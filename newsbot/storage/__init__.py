"""Persistence."""

from newsbot.storage.news_store import NewsStore, ensure_schema

__all__ = ["NewsStore", "ensure_schema"]
