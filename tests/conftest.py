from __future__ import annotations

from typing import Any

import pytest

from newsbot.bus.queue import MessageBus
from newsbot.news.base import NewsItem, NewsResult
from newsbot.providers.base import LLMProvider, LLMResponse


class FakeProvider(LLMProvider):
    def __init__(self, reply: str = "fake reply") -> None:
        super().__init__()
        self.reply = reply
        self.prompts: list[str] = []

    async def chat(self, messages: list[dict[str, Any]], model=None, max_tokens=None, temperature=None) -> LLMResponse:
        self.prompts.append(messages[-1]["content"])
        return LLMResponse(content=self.reply)


class FakeNewsClient:
    def __init__(self, result: NewsResult | None = None) -> None:
        self.result = result or NewsResult()
        self.tickers: list[str] = []

    async def fetch(self, ticker: str = "") -> NewsResult:
        self.tickers.append(ticker)
        return self.result


def drain_outbound(bus: MessageBus) -> list:
    messages = []
    while not bus.outbound.empty():
        messages.append(bus.outbound.get_nowait())
    return messages


def make_items(*titles: str) -> list[NewsItem]:
    return [NewsItem(title=t, url=f"https://example.com/{i}") for i, t in enumerate(titles)]


@pytest.fixture
def bus() -> MessageBus:
    return MessageBus()
