import asyncio
import sqlite3

import pytest

from newsbot.agent.loop import (
    DECODE_ERROR_TEXT,
    HANDLER_ERROR_TEXT,
    NO_ARTICLES_TEXT,
    Command,
    CommandLoop,
    parse_command,
)
from newsbot.bus.events import ChatMessage
from newsbot.news.base import NewsItem, NewsResult

from conftest import FakeNewsClient, FakeProvider, drain_outbound, make_items


def _loop(bus, tmp_path, provider=None, panic=None, compare=None, search=None, **kwargs) -> CommandLoop:
    return CommandLoop(
        bus=bus,
        provider=provider or FakeProvider(),
        panic_client=panic or FakeNewsClient(),
        compare_client=compare or FakeNewsClient(),
        search_client=search or FakeNewsClient(),
        db_path=tmp_path / "news.db",
        **kwargs,
    )


@pytest.mark.parametrize(
    "text, expected",
    [
        ("/panic-news BTC", Command("/panic-news", "BTC")),
        ("/news", Command("/news", "")),
        ("  /analyze   bitcoin etf  ", Command("/analyze", "bitcoin etf")),
        ("/compare-news@my_bot eth", Command("/compare-news", "eth")),
        ("hello there", Command("hello", "there")),
        ("", Command("")),
    ],
)
def test_parse_command(text, expected):
    assert parse_command(text) == expected


@pytest.mark.asyncio
async def test_panic_news_routes_with_ticker_and_persists(bus, tmp_path):
    panic = FakeNewsClient(NewsResult(items=make_items("BTC rally", "BTC halving")))
    provider = FakeProvider()
    loop = _loop(bus, tmp_path, provider=provider, panic=panic)

    await loop.handle(ChatMessage(chat_id=7, text="/panic-news BTC", message_id=1))

    assert panic.tickers == ["BTC"]
    assert provider.prompts == []
    sent = drain_outbound(bus)
    assert len(sent) == 1
    assert sent[0].content.startswith("Latest Crypto News:")
    assert "BTC halving" in sent[0].content

    with sqlite3.connect(tmp_path / "news.db") as conn:
        rows = conn.execute("SELECT title, url FROM news ORDER BY id").fetchall()
    assert rows == [("BTC rally", "https://example.com/0"), ("BTC halving", "https://example.com/1")]


@pytest.mark.asyncio
async def test_free_text_goes_to_llm_as_reply(bus, tmp_path):
    provider = FakeProvider(reply="gm")
    loop = _loop(bus, tmp_path, provider=provider)

    await loop.handle(ChatMessage(chat_id=7, text="hello there", message_id=42))

    assert provider.prompts == ["hello there"]
    sent = drain_outbound(bus)
    assert len(sent) == 1
    assert sent[0].chat_id == 7
    assert sent[0].content == "gm"
    assert sent[0].reply_to == 42


@pytest.mark.asyncio
async def test_reply_tagging_can_be_disabled(bus, tmp_path):
    loop = _loop(bus, tmp_path, reply_to_prompts=False)
    await loop.handle(ChatMessage(chat_id=7, text="hi", message_id=42))
    assert drain_outbound(bus)[0].reply_to is None


@pytest.mark.asyncio
async def test_compare_news_does_not_persist(bus, tmp_path):
    compare = FakeNewsClient(NewsResult(items=make_items("ETH upgrade")))
    loop = _loop(bus, tmp_path, compare=compare)

    await loop.handle(ChatMessage(chat_id=1, text="/compare-news ETH"))

    assert compare.tickers == ["ETH"]
    sent = drain_outbound(bus)
    assert [m.content.splitlines()[0] for m in sent] == ["Latest Market News:"]
    assert not (tmp_path / "news.db").exists()


@pytest.mark.asyncio
@pytest.mark.parametrize("verb", ["/news", "/analyze"])
async def test_news_search_analyzes_each_article(bus, tmp_path, verb):
    item = NewsItem(title="Bitcoin ETF approved", url="https://n.example/1", description="Big day")
    search = FakeNewsClient(NewsResult(items=[item], total_results=1))
    provider = FakeProvider(reply="Very bullish outlook")
    loop = _loop(bus, tmp_path, provider=provider, search=search)

    await loop.handle(ChatMessage(chat_id=3, text=f"{verb} bitcoin"))

    assert search.tickers == ["bitcoin"]
    assert provider.prompts == ["Analyze the sentiment of this news article titled 'Bitcoin ETF approved': Big day"]
    analysis, listing = drain_outbound(bus)
    assert "Decision: Buy" in analysis.content
    assert "Sentiment: Very bullish outlook" in analysis.content
    assert listing.content.startswith("Latest News:")
    assert "Title: Bitcoin ETF approved" in listing.content


@pytest.mark.asyncio
async def test_news_search_without_articles(bus, tmp_path):
    loop = _loop(bus, tmp_path, search=FakeNewsClient(NewsResult(total_results=0)))

    await loop.handle(ChatMessage(chat_id=3, text="/news nothing"))

    contents = [m.content for m in drain_outbound(bus)]
    assert contents == [NO_ARTICLES_TEXT, "No recent news found for the given topic."]


@pytest.mark.asyncio
async def test_fetch_and_decode_errors_become_messages(bus, tmp_path):
    loop = _loop(
        bus,
        tmp_path,
        panic=FakeNewsClient(NewsResult(error="fetch")),
        compare=FakeNewsClient(NewsResult(error="decode")),
    )

    await loop.handle(ChatMessage(chat_id=1, text="/panic-news"))
    await loop.handle(ChatMessage(chat_id=1, text="/compare-news"))

    contents = [m.content for m in drain_outbound(bus)]
    assert contents == ["Error fetching crypto news.", DECODE_ERROR_TEXT]


@pytest.mark.asyncio
async def test_handler_exception_is_reported_and_loop_survives(bus, tmp_path):
    class BrokenClient:
        async def fetch(self, ticker=""):
            raise RuntimeError("boom")

    loop = _loop(bus, tmp_path, compare=BrokenClient())

    await loop.handle(ChatMessage(chat_id=5, text="/compare-news"))
    await loop.handle(ChatMessage(chat_id=5, text="still alive?"))

    contents = [m.content for m in drain_outbound(bus)]
    assert contents == [HANDLER_ERROR_TEXT, "fake reply"]


@pytest.mark.asyncio
async def test_empty_messages_are_skipped(bus, tmp_path):
    provider = FakeProvider()
    loop = _loop(bus, tmp_path, provider=provider)

    await loop.handle(ChatMessage(chat_id=1, text="   "))

    assert provider.prompts == []
    assert drain_outbound(bus) == []


@pytest.mark.asyncio
async def test_run_consumes_bus_until_stopped(bus, tmp_path):
    loop = _loop(bus, tmp_path)
    task = asyncio.create_task(loop.run())

    await bus.publish_inbound(ChatMessage(chat_id=9, text="ping"))
    reply = await asyncio.wait_for(bus.outbound.get(), timeout=2)

    loop.stop()
    await asyncio.wait_for(task, timeout=3)
    assert reply.content == "fake reply"
    assert reply.chat_id == 9
