"""Command loop.

Consumes chat messages from the bus, reads the command keyword off the front
of the text and runs the matching handler. Text that is not a known command
goes to the LLM as a prompt. Every handler ends by publishing its replies to
the bus; a failing handler is reported to the chat and the loop carries on.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from loguru import logger

from newsbot.agent.decision import make_trading_decision
from newsbot.bus.events import ChatMessage, OutboundMessage
from newsbot.bus.queue import MessageBus
from newsbot.news.base import NewsClient, NewsResult
from newsbot.news.formatting import format_analysis, format_digest, format_search_results
from newsbot.providers.base import LLMProvider
from newsbot.storage.news_store import NewsStore

DECODE_ERROR_TEXT = "Error processing news data."
HANDLER_ERROR_TEXT = "Error processing your request."
NO_ARTICLES_TEXT = "No relevant articles found for analysis."

SENTIMENT_PROMPT = "Analyze the sentiment of this news article titled '{title}': {description}"


@dataclass(frozen=True)
class Command:
    verb: str
    argument: str = ""


def parse_command(text: str) -> Command:
    """Split text into its first whitespace-delimited token and the rest.

    A ``/verb@botname`` suffix, as sent in group chats, is dropped.
    """
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return Command(verb="")
    verb = parts[0]
    if verb.startswith("/") and "@" in verb:
        verb = verb.split("@", 1)[0]
    argument = parts[1].strip() if len(parts) > 1 else ""
    return Command(verb=verb, argument=argument)


Handler = Callable[[ChatMessage, str], Awaitable[None]]


class CommandLoop:
    """Routes chat messages to news and LLM handlers.

    Commands:
    - ``/panic-news [ticker]``: CryptoPanic headlines, stored in the news table.
    - ``/compare-news [ticker]``: CryptoCompare headlines.
    - ``/news [query]`` and ``/analyze [query]``: NewsAPI search, with an LLM
      sentiment read and a trading decision per article.
    - anything else: the whole text is sent to the LLM.
    """

    def __init__(
        self,
        bus: MessageBus,
        provider: LLMProvider,
        panic_client: NewsClient,
        compare_client: NewsClient,
        search_client: NewsClient,
        db_path: Path,
        reply_to_prompts: bool = True,
    ):
        self.bus = bus
        self.provider = provider
        self.panic_client = panic_client
        self.compare_client = compare_client
        self.search_client = search_client
        self.db_path = db_path
        self.reply_to_prompts = reply_to_prompts
        self._running = False

        self.handlers: dict[str, Handler] = {
            "/panic-news": self._handle_panic_news,
            "/compare-news": self._handle_compare_news,
            "/news": self._handle_news_search,
            "/analyze": self._handle_news_search,
        }

    async def run(self) -> None:
        """Process inbound messages until ``stop()`` is called."""
        self._running = True
        logger.info("Command loop started")

        while self._running:
            try:
                # Short timeout so stop() is noticed promptly.
                msg = await asyncio.wait_for(self.bus.consume_inbound(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            await self.handle(msg)

    def stop(self) -> None:
        self._running = False
        logger.info("Command loop stopping")

    async def handle(self, msg: ChatMessage) -> None:
        """Dispatch one message. Never raises."""
        if not msg.text or not msg.text.strip():
            return

        command = parse_command(msg.text)
        handler = self.handlers.get(command.verb)
        logger.info(f"Chat {msg.chat_id}: {command.verb if handler else 'prompt'} {command.argument!r}")

        try:
            if handler:
                await handler(msg, command.argument)
            else:
                await self._handle_prompt(msg)
        except Exception as e:
            logger.error(f"Error processing message from chat {msg.chat_id}: {e}")
            await self._send(msg.chat_id, HANDLER_ERROR_TEXT)

    async def _send(self, chat_id: int, content: str, reply_to: int | None = None) -> None:
        await self.bus.publish_outbound(OutboundMessage(chat_id=chat_id, content=content, reply_to=reply_to))

    async def _report_error(self, chat_id: int, result: NewsResult, fetch_text: str) -> bool:
        """Send the user-facing text for a failed fetch. Returns True if it failed."""
        if result.ok:
            return False
        await self._send(chat_id, fetch_text if result.error == "fetch" else DECODE_ERROR_TEXT)
        return True

    async def _handle_panic_news(self, msg: ChatMessage, ticker: str) -> None:
        with NewsStore(self.db_path) as store:
            result = await self.panic_client.fetch(ticker)
            if await self._report_error(msg.chat_id, result, "Error fetching crypto news."):
                return
            inserted = store.insert_many(result.items)
        logger.info(f"Stored {inserted}/{len(result.items)} CryptoPanic item(s)")
        await self._send(msg.chat_id, format_digest("Latest Crypto News:", result.items))

    async def _handle_compare_news(self, msg: ChatMessage, ticker: str) -> None:
        result = await self.compare_client.fetch(ticker)
        if await self._report_error(msg.chat_id, result, "Error fetching news."):
            return
        await self._send(msg.chat_id, format_digest("Latest Market News:", result.items))

    async def _handle_news_search(self, msg: ChatMessage, query: str) -> None:
        result = await self.search_client.fetch(query)
        if await self._report_error(msg.chat_id, result, "Error fetching news."):
            return

        if result.items:
            for item in result.items:
                prompt = SENTIMENT_PROMPT.format(title=item.title, description=item.description)
                sentiment = await self.provider.complete(prompt)
                decision = make_trading_decision(sentiment)
                await self._send(msg.chat_id, format_analysis(item, sentiment, decision))
        else:
            await self._send(msg.chat_id, NO_ARTICLES_TEXT)

        await self._send(msg.chat_id, format_search_results(result))

    async def _handle_prompt(self, msg: ChatMessage) -> None:
        response = await self.provider.complete(msg.text)
        reply_to = msg.message_id if self.reply_to_prompts else None
        await self._send(msg.chat_id, response, reply_to=reply_to)
