"""Process entry point.

Builds every component once, then runs four tasks side by side: Telegram
polling, the command loop, outbound delivery and the webhook server. The
first task to fail takes the process down; everything is stopped in reverse
order on the way out.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from newsbot.agent.loop import CommandLoop
from newsbot.bus.queue import MessageBus
from newsbot.channels.telegram import TelegramChannel
from newsbot.config.loader import ConfigError, load_config
from newsbot.config.schema import Config
from newsbot.gateway.server import build_server, create_app
from newsbot.news import CryptoCompareClient, CryptoPanicClient, NewsAPIClient
from newsbot.providers.litellm_provider import LiteLLMProvider
from newsbot.storage.news_store import ensure_schema
from newsbot.utils.logging import setup_logging


async def run(config: Config) -> None:
    bus = MessageBus()
    channel = TelegramChannel(config.telegram, bus)
    provider = LiteLLMProvider(
        api_key=config.llm.api_key,
        api_base=config.llm.api_base,
        default_model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        temperature=config.llm.temperature,
    )
    loop = CommandLoop(
        bus=bus,
        provider=provider,
        panic_client=CryptoPanicClient(config.news.cryptopanic_token, timeout=config.news.timeout),
        compare_client=CryptoCompareClient(
            config.news.cryptocompare_api_key,
            categories=config.news.cryptocompare_categories,
            timeout=config.news.timeout,
        ),
        search_client=NewsAPIClient(
            config.news.newsapi_api_key,
            page_size=config.news.newsapi_page_size,
            default_query=config.news.default_query,
            timeout=config.news.timeout,
        ),
        db_path=config.db_path,
        reply_to_prompts=config.telegram.reply_to_prompts,
    )

    ensure_schema(config.db_path)

    if config.telegram.alert_chat_id is None:
        logger.warning("telegram.alert_chat_id is not set; webhook alerts will be rejected")
    server = build_server(
        create_app(bus, config.telegram.alert_chat_id, config.gateway.webhook_path),
        config.gateway,
    )

    bus.subscribe_outbound(channel.send)

    logger.info(f"Webhook listening on {config.gateway.host}:{config.gateway.port}{config.gateway.webhook_path}")
    try:
        await asyncio.gather(
            channel.start(),
            loop.run(),
            bus.dispatch_outbound(),
            server.serve(),
        )
    finally:
        server.should_exit = True
        loop.stop()
        bus.stop()
        await channel.stop()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="newsbot", description="Crypto news and alert Telegram bot")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    setup_logging(config.logging, secrets=config.secrets())
    logger.info("Starting newsbot")

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
