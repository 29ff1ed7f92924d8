"""Telegram channel using long polling."""

import asyncio

from loguru import logger
from telegram import LinkPreviewOptions, ReplyParameters, Update
from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from newsbot.bus.events import OutboundMessage
from newsbot.bus.queue import MessageBus
from newsbot.channels.base import BaseChannel
from newsbot.config.schema import TelegramConfig
from newsbot.utils.helpers import MAX_MESSAGE_LENGTH, split_message, truncate_string


class TelegramChannel(BaseChannel):
    """Owns the bot handle used for both receiving and sending."""

    name = "telegram"

    def __init__(self, config: TelegramConfig, bus: MessageBus):
        super().__init__(config, bus)
        self.config: TelegramConfig = config
        self._app: Application | None = None

    async def start(self) -> None:
        builder = Application.builder().token(self.config.token)
        if self.config.proxy:
            builder = builder.proxy(self.config.proxy).get_updates_proxy(self.config.proxy)
        self._app = builder.build()

        # Commands such as /panic-news are not valid bot command names, so
        # every text message goes through one handler and is parsed later.
        self._app.add_handler(MessageHandler(filters.TEXT, self._on_message))

        logger.info("Starting Telegram bot (polling mode)...")

        # Bad token or unreachable API raises here and ends the process.
        await self._app.initialize()
        await self._app.start()

        bot_info = await self._app.bot.get_me()
        logger.info(f"Authorized on account @{bot_info.username}")

        await self._app.updater.start_polling(
            allowed_updates=["message"],
            timeout=self.config.poll_timeout,
            error_callback=self._on_polling_error,
        )
        self._running = True

        while self._running:
            await asyncio.sleep(1)
            if self._running and not self._app.updater.running:
                raise RuntimeError("Telegram polling stopped unexpectedly")

    async def stop(self) -> None:
        self._running = False

        if self._app:
            logger.info("Stopping Telegram bot...")
            if self._app.updater and self._app.updater.running:
                await self._app.updater.stop()
            if self._app.running:
                await self._app.stop()
            await self._app.shutdown()
            self._app = None

    async def send(self, msg: OutboundMessage) -> None:
        """Send the message in segments of at most 4096 characters.

        A failed segment is logged and the remaining ones are still sent.
        """
        if not self._app:
            logger.warning("Telegram bot not running")
            return

        segments = [s for s in split_message(msg.content, MAX_MESSAGE_LENGTH) if s.strip()]
        if not segments:
            logger.warning(f"Dropping empty message for chat {msg.chat_id}")
            return

        for index, segment in enumerate(segments):
            reply = None
            if index == 0 and msg.reply_to is not None:
                reply = ReplyParameters(message_id=msg.reply_to, allow_sending_without_reply=True)
            try:
                await self._app.bot.send_message(
                    chat_id=msg.chat_id,
                    text=segment,
                    link_preview_options=LinkPreviewOptions(is_disabled=True),
                    reply_parameters=reply,
                )
            except Exception as e:
                logger.error(
                    f"Failed to send segment {index + 1}/{len(segments)} to chat {msg.chat_id}: {e}"
                )

    def _on_polling_error(self, error: TelegramError) -> None:
        logger.error(f"Telegram polling error: {error}")

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        if not message or not message.text:
            return

        user = update.effective_user
        sender_id = str(user.id) if user else ""
        if user and user.username:
            sender_id = f"{sender_id}|{user.username}"

        logger.debug(f"[{message.chat_id}] {truncate_string(message.text, 80)}")

        await self._handle_message(
            chat_id=message.chat_id,
            text=message.text,
            message_id=message.message_id,
            sender_id=sender_id,
        )
