import types

import pytest

from newsbot.bus.events import OutboundMessage
from newsbot.bus.queue import MessageBus
from newsbot.channels.telegram import TelegramChannel
from newsbot.config.schema import TelegramConfig


class FakeBot:
    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.calls: list[dict] = []
        self.fail_on = fail_on or set()

    async def send_message(self, **kwargs):
        self.calls.append(kwargs)
        if len(self.calls) in self.fail_on:
            raise RuntimeError("telegram unavailable")


def _channel(bot: FakeBot) -> TelegramChannel:
    channel = TelegramChannel(TelegramConfig(token="123:abc"), MessageBus())
    channel._app = types.SimpleNamespace(bot=bot)
    return channel


@pytest.mark.asyncio
async def test_long_message_is_sent_in_ordered_segments():
    bot = FakeBot()
    text = "\n".join(f"{i:05d} " + "z" * 94 for i in range(120))  # ~12k chars

    await _channel(bot).send(OutboundMessage(chat_id=5, content=text, reply_to=77))

    segments = [c["text"] for c in bot.calls]
    assert len(segments) == 3
    assert all(len(s) <= 4096 for s in segments)
    assert "\n".join(segments) == text
    assert all(c["chat_id"] == 5 for c in bot.calls)
    assert all(c["link_preview_options"].is_disabled for c in bot.calls)
    assert bot.calls[0]["reply_parameters"].message_id == 77
    assert bot.calls[1]["reply_parameters"] is None


@pytest.mark.asyncio
async def test_failed_segment_does_not_stop_the_rest():
    bot = FakeBot(fail_on={1})
    text = "a" * 5000

    await _channel(bot).send(OutboundMessage(chat_id=1, content=text))

    assert [len(c["text"]) for c in bot.calls] == [4096, 904]


@pytest.mark.asyncio
async def test_empty_message_is_not_sent():
    bot = FakeBot()
    await _channel(bot).send(OutboundMessage(chat_id=1, content="  "))
    assert bot.calls == []


@pytest.mark.asyncio
async def test_send_before_start_is_a_no_op():
    channel = TelegramChannel(TelegramConfig(token="123:abc"), MessageBus())
    await channel.send(OutboundMessage(chat_id=1, content="hi"))


@pytest.mark.asyncio
async def test_incoming_text_is_published_to_bus():
    bus = MessageBus()
    channel = TelegramChannel(TelegramConfig(token="123:abc"), bus)
    message = types.SimpleNamespace(
        chat_id=10,
        text="/news btc",
        message_id=99,
        chat=types.SimpleNamespace(type="private"),
    )
    user = types.SimpleNamespace(id=1, username="alice")
    update = types.SimpleNamespace(message=message, effective_user=user)

    await channel._on_message(update, None)

    msg = bus.inbound.get_nowait()
    assert msg.chat_id == 10
    assert msg.text == "/news btc"
    assert msg.message_id == 99
    assert msg.sender_id == "1|alice"
