"""Loguru setup.

Third-party libraries (python-telegram-bot, httpx, uvicorn) log through the
standard ``logging`` module; their records are forwarded to loguru so there is
a single output. httpx logs full request URLs, and Telegram URLs contain the
bot token, so every record is passed through secret redaction.
"""

import logging
import sys
import traceback

from loguru import logger

from newsbot.config.schema import LoggingConfig

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def format_record(record) -> str:
    # Tracebacks are pre-rendered and redacted by the patcher.
    if record["extra"].get("traceback"):
        return LOG_FORMAT + "\n{extra[traceback]}"
    return LOG_FORMAT + "\n"


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call.
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def redact(message: str, secrets: list[str]) -> str:
    for secret in secrets:
        message = message.replace(secret, "***")
    return message


def setup_logging(config: LoggingConfig, secrets: list[str] | None = None) -> None:
    """Replace loguru's default sink and capture stdlib logging."""
    ordered = sorted({s for s in (secrets or []) if s}, key=len, reverse=True)

    def _patch(record) -> None:
        record["message"] = redact(record["message"], ordered)
        exc = record["exception"]
        if exc is not None:
            text = "".join(traceback.format_exception(exc.type, exc.value, exc.traceback))
            record["extra"]["traceback"] = redact(text, ordered)
            record["exception"] = None

    logger.remove()
    logger.configure(patcher=_patch)
    logger.add(sys.stderr, level=config.level.upper(), format=format_record)
    if config.file:
        logger.add(
            config.file,
            level=config.level.upper(),
            format=format_record,
            rotation=config.rotation,
            retention=config.retention,
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # httpx logs every request at INFO; keep it for debugging only.
    logging.getLogger("httpx").setLevel(logging.WARNING)
