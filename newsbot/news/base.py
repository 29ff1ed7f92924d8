"""Shared pieces of the news provider clients.

Every client issues one GET per fetch and turns the JSON payload into
``NewsItem`` records. Failures never raise: they come back as an empty
``NewsResult`` whose ``error`` says whether the request or the payload was
at fault, and the caller decides what to tell the user.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Literal

import httpx
from loguru import logger
from pydantic import ValidationError

NewsError = Literal["fetch", "decode"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class NewsItem:
    title: str
    url: str
    published_at: datetime = field(default_factory=_utcnow)
    description: str = ""
    author: str = ""
    source: str = ""


@dataclass(frozen=True)
class NewsResult:
    items: list[NewsItem] = field(default_factory=list)
    error: NewsError | None = None
    total_results: int | None = None  # As reported by the provider, when it does

    @property
    def ok(self) -> bool:
        return self.error is None


def filter_by_ticker(items: Iterable[NewsItem], ticker: str) -> list[NewsItem]:
    """Keep items whose title mentions the ticker, ignoring case."""
    needle = ticker.strip().lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.title.lower()]


class NewsClient(ABC):
    """Base class for a news provider client."""

    name: str = "news"
    url: str = ""
    filters_client_side: bool = True

    def __init__(self, timeout: float = 15.0, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    def build_params(self, ticker: str) -> dict[str, str]:
        """Query parameters for one request."""

    @abstractmethod
    def parse(self, payload: Any) -> NewsResult:
        """Turn a decoded JSON payload into items.

        May raise ``ValidationError``, ``ValueError``, ``KeyError`` or
        ``TypeError`` on an unexpected shape.
        """

    async def fetch(self, ticker: str = "") -> NewsResult:
        ticker = ticker.strip()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url, params=self.build_params(ticker))
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.name}: HTTP {e.response.status_code} from {self.url}")
            return NewsResult(error="fetch")
        except httpx.RequestError as e:
            logger.warning(f"{self.name}: request to {self.url} failed: {e}")
            return NewsResult(error="fetch")

        try:
            result = self.parse(response.json())
        except (ValidationError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"{self.name}: could not decode response: {e}")
            return NewsResult(error="decode")

        if ticker and self.filters_client_side:
            result = NewsResult(
                items=filter_by_ticker(result.items, ticker),
                total_results=result.total_results,
            )
        logger.info(f"{self.name}: fetched {len(result.items)} item(s) for {ticker or 'all'}")
        return result
