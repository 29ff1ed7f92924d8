"""CryptoCompare news client."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from newsbot.news.base import NewsClient, NewsItem, NewsResult


class CryptoCompareArticle(BaseModel):
    id: str | int = ""
    title: str | None = None
    url: str | None = None
    body: str | None = None
    source: str | None = None
    published_on: int | None = None  # Unix seconds


class CryptoCompareResponse(BaseModel):
    data: list[CryptoCompareArticle] = Field(default_factory=list, alias="Data")


class CryptoCompareClient(NewsClient):
    """Latest market news from CryptoCompare. No server-side ticker filter."""

    name = "cryptocompare"
    url = "https://min-api.cryptocompare.com/data/v2/news/"

    def __init__(self, api_key: str, categories: str = "BTC,ETH", **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.categories = categories

    def build_params(self, ticker: str) -> dict[str, str]:
        params = {"lang": "EN", "api_key": self.api_key}
        if self.categories:
            params["categories"] = self.categories
        return params

    def parse(self, payload: Any) -> NewsResult:
        data = CryptoCompareResponse.model_validate(payload)
        items = []
        for article in data.data:
            published = (
                datetime.fromtimestamp(article.published_on, tz=timezone.utc)
                if article.published_on
                else datetime.now(timezone.utc)
            )
            items.append(NewsItem(
                title=article.title or "",
                url=article.url or "",
                published_at=published,
                description=article.body or "",
                source=article.source or "",
            ))
        return NewsResult(items=items)
