"""NewsAPI keyword search client."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from newsbot.news.base import NewsClient, NewsItem, NewsResult


class NewsAPISource(BaseModel):
    id: str | None = None
    name: str | None = None


class NewsAPIArticle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: NewsAPISource | None = None
    author: str | None = None
    title: str | None = None
    description: str | None = None
    url: str | None = None
    published_at: datetime | None = Field(default=None, alias="publishedAt")


class NewsAPIResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    total_results: int = Field(default=0, alias="totalResults")
    articles: list[NewsAPIArticle] = Field(default_factory=list)


class NewsAPIClient(NewsClient):
    """Searches NewsAPI's ``everything`` endpoint, newest first.

    The query is matched server-side, so no title filtering is applied.
    """

    name = "newsapi"
    url = "https://newsapi.org/v2/everything"
    filters_client_side = False

    def __init__(self, api_key: str, page_size: int = 1, default_query: str = "crypto", **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.page_size = page_size
        self.default_query = default_query

    def build_params(self, ticker: str) -> dict[str, str]:
        return {
            "apiKey": self.api_key,
            "q": ticker or self.default_query,
            "sortBy": "publishedAt",
            "pageSize": str(self.page_size),
        }

    def parse(self, payload: Any) -> NewsResult:
        data = NewsAPIResponse.model_validate(payload)
        if data.status and data.status != "ok":
            raise ValueError(f"NewsAPI returned status {data.status!r}")
        items = [
            NewsItem(
                title=article.title or "",
                url=article.url or "",
                published_at=article.published_at or datetime.now(timezone.utc),
                description=article.description or "",
                author=article.author or "",
                source=(article.source.name if article.source else None) or "",
            )
            for article in data.articles
        ]
        return NewsResult(items=items, total_results=data.total_results)
