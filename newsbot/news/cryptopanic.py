"""CryptoPanic posts client."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from newsbot.news.base import NewsClient, NewsItem, NewsResult


class CryptoPanicPost(BaseModel):
    title: str | None = None
    url: str | None = None
    published_at: datetime | None = None


class CryptoPanicResponse(BaseModel):
    results: list[CryptoPanicPost] = []


class CryptoPanicClient(NewsClient):
    """Latest news posts from CryptoPanic.

    The ``currencies`` parameter narrows the posts server-side, but that
    matches tagged currencies rather than titles, so results are still
    filtered by title afterwards.
    """

    name = "cryptopanic"
    url = "https://cryptopanic.com/api/v1/posts/"

    def __init__(self, auth_token: str, **kwargs: Any):
        super().__init__(**kwargs)
        self.auth_token = auth_token

    def build_params(self, ticker: str) -> dict[str, str]:
        params = {"auth_token": self.auth_token, "kind": "news"}
        if ticker:
            params["currencies"] = ticker.upper()
        return params

    def parse(self, payload: Any) -> NewsResult:
        data = CryptoPanicResponse.model_validate(payload)
        items = []
        for post in data.results:
            title, url = post.title or "", post.url or ""
            # Stored timestamp defaults to fetch time when the post has none.
            if post.published_at is not None:
                items.append(NewsItem(title=title, url=url, published_at=post.published_at))
            else:
                items.append(NewsItem(title=title, url=url))
        return NewsResult(items=items)
