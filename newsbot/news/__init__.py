"""News provider clients."""

from newsbot.news.base import NewsClient, NewsItem, NewsResult, filter_by_ticker
from newsbot.news.cryptocompare import CryptoCompareClient
from newsbot.news.cryptopanic import CryptoPanicClient
from newsbot.news.newsapi import NewsAPIClient

__all__ = [
    "NewsClient",
    "NewsItem",
    "NewsResult",
    "filter_by_ticker",
    "CryptoPanicClient",
    "CryptoCompareClient",
    "NewsAPIClient",
]
