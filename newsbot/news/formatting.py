"""Plain-text rendering of news digests and analyses."""

from newsbot.news.base import NewsItem, NewsResult


def format_digest(header: str, items: list[NewsItem]) -> str:
    """Header line followed by a title/url block per item."""
    lines = [header]
    for item in items:
        lines.append(f"{item.title}\n{item.url}\n")
    return "\n".join(lines)


def format_search_results(result: NewsResult) -> str:
    if not result.items and not result.total_results:
        return "No recent news found for the given topic."

    blocks = ["Latest News:"]
    for item in result.items:
        published = item.published_at.strftime("%a, %d %b %Y %H:%M:%S %Z").strip()
        blocks.append(
            f"Title: {item.title}\n"
            f"Author: {item.author}\n"
            f"Source: {item.source}\n"
            f"Published: {published}\n"
            f"URL: {item.url}\n"
        )
    return "\n".join(blocks)


def format_analysis(item: NewsItem, sentiment: str, decision: str) -> str:
    return (
        f"Article: {item.title}\n"
        f"Sentiment: {sentiment}\n"
        f"Decision: {decision}\n"
        f"URL: {item.url}\n"
    )
