"""Keyword-based trading decision over a sentiment text."""

from typing import Iterable, Literal

Decision = Literal["Buy", "Sell", "Hold"]

POSITIVE_KEYWORDS = (
    "growth", "upward", "bullish", "surge", "rally",
    "record high", "advancing", "gains", "profit", "outperform",
)
NEGATIVE_KEYWORDS = (
    "ban", "hack", "crash", "plunge", "downward",
    "bearish", "losses", "decline", "sell-off", "underperform",
)


def make_trading_decision(
    text: str,
    positive: Iterable[str] = POSITIVE_KEYWORDS,
    negative: Iterable[str] = NEGATIVE_KEYWORDS,
) -> Decision:
    """Buy on any positive keyword, else Sell on any negative one, else Hold."""
    lowered = text.lower()
    if any(keyword in lowered for keyword in positive):
        return "Buy"
    if any(keyword in lowered for keyword in negative):
        return "Sell"
    return "Hold"
