"""SQLite sink for fetched news headlines."""

import sqlite3
from pathlib import Path
from typing import Iterable

from loguru import logger

from newsbot.news.base import NewsItem

CREATE_NEWS_TABLE = """
CREATE TABLE IF NOT EXISTS news (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    url TEXT NOT NULL,
    published_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

INSERT_NEWS = "INSERT INTO news (title, url, published_at) VALUES (?, ?, ?)"


class NewsStore:
    """Append-only news table, opened per use.

    Usage::

        with NewsStore(path) as store:
            store.insert_many(items)
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def open(self) -> "NewsStore":
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self.init_db()
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "NewsStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("NewsStore is not open")
        return self._conn

    def init_db(self) -> None:
        """Create the news table if it does not exist yet."""
        with self.conn:
            self.conn.execute(CREATE_NEWS_TABLE)

    def insert(self, item: NewsItem) -> bool:
        """Append one row. Returns False (and logs) if the insert failed."""
        try:
            with self.conn:
                self.conn.execute(
                    INSERT_NEWS,
                    (item.title, item.url, item.published_at.isoformat()),
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to insert news item {item.url!r}: {e}")
            return False
        return True

    def insert_many(self, items: Iterable[NewsItem]) -> int:
        """Insert items one by one; failed rows are skipped. Returns rows written."""
        return sum(1 for item in items if self.insert(item))


def ensure_schema(db_path: Path | str) -> None:
    with NewsStore(db_path):
        pass
    logger.debug(f"News table ready at {db_path}")
