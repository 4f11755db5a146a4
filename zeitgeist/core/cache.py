"""
SQLite cache of downloaded feeds, for conditional requests.
"""
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path("cache") / "feeds.db"
# Entries older than this are dropped rather than revalidated.
CACHE_DURATION = timedelta(days=7)


@dataclass(frozen=True)
class CachedFeed:
    """A previously downloaded feed document and its validators."""
    content: bytes
    etag: Optional[str] = None
    last_modified: Optional[str] = None


class FeedCache:
    """
    Remembers the last copy of each feed along with its ETag and
    Last-Modified headers, so unchanged feeds can be answered with
    304 Not Modified and re-parsed from disk.
    """
    def __init__(self, path: Union[str, Path] = DEFAULT_CACHE_PATH):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        with sqlite3.connect(self.path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS feeds (
                    url TEXT PRIMARY KEY,
                    etag TEXT,
                    last_modified TEXT,
                    content BLOB,
                    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def get(self, url: str) -> Optional[CachedFeed]:
        """
        Get the cached copy of a feed.

        Args:
            url: The feed URL

        Returns:
            The cached feed, or None if absent or expired
        """
        with sqlite3.connect(self.path) as conn:
            result = conn.execute(
                "SELECT etag, last_modified, content, timestamp FROM feeds WHERE url = ?",
                (url,)
            ).fetchone()
            if not result:
                return None

            etag, last_modified, content, timestamp = result
            stored = datetime.fromisoformat(timestamp).replace(tzinfo=timezone.utc)
            if datetime.now(timezone.utc) - stored >= CACHE_DURATION:
                logger.debug(f"Cached copy of {url} expired")
                conn.execute("DELETE FROM feeds WHERE url = ?", (url,))
                return None
            return CachedFeed(content=bytes(content), etag=etag, last_modified=last_modified)

    def set(self, url: str, content: bytes, etag: Optional[str] = None, last_modified: Optional[str] = None):
        """
        Store a freshly downloaded feed.

        Args:
            url: The feed URL
            content: The raw feed document
            etag: The response's ETag header, if any
            last_modified: The response's Last-Modified header, if any
        """
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO feeds (url, etag, last_modified, content, timestamp)
                VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (url, etag, last_modified, sqlite3.Binary(content))
            )

    def touch(self, url: str):
        """Mark a cached feed as revalidated (after a 304 response)."""
        with sqlite3.connect(self.path) as conn:
            conn.execute("UPDATE feeds SET timestamp = CURRENT_TIMESTAMP WHERE url = ?", (url,))
