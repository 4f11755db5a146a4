"""
RSS/Atom feed fetching and parsing for Zeitgeist.
"""
import asyncio
import logging
import warnings
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import aiohttp
import async_timeout
import backoff
import feedparser
from bs4 import BeautifulSoup
from tqdm import tqdm

from zeitgeist.core.article import Article, Image, host_of, sort_images
from zeitgeist.core.cache import FeedCache
from zeitgeist.errors import FeedError
from zeitgeist.filters import ArticleFilter, filter_articles
from zeitgeist.utils.http import USER_AGENT, RateLimiter
from zeitgeist.utils.text import clean_text, html_to_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 8
DEFAULT_TIMEOUT_SECONDS = 30
IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/gif')


def read_feed_list(path: str) -> List[str]:
    """
    Read feed URLs from a text file.

    Args:
        path: File with one feed URL per line; blank lines and lines
            starting with '#' are ignored

    Returns:
        List of feed URLs, in file order
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = [line.strip() for line in f]
    except FileNotFoundError:
        logger.error(f"Feed list {path} not found. Please create it with one feed URL per line.")
        return []
    return [line for line in lines if line and not line.startswith('#')]


def _parse_width(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_datetime(parsed_time) -> Optional[datetime]:
    # feedparser normalises dates to UTC struct_time.
    if not parsed_time:
        return None
    return datetime(*parsed_time[:6], tzinfo=timezone.utc)


def _inline_images(markup: str) -> List[str]:
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', UserWarning)
        soup = BeautifulSoup(markup, 'html.parser')
    return [img['src'] for img in soup.find_all('img', src=True)
            if img['src'].lower().endswith('.jpg')]


def extract_images(entry, article_url: str, include_inline_images: bool = True) -> List[Image]:
    """
    Find the images associated with a feed entry.

    Looks at image enclosures, Media RSS thumbnails and content elements and,
    optionally, JPEG <img> tags embedded in the entry description.

    Args:
        entry: A feedparser entry
        article_url: The URL of the entry's article
        include_inline_images: Whether to look for <img> tags in the description

    Returns:
        The distinct images, widest first
    """
    images: Dict[str, Image] = {}

    def add(url: Optional[str], width: Optional[int] = None):
        if url and url not in images:
            images[url] = Image(url, article_url, width)

    for enclosure in entry.get('enclosures', []):
        if enclosure.get('type', '').lower() in IMAGE_TYPES:
            add(enclosure.get('href'))

    for thumbnail in entry.get('media_thumbnail', []):
        add(thumbnail.get('url'), _parse_width(thumbnail.get('width')))

    for media in entry.get('media_content', []):
        if media.get('medium') == 'image' or media.get('type', '').lower() in IMAGE_TYPES:
            add(media.get('url'), _parse_width(media.get('width')))

    description = entry.get('summary')
    if include_inline_images and description:
        for url in _inline_images(description):
            add(url)

    return sort_images(images.values())


def _extract_text(entry) -> str:
    # The description and any content blocks, in that order.
    description = entry.get('summary', '')
    parts = [description]
    for content in entry.get('content', []):
        value = content.get('value', '')
        if value and value != description:
            parts.append(value)
    return clean_text(' '.join(part for part in parts if part))


def _feed_image(feed, key: str) -> Optional[Image]:
    url = feed.get(key)
    if not url:
        return None
    return Image(url, feed.get('link', ''))


def parse_feed(content: bytes, feed_url: str, include_inline_images: bool = True) -> List[Article]:
    """
    Parse an RSS or Atom document into articles.

    Args:
        content: The raw feed document
        feed_url: The URL the feed was downloaded from
        include_inline_images: Whether to look for images in entry markup

    Returns:
        List of articles, in feed order

    Raises:
        FeedError: If the document is not a feed
    """
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries:
        raise FeedError(feed_url, f"Could not parse feed: {parsed.get('bozo_exception')}")

    feed = parsed.feed
    feed_title = html_to_text(feed.get('title', ''))
    feed_image = feed.get('image', {})
    if feed_image.get('href'):
        feed_logo = Image(feed_image['href'], feed.get('link', ''), _parse_width(feed_image.get('width')))
    else:
        feed_logo = _feed_image(feed, 'logo')
    feed_icon = _feed_image(feed, 'icon')

    articles = []
    for entry in parsed.entries:
        article_url = entry.get('link')
        if not article_url:
            logger.debug(f"Skipping entry without a link in {feed_url}")
            continue
        articles.append(Article(
            headline=html_to_text(entry.get('title', '')),
            text=_extract_text(entry),
            article_url=article_url,
            date=_to_datetime(entry.get('updated_parsed') or entry.get('published_parsed')),
            images=tuple(extract_images(entry, article_url, include_inline_images)),
            feed_title=feed_title,
            feed_logo=feed_logo,
            feed_icon=feed_icon,
        ))
    return articles


class FeedFetcher:
    """
    Downloads and parses feeds concurrently.
    """
    def __init__(self,
                 max_concurrent: int = DEFAULT_MAX_CONCURRENT,
                 timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
                 include_inline_images: bool = True,
                 cache: Optional[FeedCache] = None,
                 rate_limiter: Optional[RateLimiter] = None):
        """
        Initialize the FeedFetcher.

        Args:
            max_concurrent: Maximum number of simultaneous downloads
            timeout_seconds: Timeout for a single download attempt
            include_inline_images: Whether to look for images in entry markup
            cache: Feed cache for conditional requests (no caching if None)
            rate_limiter: Per-host rate limiter (a new one if None)
        """
        self.max_concurrent = max_concurrent
        self.timeout_seconds = timeout_seconds
        self.include_inline_images = include_inline_images
        self.cache = cache
        self.rate_limiter = rate_limiter or RateLimiter()
        self._session = None
        self.headers = {
            'User-Agent': USER_AGENT,
            'Accept': 'application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8',
        }

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self._session

    async def close_session(self):
        """Close aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError),
        max_tries=3
    )
    async def download(self, url: str) -> bytes:
        """
        Download a feed document with retries and timeout.

        Sends the cached validators, if any, and answers a 304 response from
        the cache.

        Args:
            url: The feed URL

        Returns:
            The raw feed document
        """
        host = host_of(url)
        await self.rate_limiter.acquire(host)

        cached = self.cache.get(url) if self.cache else None
        headers = {}
        if cached and cached.etag:
            headers['If-None-Match'] = cached.etag
        if cached and cached.last_modified:
            headers['If-Modified-Since'] = cached.last_modified

        try:
            async with async_timeout.timeout(self.timeout_seconds):
                async with self.session.get(url, headers=headers) as response:
                    if response.status == 304 and cached:
                        self.rate_limiter.report_success(host)
                        self.cache.touch(url)
                        logger.debug(f"{url} not modified, using cached copy")
                        return cached.content
                    response.raise_for_status()
                    content = await response.read()
                    etag = response.headers.get('ETag')
                    last_modified = response.headers.get('Last-Modified')
        except (aiohttp.ClientError, asyncio.TimeoutError):
            self.rate_limiter.report_failure(host)
            raise

        self.rate_limiter.report_success(host)
        if self.cache:
            self.cache.set(url, content, etag, last_modified)
        return content

    async def fetch_feed(self, url: str) -> List[Article]:
        """
        Download and parse one feed.

        Args:
            url: The feed URL

        Returns:
            The feed's articles, or an empty list if it could not be fetched
        """
        try:
            content = await self.download(url)
            articles = parse_feed(content, url, self.include_inline_images)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching {url}: {e!r}")
            return []
        except FeedError as e:
            logger.error(str(e))
            return []
        logger.debug(f"{len(articles)} articles in {url}")
        return articles

    async def fetch_articles(self,
                             urls: Sequence[str],
                             filters: Iterable[ArticleFilter] = ()) -> List[Article]:
        """
        Fetch all feeds in parallel and apply the article filters.

        Args:
            urls: Feed URLs
            filters: Filters every returned article must pass

        Returns:
            The accepted articles, grouped by feed in the order of urls
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(index: int, url: str) -> Tuple[int, List[Article]]:
            async with semaphore:
                return index, await self.fetch_feed(url)

        tasks = [fetch_with_semaphore(i, url) for i, url in enumerate(urls)]
        results: List[List[Article]] = [[] for _ in urls]
        try:
            for task in tqdm(
                asyncio.as_completed(tasks),
                total=len(tasks),
                desc="Downloading feeds"
            ):
                index, articles = await task
                results[index] = articles
        finally:
            await self.close_session()

        articles = [article for feed_articles in results for article in feed_articles]
        accepted = filter_articles(articles, filters)
        logger.info(f"Fetched {len(articles)} articles from {len(urls)} feeds, {len(accepted)} accepted")
        return accepted
