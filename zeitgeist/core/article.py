"""
Article data model for Zeitgeist.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

_CREDIT_PREFIXES = (re.compile(r'^feeds\.'), re.compile(r'^rss\.'), re.compile(r'^www\.'))


def host_of(url: Optional[str]) -> str:
    """Return the lower-case network host of a URL ('' if it has none)."""
    if not url:
        return ""
    return (urlparse(url).hostname or "").lower()


@dataclass(frozen=True)
class Image:
    """
    An image associated with an article.

    A width of None means the width is unknown, which is not the same as zero.
    """
    image_url: str
    article_url: str
    width: Optional[int] = None

    @property
    def credit(self) -> str:
        """
        The site to credit for the image.

        Derived from the article URL rather than the image URL (images are
        often served from a separate CDN host), with common feed/web prefixes
        removed to keep it short.
        """
        credit = host_of(self.article_url)
        for prefix in _CREDIT_PREFIXES:
            credit = prefix.sub('', credit, count=1)
        return credit


def sort_images(images: Iterable[Image]) -> List[Image]:
    """
    Sort images by descending width.

    Images of unknown width go after all images of known width; images of
    equal width (including two unknown widths) keep their relative order.
    """
    return sorted(images, key=lambda image: (image.width is None, -(image.width or 0)))


@dataclass(frozen=True, eq=False)
class Article:
    """
    Represents a single article with its metadata and plain-text content.

    Articles are immutable and compare by identity only.
    """
    headline: str
    text: str
    article_url: str
    date: Optional[datetime] = None
    images: Tuple[Image, ...] = field(default_factory=tuple)
    feed_title: str = ""
    feed_logo: Optional[Image] = None
    feed_icon: Optional[Image] = None

    def __post_init__(self):
        if not isinstance(self.images, tuple):
            object.__setattr__(self, 'images', tuple(self.images))

    @property
    def source(self) -> str:
        """The host of the article URL, used to measure source diversity."""
        return host_of(self.article_url)

    def __repr__(self) -> str:
        return f"Article(headline={self.headline!r}, article_url={self.article_url!r})"
