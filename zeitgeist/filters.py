"""
Filters for deciding which fetched articles are analysed.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Protocol, Union, runtime_checkable

from zeitgeist.core.article import Article

logger = logging.getLogger(__name__)


@runtime_checkable
class ArticleFilter(Protocol):
    """
    Protocol for article filters.

    Implementations decide, one article at a time, whether it should be kept.
    """

    def keep_article(self, article: Article) -> bool:
        """Return True to keep the article, False to discard it."""


class _CallableFilter:
    def __call__(self, article: Article) -> bool:
        return self.keep_article(article)


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC, the zone feeds are parsed into.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class DateFilter(_CallableFilter):
    """
    Excludes articles that are too old or have no publication date.

    Naive datetimes, whether the cut-off or an article's date, are treated
    as UTC.
    """

    def __init__(self, cut_off: datetime):
        self.cut_off = _as_utc(cut_off)

    def keep_article(self, article: Article) -> bool:
        # Without a date there is no way to tell whether the article is still
        # relevant.  Some feeds wrongly claim to be RSS 0.91, which has no
        # item dates.
        if article.date is None:
            logger.warning(f"Article has no publication date: {article.article_url}")
            return False
        return _as_utc(article.date) >= self.cut_off


class HeadlineRegexFilter(_CallableFilter):
    """
    Excludes articles whose entire headline matches a pattern (case-insensitive).
    """

    def __init__(self, pattern: Union[str, re.Pattern]):
        self.pattern = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, re.IGNORECASE)

    def keep_article(self, article: Article) -> bool:
        if self.pattern.fullmatch(article.headline):
            logger.warning(f"Headline blocked by filter: {article.article_url}")
            return False
        return True


def filter_articles(articles: Iterable[Article], filters: Iterable[ArticleFilter]) -> List[Article]:
    """
    Keep only the articles accepted by every filter.

    Args:
        articles: Articles to filter
        filters: Filters to apply, in order

    Returns:
        The accepted articles, in their original order
    """
    filters = list(filters)
    return [article for article in articles
            if all(article_filter.keep_article(article) for article_filter in filters)]
