"""
Zeitgeist - Topic Discovery for News Feeds

Identifies common themes across many articles from many RSS/Atom feeds by
non-negative matrix factorisation of a term-document matrix, and ranks the
resulting topics by relevance and source diversity.
"""

__version__ = "0.1.0"
__author__ = "Zeitgeist contributors"

from zeitgeist.core.article import Article, Image, sort_images
from zeitgeist.core.topic import Topic, WeightedItem
from zeitgeist.core.zeitgeist import Zeitgeist, extract_topics
from zeitgeist.errors import ConfigurationError, ResourceLoadError, ZeitgeistError

__all__ = [
    "Article",
    "ConfigurationError",
    "Image",
    "ResourceLoadError",
    "Topic",
    "WeightedItem",
    "Zeitgeist",
    "ZeitgeistError",
    "extract_topics",
    "sort_images",
]
