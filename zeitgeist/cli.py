"""
Command-line interface for Zeitgeist.
"""
import argparse
import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from zeitgeist.config import Config, get_config
from zeitgeist.core.cache import FeedCache
from zeitgeist.core.zeitgeist import Zeitgeist
from zeitgeist.errors import ConfigurationError
from zeitgeist.fetchers.feeds import FeedFetcher, read_feed_list
from zeitgeist.filters import ArticleFilter, DateFilter, HeadlineRegexFilter
from zeitgeist.formatters.html import write_digest
from zeitgeist.formatters.rss import write_rss

logger = logging.getLogger(__name__)

# Command-line options that override analysis settings.
ANALYSIS_OVERRIDES = {
    'min_articles': 'min_articles_per_topic',
    'max_articles': 'max_articles_per_topic',
    'min_sources': 'min_sources_per_topic',
    'min_relevance': 'min_article_relevance',
    'seed': 'seed',
}


def setup_logging(verbose: bool = False):
    """
    Configure logging to a dated log file and the console.

    Args:
        verbose: Log at DEBUG rather than INFO level
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(f"zeitgeist_{datetime.now().strftime('%Y%m%d')}.log"),
            logging.StreamHandler()
        ]
    )


def parse_args(argv: Optional[Sequence[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Zeitgeist - discover the topics shared by news feeds")
    parser.add_argument("--feeds", help="Path to feeds file", default="feeds.txt")
    parser.add_argument("--title", help="Title of the digest")
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--output-dir", help="Output directory")
    parser.add_argument("--cutoff-hours", type=float, help="Ignore articles older than this many hours")
    parser.add_argument("--min-articles", type=int, help="Minimum articles per topic")
    parser.add_argument("--max-articles", type=int, help="Maximum articles per topic")
    parser.add_argument("--min-sources", type=int, help="Minimum distinct sources per topic")
    parser.add_argument("--min-relevance", type=float, help="Minimum article relevance")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible results")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def analysis_settings(config: Config, args) -> Dict:
    """Merge command-line overrides into the configured analysis settings."""
    settings = config.analysis_settings()
    for option, key in ANALYSIS_OVERRIDES.items():
        value = getattr(args, option)
        if value is not None:
            settings[key] = value
    return settings


def build_filters(config: Config, cutoff_hours: float, now: Optional[datetime] = None) -> List[ArticleFilter]:
    """
    Create the article filters for a run.

    Args:
        config: Configuration supplying the banned headline patterns
        cutoff_hours: Maximum age of articles
        now: Current time (UTC now if None)

    Returns:
        List of filters

    Raises:
        ConfigurationError: If a banned headline pattern is not a valid regex
    """
    now = now or datetime.now(timezone.utc)
    filters: List[ArticleFilter] = [DateFilter(now - timedelta(hours=cutoff_hours))]
    for pattern in config.get('filters.banned_headlines') or []:
        try:
            filters.append(HeadlineRegexFilter(pattern))
        except re.error as e:
            raise ConfigurationError(f"Invalid banned headline pattern {pattern!r}: {e}") from e
    return filters


async def async_main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the application.

    Returns:
        Exit code
    """
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = get_config(args.config)
        cutoff_hours = args.cutoff_hours if args.cutoff_hours is not None else config.get('feeds.cutoff_hours')
        filters = build_filters(config, cutoff_hours)
        settings = analysis_settings(config, args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    title = args.title or config.get('output.title')
    output_dir = args.output_dir or config.get('output.directory')
    logger.info(f"Starting Zeitgeist: {title}")
    logger.info(f"Output directory: {output_dir}")

    feeds = read_feed_list(args.feeds)
    if not feeds:
        logger.error("No feeds to fetch. Exiting.")
        return 1

    fetcher = FeedFetcher(
        max_concurrent=config.get('feeds.max_concurrent'),
        timeout_seconds=config.get('feeds.timeout_seconds'),
        include_inline_images=config.get('feeds.include_inline_images'),
        cache=FeedCache(config.get('feeds.cache_path')),
    )
    articles = await fetcher.fetch_articles(feeds, filters)
    if not articles:
        logger.error("No articles were fetched. Exiting.")
        return 1

    try:
        zeitgeist = Zeitgeist(articles, **settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    topics = zeitgeist.get_topics()

    write_digest(topics,
                 title,
                 len(feeds),
                 len(articles),
                 output_dir,
                 expiry_minutes=config.get('output.expiry_minutes'))
    write_rss(topics,
              title,
              len(feeds),
              len(articles),
              output_dir,
              link=config.get('output.link') or '')
    logger.info("Zeitgeist completed successfully")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the command-line script.
    """
    try:
        return asyncio.run(async_main(argv))
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
