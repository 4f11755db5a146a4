"""
RSS 2.0 publishing of Zeitgeist topics.
"""
import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Optional, Sequence, Union

from zeitgeist.core.topic import Topic

logger = logging.getLogger(__name__)

RSS_FILE = 'rss.xml'
GENERATOR = 'Zeitgeist'


def build_channel(topics: Sequence[Topic],
                  title: str,
                  feed_count: int,
                  article_count: int,
                  link: str = '',
                  now: Optional[datetime] = None) -> ET.Element:
    """
    Build an RSS document with one item per topic.

    Each item links to the topic's top article; the remaining headlines of
    the topic make up its description.

    Args:
        topics: Topics, largest first
        title: Channel title
        feed_count: Number of feeds downloaded
        article_count: Number of articles analysed
        link: URL of the published digest
        now: Build time (the current UTC time if None)

    Returns:
        The <rss> element
    """
    now = now or datetime.now(timezone.utc)
    rss = ET.Element('rss', version='2.0')
    channel = ET.SubElement(rss, 'channel')
    ET.SubElement(channel, 'title').text = title
    ET.SubElement(channel, 'link').text = link
    ET.SubElement(channel, 'description').text = (
        f"This feed was constructed by automated analysis of {article_count} articles "
        f"from {feed_count} news sources. No humans were involved in the selection "
        f"and classification of these headlines.")
    ET.SubElement(channel, 'generator').text = GENERATOR
    ET.SubElement(channel, 'lastBuildDate').text = format_datetime(now, usegmt=True)

    for topic in topics:
        top_article = topic.articles[0].item
        item = ET.SubElement(channel, 'item')
        ET.SubElement(item, 'title').text = top_article.headline
        ET.SubElement(item, 'link').text = top_article.article_url
        others = [weighted.item.headline for weighted in topic.articles[1:]]
        if others:
            ET.SubElement(item, 'description').text = '; '.join(others)
        ET.SubElement(item, 'guid', isPermaLink='true').text = top_article.article_url
    return rss


def write_rss(topics: Sequence[Topic],
              title: str,
              feed_count: int,
              article_count: int,
              output_dir: Union[str, Path],
              link: str = '',
              now: Optional[datetime] = None) -> Path:
    """
    Write the topics as an RSS feed.

    Returns:
        Path of the written rss.xml
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    rss_file = output_path / RSS_FILE
    rss = build_channel(topics, title, feed_count, article_count, link, now)
    ET.ElementTree(rss).write(rss_file, encoding='utf-8', xml_declaration=True)
    logger.info(f"Wrote {rss_file}")
    return rss_file
