"""
Markdown formatting of Zeitgeist topics.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from zeitgeist.core.topic import Topic

logger = logging.getLogger(__name__)


def format_date(moment: datetime) -> str:
    """Render a timestamp as, e.g., 'Tuesday 4 March 2025 / 09:30 UTC'."""
    return f"{moment:%A} {moment.day} {moment:%B %Y / %H:%M} {moment.tzname() or ''}".rstrip()


def _escape_link_text(text: str) -> str:
    return text.replace('[', '\\[').replace(']', '\\]')


# Characters that would end or break a Markdown link destination.
_LINK_TARGET_ESCAPES = str.maketrans({
    ' ': '%20',
    '(': '%28',
    ')': '%29',
    '<': '%3C',
    '>': '%3E',
})


def _link_target(url: str) -> str:
    return url.translate(_LINK_TARGET_ESCAPES)


class DigestFormatter:
    """
    Formats topics into a Markdown digest.
    """
    def __init__(self, now: Optional[datetime] = None):
        """
        Initialize the DigestFormatter.

        Args:
            now: Generation time to print (the current UTC time if None)
        """
        self.now = now or datetime.now(timezone.utc)

    def format_topic(self, topic: Topic, number: int) -> str:
        """
        Format a single topic.

        The section is headed by the top article's headline, followed by the
        topic's lead image (if any) and the ranked article links.
        """
        content = [f"## {number}. {topic.headline}", ""]

        images = topic.images
        if images:
            image = images[0]
            content.append(f"![{_escape_link_text(topic.headline)}]({_link_target(image.image_url)})")
            content.append(f"*Image: {image.credit}*")
            content.append("")

        for weighted in topic.articles:
            article = weighted.item
            content.append(f"- [{_escape_link_text(article.headline)}]({_link_target(article.article_url)}) ({article.source})")
        content.append("")
        return "\n".join(content)

    def format_digest(self, topics: Sequence[Topic], title: str, feed_count: int, article_count: int) -> str:
        """
        Format topics into a digest.

        Args:
            topics: Topics, largest first
            title: Title of the digest
            feed_count: Number of feeds downloaded
            article_count: Number of articles analysed

        Returns:
            Formatted digest content
        """
        content = [
            f"# {title}",
            "",
            f"Generated on {format_date(self.now)}",
            "",
            f"*{len(topics)} topics from {article_count} articles in {feed_count} feeds.*",
            "",
        ]

        if topics:
            content.append("## In This Issue")
            content.extend(self.format_contents(topics))
            content.append("")
        else:
            content.append("No topics found.")
            content.append("")

        for number, topic in enumerate(topics, 1):
            content.append(self.format_topic(topic, number))
            content.append("---")
            content.append("")

        logger.debug(f"Formatted {len(topics)} topics")
        return "\n".join(content)

    def format_contents(self, topics: Sequence[Topic]) -> List[str]:
        """List the headline of every topic, in order."""
        return [f"- {topic.headline}: {len(topic)} articles"
                for topic in topics]
