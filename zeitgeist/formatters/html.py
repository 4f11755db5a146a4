"""
HTML conversion and publishing of Zeitgeist digests.
"""
import html
import logging
import warnings
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import mistune
from bs4 import BeautifulSoup

from zeitgeist.core.topic import Topic
from zeitgeist.formatters.markdown import DigestFormatter

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_MINUTES = 30
MARKDOWN_FILE = 'digest.md'
HTML_FILE = 'index.html'

DEFAULT_CSS = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
            max-width: 960px;
            margin: 0 auto;
            padding: 20px;
            line-height: 1.6;
            color: #333;
            font-size: 16px;
        }

        h1 {
            font-size: 2.25em;
            font-weight: 700;
            color: #1a1a1a;
        }

        h2 {
            font-size: 1.5em;
            font-weight: 600;
            color: #1a1a1a;
            margin-top: 1.5em;
            margin-bottom: 0.5em;
        }

        a {
            color: #0066cc;
            text-decoration: none;
        }

        a:hover {
            text-decoration: underline;
        }

        ul {
            padding-left: 1.5em;
        }

        li {
            margin-bottom: 0.5em;
        }

        img {
            max-width: 200px;
            height: auto;
            border-radius: 4px;
            float: right;
            margin: 0 0 10px 20px;
        }

        em {
            color: #666;
            font-size: 0.9em;
        }

        hr {
            border: none;
            border-top: 1px solid #e9ecef;
            margin: 30px 0;
            clear: both;
        }
"""


class HtmlConverter:
    """
    Converts Markdown digests to standalone HTML pages.
    """
    def __init__(self, css_file: Optional[str] = None, expiry_minutes: int = DEFAULT_EXPIRY_MINUTES):
        """
        Initialize the HtmlConverter.

        Args:
            css_file: Path to a CSS file to use for styling (built-in styles if None)
            expiry_minutes: How long browsers and proxies may cache the page
        """
        self.css_file = css_file
        self.expiry_minutes = expiry_minutes
        self.css_content = self._load_css()
        self.markdown = mistune.create_markdown(escape=True)

    def _load_css(self) -> str:
        if not self.css_file:
            return DEFAULT_CSS
        try:
            with open(self.css_file, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            logger.warning(f"CSS file {self.css_file} not found. Using default styles.")
            return DEFAULT_CSS

    def convert(self, markdown_text: str, title: str, now: Optional[datetime] = None) -> str:
        """
        Convert Markdown to a complete HTML page.

        Links open in a new tab, and the page carries an Expires header
        equivalent so that it is refreshed after the next scheduled run.

        Args:
            markdown_text: The Markdown content
            title: Page title
            now: Generation time (the current UTC time if None)

        Returns:
            The HTML page
        """
        now = now or datetime.now(timezone.utc)
        expires = now + timedelta(minutes=self.expiry_minutes)

        with warnings.catch_warnings():
            warnings.simplefilter('ignore', UserWarning)
            soup = BeautifulSoup(self.markdown(markdown_text), 'html.parser')
        for link in soup.find_all('a', href=True):
            link['target'] = '_blank'
            link['rel'] = 'noopener'
        for image in soup.find_all('img'):
            image['loading'] = 'lazy'

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="generator" content="Zeitgeist">
    <meta http-equiv="expires" content="{format_datetime(expires, usegmt=True)}">
    <title>{html.escape(title)}</title>
    <style>{self.css_content}    </style>
</head>
<body>
{soup}
</body>
</html>"""


def write_digest(topics: Sequence[Topic],
                 title: str,
                 feed_count: int,
                 article_count: int,
                 output_dir: Union[str, Path],
                 expiry_minutes: int = DEFAULT_EXPIRY_MINUTES,
                 css_file: Optional[str] = None) -> Tuple[Path, Path]:
    """
    Write the Markdown digest and its HTML page to a directory.

    Args:
        topics: Topics, largest first
        title: Title of the digest
        feed_count: Number of feeds downloaded
        article_count: Number of articles analysed
        output_dir: Directory to write to (created if missing)
        expiry_minutes: Cache lifetime of the HTML page
        css_file: Optional stylesheet to embed

    Returns:
        Tuple of (markdown path, HTML path)
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    now = datetime.now(timezone.utc)

    markdown_text = DigestFormatter(now).format_digest(topics, title, feed_count, article_count)
    markdown_file = output_path / MARKDOWN_FILE
    markdown_file.write_text(markdown_text, encoding='utf-8')

    converter = HtmlConverter(css_file, expiry_minutes)
    html_file = output_path / HTML_FILE
    html_file.write_text(converter.convert(markdown_text, title, now), encoding='utf-8')

    logger.info(f"Wrote {markdown_file} and {html_file}")
    return markdown_file, html_file
