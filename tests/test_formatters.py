"""Unit tests for the Markdown and HTML digest formatters."""

import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from zeitgeist.core.article import Article, Image
from zeitgeist.core.topic import Topic, WeightedItem
from zeitgeist.formatters.html import HtmlConverter, write_digest
from zeitgeist.formatters.markdown import DigestFormatter, format_date

NOW = datetime(2025, 3, 4, 9, 30, tzinfo=timezone.utc)


def make_topics():
    photo = Image("http://cdn.example.net/lava.jpg", "http://www.volcano.com/1", 400)
    volcano = Topic([
        WeightedItem(12, Article("Volcano erupts", "", "http://www.volcano.com/1", images=(photo,))),
        WeightedItem(10, Article("Lava reaches sea", "", "http://news.example.org/2")),
    ])
    football = Topic([
        WeightedItem(9, Article("Striker [scores] twice", "", "http://sport.example.com/3")),
    ])
    return [volcano, football]


class TestDigestFormatter(unittest.TestCase):
    def test_format_date(self):
        self.assertEqual(format_date(NOW), "Tuesday 4 March 2025 / 09:30 UTC")

    def test_every_topic_listed(self):
        digest = DigestFormatter(NOW).format_digest(make_topics(), "Daily News", 5, 40)
        self.assertTrue(digest.startswith("# Daily News\n"))
        self.assertIn("Generated on Tuesday 4 March 2025 / 09:30 UTC", digest)
        self.assertIn("*2 topics from 40 articles in 5 feeds.*", digest)
        self.assertIn("## 1. Volcano erupts", digest)
        self.assertIn("## 2. Striker [scores] twice", digest)
        self.assertLess(digest.index("## 1. Volcano erupts"), digest.index("## 2. Striker"))

    def test_articles_linked_with_sources(self):
        digest = DigestFormatter(NOW).format_digest(make_topics(), "Daily News", 5, 40)
        self.assertIn("- [Volcano erupts](http://www.volcano.com/1) (www.volcano.com)", digest)
        self.assertIn("- [Lava reaches sea](http://news.example.org/2) (news.example.org)", digest)
        self.assertIn("- [Striker \\[scores\\] twice](http://sport.example.com/3) (sport.example.com)", digest)

    def test_awkward_urls_stay_well_formed(self):
        photo = Image("http://cdn.example.net/a photo.jpg", "http://wiki.example.org/Mercury_(planet)", 300)
        topic = Topic([
            WeightedItem(5, Article("Mercury transit", "", "http://wiki.example.org/Mercury_(planet)", images=(photo,))),
        ])
        digest = DigestFormatter(NOW).format_digest([topic], "Daily News", 1, 1)
        self.assertIn("- [Mercury transit](http://wiki.example.org/Mercury_%28planet%29) (wiki.example.org)", digest)
        self.assertIn("![Mercury transit](http://cdn.example.net/a%20photo.jpg)", digest)

        page = HtmlConverter().convert(digest, "Daily News", NOW)
        self.assertIn('href="http://wiki.example.org/Mercury_%28planet%29"', page)
        self.assertIn('src="http://cdn.example.net/a%20photo.jpg"', page)

    def test_lead_image_credited(self):
        digest = DigestFormatter(NOW).format_digest(make_topics(), "Daily News", 5, 40)
        self.assertIn("![Volcano erupts](http://cdn.example.net/lava.jpg)", digest)
        self.assertIn("*Image: volcano.com*", digest)

    def test_no_topics(self):
        digest = DigestFormatter(NOW).format_digest([], "Daily News", 5, 0)
        self.assertIn("No topics found.", digest)


class TestHtmlConverter(unittest.TestCase):
    def test_complete_page(self):
        markdown = DigestFormatter(NOW).format_digest(make_topics(), "Daily <News>", 5, 40)
        page = HtmlConverter(expiry_minutes=30).convert(markdown, "Daily <News>", NOW)
        self.assertTrue(page.startswith("<!DOCTYPE html>"))
        self.assertIn("<title>Daily &lt;News&gt;</title>", page)
        self.assertIn('<meta http-equiv="expires" content="Tue, 04 Mar 2025 10:00:00 GMT">', page)
        self.assertIn("<h2>", page)
        self.assertNotIn("<News>", page)

    def test_links_open_in_new_tab(self):
        page = HtmlConverter().convert("[Story](http://example.com/story)", "Title", NOW)
        self.assertIn('href="http://example.com/story"', page)
        self.assertIn('target="_blank"', page)

    def test_missing_css_file(self):
        with self.assertLogs("zeitgeist.formatters.html", level="WARNING"):
            converter = HtmlConverter(css_file="/nonexistent/style.css")
        self.assertIn("font-family", converter.css_content)


class TestWriteDigest(unittest.TestCase):
    def test_files_written(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = Path(tmpdir) / "out"
            markdown_file, html_file = write_digest(make_topics(), "Daily News", 5, 40, output_dir)
            self.assertEqual(markdown_file, output_dir / "digest.md")
            self.assertEqual(html_file, output_dir / "index.html")
            self.assertIn("## 1. Volcano erupts", markdown_file.read_text(encoding="utf-8"))
            self.assertIn("Volcano erupts", html_file.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
