"""Unit tests for article filters."""

import re
import unittest
from datetime import datetime, timedelta, timezone

from zeitgeist.core.article import Article
from zeitgeist.filters import ArticleFilter, DateFilter, HeadlineRegexFilter, filter_articles

CUT_OFF = datetime(2010, 1, 1, tzinfo=timezone.utc)


def make_article(headline="Headline", date=CUT_OFF):
    return Article(headline, "Text", "http://example.com/story", date)


class TestDateFilter(unittest.TestCase):
    def test_recent_articles_kept(self):
        date_filter = DateFilter(CUT_OFF)
        self.assertTrue(date_filter.keep_article(make_article(date=CUT_OFF + timedelta(days=1))))
        self.assertTrue(date_filter.keep_article(make_article(date=CUT_OFF)))

    def test_old_articles_discarded(self):
        date_filter = DateFilter(CUT_OFF)
        self.assertFalse(date_filter.keep_article(make_article(date=CUT_OFF - timedelta(seconds=1))))

    def test_undated_articles_discarded(self):
        with self.assertLogs("zeitgeist.filters", level="WARNING"):
            self.assertFalse(DateFilter(CUT_OFF).keep_article(make_article(date=None)))

    def test_naive_dates_treated_as_utc(self):
        date_filter = DateFilter(CUT_OFF)
        self.assertTrue(date_filter.keep_article(make_article(date=datetime(2010, 1, 1, 0, 0))))
        self.assertFalse(date_filter.keep_article(make_article(date=datetime(2009, 12, 31, 23, 59))))

    def test_naive_cut_off(self):
        date_filter = DateFilter(datetime(2010, 1, 1))
        self.assertEqual(date_filter.cut_off, CUT_OFF)
        self.assertTrue(date_filter.keep_article(make_article(date=CUT_OFF + timedelta(hours=1))))
        self.assertFalse(date_filter.keep_article(make_article(date=datetime(2009, 12, 31))))

    def test_callable(self):
        self.assertTrue(DateFilter(CUT_OFF)(make_article()))


class TestHeadlineRegexFilter(unittest.TestCase):
    def test_matching_headline_discarded(self):
        headline_filter = HeadlineRegexFilter(r"Picture of the day.*")
        with self.assertLogs("zeitgeist.filters", level="WARNING"):
            self.assertFalse(headline_filter.keep_article(make_article("Picture of the Day: Rainbow")))

    def test_case_insensitive(self):
        headline_filter = HeadlineRegexFilter("breaking news")
        with self.assertLogs("zeitgeist.filters", level="WARNING"):
            self.assertFalse(headline_filter.keep_article(make_article("BREAKING NEWS")))

    def test_partial_match_kept(self):
        headline_filter = HeadlineRegexFilter("breaking news")
        self.assertTrue(headline_filter.keep_article(make_article("Breaking news: rabbits escape")))

    def test_compiled_pattern(self):
        headline_filter = HeadlineRegexFilter(re.compile("Quiz"))
        self.assertTrue(headline_filter.keep_article(make_article("quiz")))
        with self.assertLogs("zeitgeist.filters", level="WARNING"):
            self.assertFalse(headline_filter.keep_article(make_article("Quiz")))


class TestFilterArticles(unittest.TestCase):
    def test_all_filters_must_accept(self):
        old = make_article("Old", CUT_OFF - timedelta(days=1))
        quiz = make_article("Quiz")
        story = make_article("Story")
        kept = filter_articles([old, quiz, story], [DateFilter(CUT_OFF), HeadlineRegexFilter("quiz")])
        self.assertEqual(kept, [story])

    def test_no_filters(self):
        articles = [make_article("One"), make_article("Two")]
        self.assertEqual(filter_articles(articles, []), articles)

    def test_protocol(self):
        self.assertIsInstance(DateFilter(CUT_OFF), ArticleFilter)
        self.assertIsInstance(HeadlineRegexFilter("x"), ArticleFilter)


if __name__ == "__main__":
    unittest.main()
