"""Unit tests for plain-text cleaning."""

import unittest

from zeitgeist.utils.text import anglicise, clean_text, html_to_text, strip_punctuation


class TestHtmlToText(unittest.TestCase):
    def test_tags_removed(self):
        self.assertEqual(html_to_text("<b>some bold text</b>"), "some bold text")

    def test_adjacent_elements_separated(self):
        self.assertEqual(html_to_text("<p>First</p><p>Second</p>"), "First Second")

    def test_entities_decoded(self):
        self.assertEqual(html_to_text("Fish &amp; Chips"), "Fish & Chips")

    def test_empty(self):
        self.assertEqual(html_to_text(""), "")


class TestAnglicise(unittest.TestCase):
    def test_accents_removed(self):
        self.assertEqual(anglicise("café naïve résumé"), "cafe naive resume")

    def test_undecomposable_letters(self):
        self.assertEqual(anglicise("Straße"), "Strasse")


class TestStripPunctuation(unittest.TestCase):
    def test_sentence_punctuation(self):
        self.assertEqual(strip_punctuation("Hello, this is some text."), "Hello this is some text")

    def test_apostrophes_inside_words_kept(self):
        self.assertEqual(strip_punctuation("The Irish O'Neill family's dog."), "The Irish O'Neill family dog")

    def test_quotes_removed(self):
        self.assertEqual(strip_punctuation("'quotes'"), "quotes")
        self.assertEqual(strip_punctuation('He said "no" (twice)'), "He said no twice")

    def test_hyphens(self):
        self.assertEqual(strip_punctuation("a well-known - and widely - reported fact"),
                         "a well-known and widely reported fact")

    def test_number_commas(self):
        self.assertEqual(strip_punctuation("100,000"), "100000")

    def test_acronyms(self):
        self.assertEqual(strip_punctuation("Some words about N.A.S.A. and the U.S."),
                         "Some words about NASA and the US")


class TestCleanText(unittest.TestCase):
    def test_entities_and_punctuation(self):
        self.assertEqual(clean_text("&pound;&amp;&quot;&#163;&uuml;"), "£ £u")

    def test_case_preserved(self):
        self.assertEqual(clean_text("<p>The U.S. Economy, Today</p>"), "The US Economy Today")


if __name__ == "__main__":
    unittest.main()
