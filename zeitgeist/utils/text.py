"""
Plain-text cleaning utilities for feed content.
"""
import re
import unicodedata
import warnings

from bs4 import BeautifulSoup

# Letters that have no Unicode decomposition but still have an obvious
# unaccented English spelling.
_UNDECOMPOSABLE = str.maketrans({
    'ß': 'ss',
    'æ': 'ae', 'Æ': 'AE',
    'œ': 'oe', 'Œ': 'OE',
    'ø': 'o', 'Ø': 'O',
    'ł': 'l', 'Ł': 'L',
    'đ': 'd', 'Đ': 'D',
})

_NUMBER_COMMA = re.compile(r'(\d),(\d)')
_ACRONYM = re.compile(r'\b(?:[A-Za-z]\.){2,}')
_PUNCTUATION = re.compile(r'[.,;:?!\s"“”()\[\]&|/–—•]+')
_EDGE_APOSTROPHE_OR_HYPHEN = re.compile(r"^['’]|\s['’]|['’]\s|['’]$|^-|\s-|-\s|-$")
_POSSESSIVE = re.compile(r"['’]s(?=\s|$)")
_WHITESPACE = re.compile(r'\s+')


def html_to_text(markup: str) -> str:
    """
    Convert HTML (or plain text containing entities) to plain text.

    Tags are replaced by whitespace so that adjacent elements do not run
    together, entities are decoded and runs of whitespace are collapsed.
    """
    if not markup:
        return ""
    with warnings.catch_warnings():
        # Short feed snippets can look like file names or URLs to bs4.
        warnings.simplefilter('ignore', UserWarning)
        text = BeautifulSoup(markup, 'html.parser').get_text(' ')
    return _WHITESPACE.sub(' ', text).strip()


def anglicise(text: str) -> str:
    """
    Strip accents from letters.

    Foreign terms appear in English text both with and without their accents;
    folding them means both spellings count as the same word.
    """
    decomposed = unicodedata.normalize('NFKD', text.translate(_UNDECOMPOSABLE))
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def strip_punctuation(text: str) -> str:
    """
    Remove all non-significant punctuation.

    Hyphens and apostrophes are kept only inside words, possessive 's is
    dropped, dots are removed from acronyms (N.A.S.A. becomes NASA) and commas
    from numbers (100,000 becomes 100000).  Everything else that separates
    words becomes a single space.
    """
    result = _NUMBER_COMMA.sub(r'\1\2', text)
    result = _ACRONYM.sub(lambda match: match.group(0).replace('.', ''), result)
    result = _PUNCTUATION.sub(' ', result)
    result = _EDGE_APOSTROPHE_OR_HYPHEN.sub(' ', result)
    result = _POSSESSIVE.sub('', result)
    return _WHITESPACE.sub(' ', result).strip()


def clean_text(markup: str) -> str:
    """Convert feed markup into plain text suitable for word counting."""
    return strip_punctuation(anglicise(html_to_text(markup)))
