"""
Text analysis utilities for Zeitgeist.

Turns an article's headline and body text into a map of stemmed terms to
occurrence counts, ignoring very short words and low-value stop words.
"""
import logging
import re
from collections import Counter
from functools import lru_cache
from importlib import resources
from typing import Dict, FrozenSet, Iterable

from zeitgeist.errors import ResourceLoadError
from zeitgeist.utils.stemmer import stem

logger = logging.getLogger(__name__)

STOP_WORDS_RESOURCE = "stopwords.txt"
MINIMUM_WORD_LENGTH = 3

_NON_WORD = re.compile(r'\W+')


def _read_stop_words() -> Iterable[str]:
    try:
        text = (resources.files("zeitgeist") / "data" / STOP_WORDS_RESOURCE).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"Unable to load stop-word list '{STOP_WORDS_RESOURCE}': {e}") from e
    for line in text.splitlines():
        word = line.strip().lower()
        if word and not word.startswith('#'):
            yield word


@lru_cache(maxsize=None)
def get_stop_stems() -> FrozenSet[str]:
    """
    Get the stems of all stop words.

    The list is loaded and stemmed on first use and shared, read-only, by
    every caller for the rest of the process.

    Returns:
        Frozen set of stop-word stems

    Raises:
        ResourceLoadError: If the bundled word list cannot be read
    """
    stems = frozenset(stem(word) if word.isascii() and word.isalpha() else word
                      for word in _read_stop_words())
    if not stems:
        raise ResourceLoadError(f"Stop-word list '{STOP_WORDS_RESOURCE}' is empty")
    logger.debug(f"Loaded {len(stems)} stop-word stems")
    return stems


def is_stop_stem(term: str) -> bool:
    """Check whether a stemmed term belongs to a stop word."""
    return term in get_stop_stems()


def to_term(token: str) -> str:
    """
    Normalise a single token into the term it is counted as.

    Alphabetic ASCII tokens are stemmed; anything else (numbers, words with
    accents the caller did not fold) is already as reduced as it gets.
    """
    word = token.lower()
    if word.isascii() and word.isalpha():
        return stem(word)
    return word


def count_words(text: str) -> Counter:
    """
    Count how many times each term occurs in the specified text.

    Args:
        text: Plain text

    Returns:
        Counter of terms, excluding short words and stop words
    """
    counts = Counter()
    if not text:
        return counts
    stop_stems = get_stop_stems()
    for token in _NON_WORD.split(text):
        if len(token.lower()) < MINIMUM_WORD_LENGTH:
            continue
        term = to_term(token)
        if term not in stop_stems:
            counts[term] += 1
    return counts


def extract_word_counts(headline: str, body_text: str) -> Dict[str, int]:
    """
    Extract the term counts for one article.

    Headline and body counts are summed, so a term used once in the headline
    and twice in the body has a count of 3.

    Args:
        headline: The article headline, as plain text
        body_text: The article body, as plain text

    Returns:
        Dict mapping stemmed terms to their combined counts
    """
    counts = count_words(headline)
    counts.update(count_words(body_text))
    return dict(counts)
