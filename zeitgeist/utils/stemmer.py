"""
Porter stemming for English words.

Reduces a word to its root form so that inflected and derived variants of the
same word ("connect", "connected", "connection") are counted as one term.
Uses NLTK's Porter stemmer in Martin Porter's reference mode, which includes
the two small departures from the 1980 paper (-bli maps to -ble and -logi
maps to -log) and leaves words of two letters or fewer alone.

Input must be lower-case ASCII letters; anything else has to be sanitised by
the caller first.
"""
from functools import lru_cache

from nltk.stem import PorterStemmer

stemmer = PorterStemmer(mode=PorterStemmer.MARTIN_EXTENSIONS)


@lru_cache(maxsize=65536)
def stem(word: str) -> str:
    """
    Stem a lower-case word.

    Args:
        word: The word to stem

    Returns:
        The word's stem
    """
    return stemmer.stem(word, to_lowercase=False)
