"""
Corpus model: which terms appear in which articles, and how often.
"""
import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from zeitgeist.core.article import Article
from zeitgeist.core.matrix import Matrix
from zeitgeist.utils.nlp import extract_word_counts

logger = logging.getLogger(__name__)


class Corpus:
    """
    Word counts for a fixed, ordered list of articles.

    Per-article counts are extracted once, on construction, and reused both
    for choosing the vocabulary and for filling in the term-document matrix.
    """

    def __init__(self, articles: Sequence[Article]):
        self.articles: List[Article] = list(articles)
        self.word_counts: List[Dict[str, int]] = [
            extract_word_counts(article.headline, article.text) for article in self.articles
        ]
        # How many articles each term appears in.
        self.document_frequencies: Counter = Counter()
        for counts in self.word_counts:
            self.document_frequencies.update(counts.keys())

    def __len__(self) -> int:
        return len(self.articles)

    def vocabulary(self, min_documents: int, max_document_fraction: Optional[float] = None) -> List[str]:
        """
        Select the key terms used as matrix columns.

        Args:
            min_documents: Minimum number of articles a term must appear in
            max_document_fraction: If given, terms appearing in this fraction
                of the articles or more are considered too common to be useful

        Returns:
            The selected terms in lexicographic order
        """
        ceiling = None if max_document_fraction is None else len(self.articles) * max_document_fraction
        return sorted(term for term, frequency in self.document_frequencies.items()
                      if frequency >= min_documents and (ceiling is None or frequency < ceiling))

    def term_document_matrix(self, vocabulary: Sequence[str]) -> Matrix:
        """
        Build the articles x terms matrix of occurrence counts.

        Args:
            vocabulary: The terms to use as columns, in column order

        Returns:
            Matrix with one row per article, in article order
        """
        matrix = Matrix(len(self.articles), len(vocabulary))
        for row, counts in enumerate(self.word_counts):
            for column, term in enumerate(vocabulary):
                count = counts.get(term)
                if count:
                    matrix.set(row, column, count)
        return matrix
