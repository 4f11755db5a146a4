"""
Identifies common topics across multiple articles from multiple feeds.

Based on the non-negative matrix factorisation example in Programming
Collective Intelligence by Toby Segaran: articles are described by the terms
they contain, the article-term matrix is factorised into a small number of
latent features, and each article is assigned to the feature it is most
strongly linked to.
"""
import bisect
import logging
import math
from typing import List, Optional, Sequence

from zeitgeist.core.article import Article
from zeitgeist.core.corpus import Corpus
from zeitgeist.core.matrix import Matrix
from zeitgeist.core.nmf import DEFAULT_MAX_ITERATIONS, NonNegativeMatrixFactorizer
from zeitgeist.core.topic import Topic, WeightedItem
from zeitgeist.errors import ConfigurationError

logger = logging.getLogger(__name__)


def validate_thresholds(min_articles_per_topic: int,
                        max_articles_per_topic: int,
                        min_sources_per_topic: int) -> None:
    """
    Check that the topic size thresholds can be satisfied together.

    Raises:
        ConfigurationError: If the thresholds contradict each other
    """
    if min_articles_per_topic > max_articles_per_topic:
        raise ConfigurationError(
            f"Minimum articles per topic ({min_articles_per_topic}) is greater than "
            f"the maximum ({max_articles_per_topic})")
    if min_sources_per_topic > max_articles_per_topic:
        raise ConfigurationError(
            f"Minimum sources per topic ({min_sources_per_topic}) is greater than "
            f"the maximum articles per topic ({max_articles_per_topic})")


def estimate_feature_count(article_count: int, vocabulary_size: int) -> int:
    """
    Estimate how many latent features to extract.

    Returns:
        ceil(ln(articles) * ln(vocabulary)), at least 1 for a non-empty
        corpus and vocabulary, 0 otherwise
    """
    if article_count <= 0 or vocabulary_size <= 0:
        return 0
    return max(1, math.ceil(math.log(article_count) * math.log(vocabulary_size)))


def extract_topics(articles: Sequence[Article],
                   weights: Matrix,
                   features: Matrix,
                   min_articles_per_topic: int,
                   max_articles_per_topic: int,
                   min_sources_per_topic: int,
                   min_article_relevance: float) -> List[Topic]:
    """
    Turn the factorisation of the article-term matrix into ranked topics.

    Each article joins the feature it has the highest weight for, unless that
    weight is below the relevance threshold.  Within a feature, articles are
    ranked by descending weight; articles with equal weights keep the order in
    which they were assigned.  Features with too few articles or sources are
    discarded and the remaining topics are ordered by size, largest first.

    Args:
        articles: Articles in matrix row order
        weights: Articles x features matrix
        features: Features x terms matrix
        min_articles_per_topic: Minimum articles a feature needs to become a topic
        max_articles_per_topic: Maximum articles included in a topic
        min_sources_per_topic: Minimum distinct sources a topic must draw on
        min_article_relevance: Minimum weight linking an article to its feature

    Returns:
        List of topics, largest first
    """
    feature_count = features.row_count
    if weights.row_count != len(articles) or weights.column_count != feature_count:
        raise ValueError(f"Weights matrix is {weights.shape_str()}, expected "
                         f"{len(articles)}x{feature_count}")

    buckets: List[List[WeightedItem[Article]]] = [[] for _ in range(feature_count)]
    # Negated weights, kept parallel to each bucket, for bisection.
    bucket_keys: List[List[float]] = [[] for _ in range(feature_count)]

    for i, article in enumerate(articles):
        if feature_count == 0:
            break
        row = weights.row(i)
        feature = max(range(feature_count), key=row.__getitem__)
        weight = row[feature]
        if weight < min_article_relevance:
            # Too tenuous a link to any theme.
            continue
        index = bisect.bisect_right(bucket_keys[feature], -weight)
        bucket_keys[feature].insert(index, -weight)
        buckets[feature].insert(index, WeightedItem(weight, article))

    topics = []
    for bucket in buckets:
        topic = Topic(bucket[:max_articles_per_topic])
        if len(bucket) < min_articles_per_topic:
            logger.debug(f"Discarding topic '{topic.headline or '<empty>'}': "
                         f"{len(bucket)} articles, {min_articles_per_topic} required")
            continue
        sources = topic.count_distinct_sources()
        if sources < min_sources_per_topic:
            logger.debug(f"Discarding topic '{topic.headline or '<empty>'}': "
                         f"{sources} sources, {min_sources_per_topic} required")
            continue
        topics.append(topic)

    # Stable, so equal-sized topics stay in feature order.
    topics.sort(key=len, reverse=True)
    return topics


class Zeitgeist:
    """
    Discovers the topics shared by a list of articles.
    """

    def __init__(self,
                 articles: Sequence[Article],
                 min_articles_per_topic: int,
                 max_articles_per_topic: int,
                 min_sources_per_topic: int,
                 min_article_relevance: float,
                 feature_count: Optional[int] = None,
                 max_document_fraction: Optional[float] = None,
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 seed: Optional[int] = None):
        """
        Initialize the Zeitgeist.

        Args:
            articles: Fetched and filtered articles to analyse
            min_articles_per_topic: A topic must contain at least this many articles
            max_articles_per_topic: A topic includes at most this many articles
            min_sources_per_topic: A topic's articles must come from this many sites
            min_article_relevance: Minimum weight for an article to join a topic
            feature_count: Number of latent features, estimated if None
            max_document_fraction: Ignore terms found in this fraction of
                articles or more (no upper limit if None)
            max_iterations: Iteration cap for the factorisation
            seed: Random seed for reproducible factorisation

        Raises:
            ConfigurationError: If the thresholds are inconsistent
        """
        validate_thresholds(min_articles_per_topic, max_articles_per_topic, min_sources_per_topic)
        if feature_count is not None and feature_count < 0:
            raise ConfigurationError(f"Feature count must not be negative, got {feature_count}")
        if max_document_fraction is not None and max_document_fraction <= 0:
            raise ConfigurationError(f"Maximum document fraction must be positive, got {max_document_fraction}")
        self.articles = list(articles)
        self.min_articles_per_topic = min_articles_per_topic
        self.max_articles_per_topic = max_articles_per_topic
        self.min_sources_per_topic = min_sources_per_topic
        self.min_article_relevance = min_article_relevance
        self.feature_count = feature_count
        self.max_document_fraction = max_document_fraction
        self.max_iterations = max_iterations
        self.seed = seed

    def get_topics(self) -> List[Topic]:
        """
        Analyse the articles and identify the topics they share.

        Returns:
            List of topics, largest first (empty if there is nothing to analyse)
        """
        if not self.articles:
            logger.info("No articles to analyse")
            return []

        corpus = Corpus(self.articles)
        vocabulary = corpus.vocabulary(self.min_articles_per_topic, self.max_document_fraction)
        logger.info(f"Total articles: {len(corpus)}")
        logger.info(f"Distinct terms: {len(corpus.document_frequencies)}")
        logger.info(f"Key terms: {len(vocabulary)}")
        if not vocabulary:
            return []

        feature_count = self.feature_count
        if feature_count is None:
            feature_count = estimate_feature_count(len(corpus), len(vocabulary))
        logger.info(f"Extracting {feature_count} features")

        factorizer = NonNegativeMatrixFactorizer(max_iterations=self.max_iterations, seed=self.seed)
        weights, features = factorizer.factorize(corpus.term_document_matrix(vocabulary), feature_count)
        topics = extract_topics(corpus.articles,
                                weights,
                                features,
                                self.min_articles_per_topic,
                                self.max_articles_per_topic,
                                self.min_sources_per_topic,
                                self.min_article_relevance)
        logger.info(f"{len(topics)} topics identified")
        return topics
