"""
Topic data model for Zeitgeist.
"""
from functools import total_ordering
from typing import Generic, Iterable, List, Tuple, TypeVar

from zeitgeist.core.article import Article, Image

T = TypeVar('T')


@total_ordering
class WeightedItem(Generic[T]):
    """
    Attaches a weighting to an item.

    Ordering and equality consider the weight only; two items with equal
    weights are equal whatever their payloads.  Ranked lists are built by
    sorting in reverse.
    """
    __slots__ = ('weight', 'item')

    def __init__(self, weight: float, item: T):
        self.weight = float(weight)
        self.item = item

    def __eq__(self, other) -> bool:
        if not isinstance(other, WeightedItem):
            return NotImplemented
        return self.weight == other.weight

    def __lt__(self, other) -> bool:
        if not isinstance(other, WeightedItem):
            return NotImplemented
        return self.weight < other.weight

    def __hash__(self) -> int:
        return hash(self.weight)

    def __repr__(self) -> str:
        return f"{self.weight}: {self.item!r}"


class Topic:
    """
    A topic is some unifying theme that links multiple individual articles.

    Articles are held in rank order, most relevant first.
    """

    def __init__(self, articles: Iterable[WeightedItem[Article]]):
        self._articles: Tuple[WeightedItem[Article], ...] = tuple(articles)

    @property
    def articles(self) -> Tuple[WeightedItem[Article], ...]:
        return self._articles

    @property
    def headline(self) -> str:
        """Headline of the highest ranked article ('' for an empty topic)."""
        return self._articles[0].item.headline if self._articles else ""

    @property
    def image_lists(self) -> List[Tuple[Image, ...]]:
        """
        The distinct image lists of the member articles.

        Articles from the same feed often carry an identical set of images
        (a logo, for example), so each list is only included once.  Articles
        without images contribute nothing.
        """
        lists = []
        for weighted in self._articles:
            images = weighted.item.images
            if images and images not in lists:
                lists.append(images)
        return lists

    @property
    def images(self) -> List[Image]:
        """All distinct images of the member articles, in rank order."""
        images = []
        seen = set()
        for image_list in self.image_lists:
            for image in image_list:
                if image.image_url not in seen:
                    seen.add(image.image_url)
                    images.append(image)
        return images

    def count_distinct_sources(self) -> int:
        """
        Counts how many distinct sites are represented by the articles that
        make up this topic.

        Returns:
            The number of distinct article URL hosts
        """
        return len({weighted.item.source for weighted in self._articles})

    def __len__(self) -> int:
        return len(self._articles)

    def __repr__(self) -> str:
        return f"Topic({len(self._articles)} articles, headline={self.headline!r})"
