"""
Slug-indexed article collection.

A Collection is an explicit, immutable value built from a flat list of
articles. It is passed to the resolver rather than held as global state.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .errors import DuplicateSlugError
from .types import Article


class Collection(Mapping[str, Article]):
    """Read-only mapping from slug to Article.

    Iteration follows the order articles were supplied to ``build``.
    Use ``build`` to construct one; it enforces slug uniqueness.
    """

    def __init__(self, index: Mapping[str, Article]) -> None:
        self._index = MappingProxyType(dict(index))

    def __getitem__(self, slug: str) -> Article:
        return self._index[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Collection({len(self)} articles)"

    @property
    def articles(self) -> tuple[Article, ...]:
        return tuple(self._index.values())

    def roots(self) -> tuple[Article, ...]:
        """Articles marked as the technology root of the collection."""
        return tuple(a for a in self._index.values() if a.metadata.technology_root)


def build(articles: Iterable[Article]) -> Collection:
    """Build a Collection from a flat sequence of articles.

    Args:
        articles: Articles to index

    Returns:
        A Collection containing every article

    Raises:
        DuplicateSlugError: If two articles share a slug. The error names
            the first duplicated slug encountered.
    """
    index: dict[str, Article] = {}
    for article in articles:
        existing = index.get(article.slug)
        if existing is not None:
            raise DuplicateSlugError(article.slug, _paths(existing, article))
        index[article.slug] = article
    return Collection(index)


def find_duplicate_slugs(articles: Iterable[Article]) -> list[DuplicateSlugError]:
    """Return one DuplicateSlugError per slug claimed by more than one article.

    Errors are ordered by the position of each slug's first occurrence.
    """
    by_slug: dict[str, list[Article]] = defaultdict(list)
    for article in articles:
        by_slug[article.slug].append(article)
    return [
        DuplicateSlugError(slug, _paths(*claimants))
        for slug, claimants in by_slug.items()
        if len(claimants) > 1
    ]


def _paths(*articles: Article) -> tuple[str, ...]:
    return tuple(a.path for a in articles if a.path)
