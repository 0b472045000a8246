"""
Reference resolution over a Collection.

Resolution happens in two strictly ordered passes: the Collection index is
built first (see ``collection.build``), then every article's references are
looked up against it. Lookups are exact and case-sensitive. Dangling
references are accumulated rather than raised so one pass reports every
broken link.
"""

from __future__ import annotations

from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

from .collection import Collection
from .errors import DanglingReferenceError
from .types import Article, Reference, ResolvedReference


def resolve(collection: Collection, ref: Reference) -> Article:
    """Look up the article a reference points at.

    Raises:
        DanglingReferenceError: If no article has the referenced slug
    """
    article = collection.get(ref.target)
    if article is None:
        raise DanglingReferenceError(ref.target, ref.source, ref.line)
    return article


def resolve_article(collection: Collection, article: Article) -> tuple[ResolvedReference, ...]:
    """Resolve every outgoing reference of one article, in document order.

    Raises:
        DanglingReferenceError: On the first reference that does not resolve
    """
    return tuple(
        ResolvedReference(reference=ref, article=resolve(collection, ref))
        for ref in article.references
    )


def check_article(collection: Collection, article: Article) -> list[DanglingReferenceError]:
    """Return the dangling references of one article without raising.

    Body references come first, then topic lists in declared order.
    """
    errors: list[DanglingReferenceError] = []
    for ref in article.references:
        if ref.target not in collection:
            errors.append(DanglingReferenceError(ref.target, article.slug, ref.line))
    return errors


class ResolutionErrors:
    """Lazy, restartable sequence of every dangling reference in a Collection.

    Each call to ``iter()`` walks the Collection again, so iterating twice
    yields the same errors in the same order. Nothing is computed until the
    sequence is iterated.
    """

    def __init__(self, collection: Collection, workers: int = 1) -> None:
        self._collection = collection
        self._workers = max(1, int(workers))

    def __iter__(self) -> Iterator[DanglingReferenceError]:
        if self._workers == 1:
            for article in self._collection.values():
                yield from check_article(self._collection, article)
            return

        articles = list(self._collection.values())
        # map() keeps results in collection order
        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            results = list(
                executor.map(lambda a: check_article(self._collection, a), articles)
            )
        for errors in results:
            yield from errors

    def __repr__(self) -> str:
        return f"ResolutionErrors({self._collection!r}, workers={self._workers})"


def validate_all(collection: Collection, workers: int = 1) -> ResolutionErrors:
    """Return every dangling reference across the whole Collection.

    Args:
        collection: A fully built Collection
        workers: Number of threads to check articles with; 1 is sequential

    Returns:
        A lazy, restartable iterable of DanglingReferenceError
    """
    return ResolutionErrors(collection, workers=workers)
