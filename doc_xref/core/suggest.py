"""
Fuzzy slug suggestions for dangling references.

Resolution itself is always exact; suggestions only annotate reports so an
author can spot typos and case mistakes quickly.
"""

from __future__ import annotations

from collections.abc import Iterable

from rapidfuzz import fuzz, process

from .collection import Collection
from .errors import DanglingReferenceError


def suggest_slugs(
    slug: str,
    candidates: Iterable[str],
    threshold: int = 80,
    limit: int = 3,
) -> tuple[str, ...]:
    """Return existing slugs similar to a slug that failed to resolve.

    Comparison is case-insensitive so ``<doc:pwc>`` suggests ``PwC``.

    Args:
        slug: The unresolved slug
        candidates: Slugs present in the collection
        threshold: Minimum similarity (0-100) for a candidate to be suggested
        limit: Maximum number of suggestions

    Returns:
        Suggested slugs, best match first
    """
    if limit <= 0:
        return ()
    matches = process.extract(
        slug,
        list(candidates),
        scorer=fuzz.ratio,
        processor=str.lower,
        limit=limit,
        score_cutoff=threshold,
    )
    return tuple(match for match, _score, _index in matches)


def annotate(
    errors: Iterable[DanglingReferenceError],
    collection: Collection,
    threshold: int = 80,
    limit: int = 3,
) -> list[DanglingReferenceError]:
    """Attach suggestions to each dangling reference error."""
    candidates = list(collection.keys())
    return [
        error.with_suggestions(suggest_slugs(error.slug, candidates, threshold, limit))
        for error in errors
    ]
