"""
Error taxonomy for reference resolution and article parsing.

Resolution errors are collected and reported together rather than
raised mid-pass; the caller decides whether any of them blocks
publication.
"""

from __future__ import annotations

from typing import Any


class ResolutionError(Exception):
    """Base class for errors that prevent a Collection from being published.

    Attributes:
        slug: The offending slug
        source: Slug of the article the error was found in, if any
        kind: Machine-readable error kind
    """

    kind = "resolution_error"

    def __init__(self, slug: str, source: str | None = None) -> None:
        self.slug = slug
        self.source = source
        super().__init__(self._message())

    def _message(self) -> str:
        return f"Cannot resolve '{self.slug}'"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolutionError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.slug == other.slug
            and self.source == other.source
        )

    def __hash__(self) -> int:
        return hash((type(self), self.slug, self.source))

    def __repr__(self) -> str:
        if self.source is None:
            return f"{type(self).__name__}({self.slug!r})"
        return f"{type(self).__name__}({self.slug!r}, {self.source!r})"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "slug": self.slug, "source": self.source}


class DuplicateSlugError(ResolutionError):
    """Two or more articles claim the same slug."""

    kind = "duplicate_slug"

    def __init__(self, slug: str, paths: tuple[str, ...] = ()) -> None:
        self.paths = paths
        super().__init__(slug)

    def _message(self) -> str:
        message = f"Duplicate slug '{self.slug}'"
        if self.paths:
            message += f" ({', '.join(self.paths)})"
        return message

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["paths"] = list(self.paths)
        return data


class DanglingReferenceError(ResolutionError):
    """An article references a slug absent from the Collection.

    Equality only considers the slug and source article so reports can be
    compared independently of line numbers or suggestions.
    """

    kind = "dangling_reference"

    def __init__(
        self,
        slug: str,
        source: str,
        line: int | None = None,
        suggestions: tuple[str, ...] = (),
    ) -> None:
        self.line = line
        self.suggestions = suggestions
        super().__init__(slug, source)

    def _message(self) -> str:
        location = self.source if self.line is None else f"{self.source}:{self.line}"
        message = f"Dangling reference to '{self.slug}' in {location}"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        return message

    def with_suggestions(self, suggestions: tuple[str, ...]) -> "DanglingReferenceError":
        return DanglingReferenceError(self.slug, self.source, self.line, suggestions)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["line"] = self.line
        data["suggestions"] = list(self.suggestions)
        return data


class ArticleParseError(ValueError):
    """An article file could not be parsed."""

    def __init__(self, path: str | None, message: str, line: int | None = None) -> None:
        self.path = path
        self.line = line
        location = path or "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")
