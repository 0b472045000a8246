"""
Core data types for the cross-reference checker.

This module defines the content model shared by the loader, the resolver
and the report renderers:
- Article: one unit of authored content, identified by its slug
- BodyBlock: Prose, CodeSample or Image blocks making up an article body
- Reference: an unresolved, symbolic link to another article
- ResolvedReference: a Reference paired with the Article it points at
- TopicList: an ordered, curated group of References
- ArticleMetadata: page images, call-to-action and availability annotations
- CheckReport: the outcome of checking a whole collection
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from .errors import ResolutionError


class PageImagePurpose(str, Enum):
    """Recognised values for the ``purpose`` of a page image."""

    ICON = "icon"
    CARD = "card"


class CallToActionPurpose(str, Enum):
    """Recognised values for the ``purpose`` of a call-to-action link."""

    LINK = "link"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class Reference:
    """A symbolic link from one article to another.

    Attributes:
        target: Slug of the referenced article (exact, case-sensitive)
        source: Slug of the article containing the reference
        fragment: Optional heading anchor after ``#``, carried but not validated
        line: 1-based line number in the source file, when known
    """

    target: str
    source: str
    fragment: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class ResolvedReference:
    """A Reference converted into a handle on its target Article.

    Only the resolver produces these; articles themselves only ever
    hold unresolved References.
    """

    reference: Reference
    article: "Article"


@dataclass(frozen=True)
class Prose:
    text: str
    references: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class CodeSample:
    language: str | None
    code: str


@dataclass(frozen=True)
class Image:
    source: str
    alt: str | None = None


BodyBlock = Union[Prose, CodeSample, Image]


@dataclass(frozen=True)
class TopicList:
    """An ordered group of curated references.

    Attributes:
        heading: Group heading (``### Work``), or None for an untitled group
        references: References in display order; duplicates are allowed
    """

    heading: str | None
    references: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class PageImage:
    purpose: PageImagePurpose
    source: str
    alt: str | None = None


@dataclass(frozen=True)
class CallToAction:
    url: str
    purpose: CallToActionPurpose = CallToActionPurpose.LINK
    label: str | None = None


@dataclass(frozen=True)
class Availability:
    platform: str
    introduced: str | None = None


@dataclass(frozen=True)
class ArticleMetadata:
    """Metadata annotations attached to an article.

    Attributes:
        page_images: Icon/card images declared for the page
        call_to_action: Optional link shown prominently on the page
        available: Optional availability/publication annotation
        title_heading: Optional eyebrow heading shown above the title
        technology_root: Whether the article is the root of the collection
    """

    page_images: tuple[PageImage, ...] = ()
    call_to_action: CallToAction | None = None
    available: Availability | None = None
    title_heading: str | None = None
    technology_root: bool = False

    def page_image(self, purpose: PageImagePurpose) -> PageImage | None:
        for image in self.page_images:
            if image.purpose == purpose:
                return image
        return None

    @property
    def icon(self) -> PageImage | None:
        return self.page_image(PageImagePurpose.ICON)

    @property
    def card(self) -> PageImage | None:
        return self.page_image(PageImagePurpose.CARD)


@dataclass(frozen=True)
class Article:
    """One authored article.

    Attributes:
        slug: Unique identifier within a Collection
        title: The article headline
        subtitle: Optional abstract, the first paragraph after the title
        body: Body blocks in document order
        topics: Topic lists in document order
        metadata: Page metadata annotations
        path: Source file the article was loaded from, if any
    """

    slug: str
    title: str
    subtitle: str | None = None
    body: tuple[BodyBlock, ...] = ()
    topics: tuple[TopicList, ...] = ()
    metadata: ArticleMetadata = field(default_factory=ArticleMetadata)
    path: str | None = None

    @property
    def available_date(self) -> str | None:
        if self.metadata.available is None:
            return None
        return self.metadata.available.introduced

    def body_references(self) -> Iterator[Reference]:
        for block in self.body:
            if isinstance(block, Prose):
                yield from block.references

    def topic_references(self) -> Iterator[Reference]:
        for topic in self.topics:
            yield from topic.references

    @property
    def references(self) -> tuple[Reference, ...]:
        """All outgoing references: body first, then topic lists, in order."""
        return (*self.body_references(), *self.topic_references())

    def duplicate_topic_references(self) -> list[Reference]:
        """Topic entries whose target already appeared earlier in a topic list."""
        seen: set[str] = set()
        duplicates = []
        for ref in self.topic_references():
            if ref.target in seen:
                duplicates.append(ref)
            seen.add(ref.target)
        return duplicates


@dataclass
class CheckReport:
    """Outcome of checking a documentation directory.

    Attributes:
        title: Report heading
        article_count: Number of articles loaded
        reference_count: Number of references checked
        errors: Duplicate slug and dangling reference errors, in that order
        orphans: Slugs of non-root articles nothing links to
        duplicate_topics: Repeated topic list entries (warnings only)
    """

    title: str
    article_count: int = 0
    reference_count: int = 0
    errors: list[ResolutionError] = field(default_factory=list)
    orphans: list[str] = field(default_factory=list)
    duplicate_topics: list[Reference] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_of_kind(self, kind: str) -> list[ResolutionError]:
        return [error for error in self.errors if error.kind == kind]
