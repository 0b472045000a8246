"""
Core domain models and reference resolution.

This package contains the content model, the slug-indexed Collection and
the resolver. Nothing here touches the filesystem.
"""

from .collection import Collection, build, find_duplicate_slugs
from .errors import (
    ArticleParseError,
    DanglingReferenceError,
    DuplicateSlugError,
    ResolutionError,
)
from .graph import ReferenceGraph
from .resolver import ResolutionErrors, check_article, resolve, resolve_article, validate_all
from .suggest import suggest_slugs
from .types import (
    Article,
    ArticleMetadata,
    Availability,
    CallToAction,
    CallToActionPurpose,
    CheckReport,
    CodeSample,
    Image,
    PageImage,
    PageImagePurpose,
    Prose,
    Reference,
    ResolvedReference,
    TopicList,
)

__all__ = [
    "Article",
    "ArticleMetadata",
    "ArticleParseError",
    "Availability",
    "CallToAction",
    "CallToActionPurpose",
    "CheckReport",
    "CodeSample",
    "Collection",
    "DanglingReferenceError",
    "DuplicateSlugError",
    "Image",
    "PageImage",
    "PageImagePurpose",
    "Prose",
    "Reference",
    "ReferenceGraph",
    "ResolutionError",
    "ResolutionErrors",
    "ResolvedReference",
    "TopicList",
    "build",
    "check_article",
    "find_duplicate_slugs",
    "resolve",
    "resolve_article",
    "suggest_slugs",
    "validate_all",
]
