"""
doc-xref - cross-reference checker for documentation articles.

This package loads a directory of markup articles, indexes them by slug
and verifies that every <doc:Slug> reference and topic list entry points
at an existing article before the site is published.

Main entry point is the CLI via `doc-xref check` command.

Example:
    $ doc-xref check -i Documentation/ -o out/
"""

__all__ = [
    "__version__",
    "Article",
    "Collection",
    "DanglingReferenceError",
    "DuplicateSlugError",
    "Reference",
    "build",
    "load_articles",
    "parse_article",
    "resolve",
    "validate_all",
]
__version__ = "0.1.0"

from .core.collection import Collection, build
from .core.errors import DanglingReferenceError, DuplicateSlugError
from .core.resolver import resolve, validate_all
from .core.types import Article, Reference
from .input.loader import load_articles
from .input.parser import parse_article
