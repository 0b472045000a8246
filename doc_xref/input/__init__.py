"""Content loading: article parsing and directory discovery."""

from .loader import discover_files, load_articles
from .parser import extract_references, parse_article, slug_from_title

__all__ = [
    "discover_files",
    "extract_references",
    "load_articles",
    "parse_article",
    "slug_from_title",
]
