"""
Directory loader for documentation articles.

Walks a documentation directory and parses every article file into an
Article. The slug of each article is its file name without extension.
"""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path

from ..config import ContentConfig
from ..core.errors import ArticleParseError
from ..core.types import Article
from .parser import parse_article

logger = logging.getLogger(__name__)


def discover_files(root: Path, cfg: ContentConfig) -> list[Path]:
    """List article files under ``root`` in a stable, sorted order.

    Args:
        root: Documentation directory
        cfg: Content settings (extensions, recursion, ignore patterns)

    Returns:
        Sorted list of file paths

    Raises:
        FileNotFoundError: If ``root`` is not a directory
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Content directory not found: {root}")

    extensions = {ext.lower() for ext in cfg.extensions}
    pattern = "**/*" if cfg.recursive else "*"
    files = []
    for path in root.glob(pattern):
        if not path.is_file() or path.suffix.lower() not in extensions:
            continue
        relative = path.relative_to(root).as_posix()
        if any(fnmatch.fnmatch(relative, ignore) for ignore in cfg.ignore):
            logger.debug(f"Skipping ignored file {relative}")
            continue
        files.append(path)
    return sorted(files)


def load_articles(root: Path, cfg: ContentConfig | None = None) -> list[Article]:
    """Parse every article file under a documentation directory.

    Duplicate slugs (same file name in two subdirectories) are kept so the
    caller can report them; see ``core.collection.find_duplicate_slugs``.

    Raises:
        ArticleParseError: If any file fails to parse or is not valid UTF-8
    """
    cfg = cfg or ContentConfig()
    articles = []
    for path in discover_files(root, cfg):
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ArticleParseError(str(path), "not valid UTF-8") from exc
        article = parse_article(text, path=path)
        logger.debug(f"Loaded article {article.slug} ({len(article.references)} references)")
        articles.append(article)
    return articles
