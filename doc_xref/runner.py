"""
Main pipeline orchestration for the cross-reference checker.

This module coordinates the entire workflow:
1. Load articles from the documentation directory
2. Detect duplicate slugs (fatal; resolution is skipped)
3. Build the slug-indexed Collection
4. Validate every reference and topic list entry
5. Annotate dangling references with suggestions and find orphans
6. Render report files

Supports both progress bar and quiet modes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .config import AppConfig
from .core.collection import build, find_duplicate_slugs
from .core.graph import ReferenceGraph
from .core.resolver import validate_all
from .core.suggest import annotate
from .core.types import Article, CheckReport
from .input.loader import load_articles
from .output.renderer import render_reports
from .utils.logging import close_logging, log_event, setup_logging


@dataclass
class RunResult:
    """Report plus the files written for it.

    Attributes:
        report: The check outcome
        report_paths: Report files written to the output directory
        failed: Whether the run should be treated as a failed publish
    """

    report: CheckReport
    report_paths: list[Path] = field(default_factory=list)
    failed: bool = False


def _log_error(logger: logging.Logger | None, message: str, **fields) -> None:
    if logger is None:
        return
    logger.error(message, extra=fields)


def check_articles(
    articles: list[Article],
    cfg: AppConfig,
    title: str = "Cross-reference report",
    logger: logging.Logger | None = None,
) -> CheckReport:
    """Check a list of articles and build a report without touching disk.

    Duplicate slugs stop the check before resolution, since references
    to a duplicated slug would be ambiguous.
    """
    report = CheckReport(
        title=title,
        article_count=len(articles),
        reference_count=sum(len(a.references) for a in articles),
    )

    duplicates = find_duplicate_slugs(articles)
    if duplicates:
        for error in duplicates:
            _log_error(logger, str(error), event="duplicate_slug", slug=error.slug)
        report.errors.extend(duplicates)
        return report

    collection = build(articles)
    dangling = list(validate_all(collection, workers=cfg.validation.workers))
    if cfg.validation.suggestions and dangling:
        dangling = annotate(
            dangling,
            collection,
            threshold=cfg.validation.suggestion_threshold,
            limit=cfg.validation.max_suggestions,
        )
    for error in dangling:
        _log_error(
            logger,
            str(error),
            event="dangling_reference",
            slug=error.slug,
            source=error.source,
            line=error.line,
        )
    report.errors.extend(dangling)

    if cfg.validation.warn_duplicate_topics:
        for article in collection.values():
            for ref in article.duplicate_topic_references():
                report.duplicate_topics.append(ref)
                if logger is not None:
                    logger.warning(f"Repeated topic entry '{ref.target}' in {ref.source}")

    report.orphans = ReferenceGraph.from_collection(collection).orphans()
    return report


def run_check(
    content_dir: Path,
    output_dir: Path,
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
) -> RunResult:
    """Run the complete check pipeline over a documentation directory.

    Args:
        content_dir: Directory containing article files
        output_dir: Directory for report and log files
        cfg: Application configuration
        show_progress: Whether to display progress bars
        console: Rich console for output (creates default if None)

    Returns:
        RunResult with the report, written files and failure flag

    Raises:
        FileNotFoundError: If ``content_dir`` does not exist
        ArticleParseError: If an article cannot be parsed
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logging(cfg.logging, output_dir)
    title = f"Cross-reference report - {content_dir.name}"

    try:
        log_event(
            logger,
            "Check start",
            event="check_start",
            input=str(content_dir),
            output=str(output_dir),
        )

        if not show_progress:
            articles = load_articles(content_dir, cfg.content)
            report = check_articles(articles, cfg, title=title, logger=logger)
            paths = render_reports(report, output_dir, cfg.output.formats, cfg.output.report_name)
        else:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console or Console(),
            )
            with progress:
                stage_task = progress.add_task("Stages", total=3)
                articles = load_articles(content_dir, cfg.content)
                progress.advance(stage_task, 1)
                report = check_articles(articles, cfg, title=title, logger=logger)
                progress.advance(stage_task, 1)
                paths = render_reports(
                    report, output_dir, cfg.output.formats, cfg.output.report_name
                )
                progress.advance(stage_task, 1)

        failed = not report.ok and cfg.validation.fail_on_error
        log_event(
            logger,
            "Check complete",
            event="check_complete",
            articles=report.article_count,
            references=report.reference_count,
            errors=len(report.errors),
            failed=failed,
        )
        return RunResult(report=report, report_paths=paths, failed=failed)
    finally:
        close_logging(logger)
