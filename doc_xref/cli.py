"""
Command-line interface for the cross-reference checker.

Uses Typer to provide a CLI with options for the main configuration
settings. Supports loading .env files for DOC_XREF_* settings.
"""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import REPORT_FORMATS, load_config, validate_config
from .core.collection import build, find_duplicate_slugs
from .core.errors import ArticleParseError, DanglingReferenceError
from .core.graph import ReferenceGraph
from .input.loader import load_articles
from .runner import run_check

app = typer.Typer(add_completion=False)
console = Console()


@app.callback()
def main() -> None:
    """Check cross-references between documentation articles."""
    # Load environment variables from .env if available
    load_dotenv()


@app.command()
def check(
    input: Path = typer.Option(..., "--input", "-i", exists=True, file_okay=False, readable=True),
    output: Path = typer.Option(Path("out"), "--output", "-o"),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, envvar="DOC_XREF_CONFIG", help="YAML config file."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    formats: list[str] | None = typer.Option(
        None,
        "--format",
        "-f",
        help=f"Report format, repeatable: {', '.join(REPORT_FORMATS)}.",
    ),
    workers: int | None = typer.Option(None, "--workers", "-w", min=1, help="Validation threads."),
    fail: bool | None = typer.Option(
        None, "--fail/--no-fail", help="Exit non-zero when any reference is broken."
    ),
    suggestions: bool | None = typer.Option(
        None, "--suggestions/--no-suggestions", help="Suggest similar slugs for broken references."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Validate every cross-reference in a documentation directory.

    Loads all articles, reports duplicate slugs and dangling references,
    and writes report files to the output directory.

    Args:
        input: Documentation directory containing article files
        output: Directory for reports and logs
        config: Optional path to YAML config file
        progress: Whether to show progress bar
        formats: Report formats to write
        workers: Number of validation threads
        fail: Whether broken references fail the run
        suggestions: Enable/disable slug suggestions
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
    """
    try:
        cfg = load_config(str(config) if config else None)

        # Override with CLI options
        if formats:
            cfg.output.formats = list(formats)
        if workers is not None:
            cfg.validation.workers = workers
        if fail is not None:
            cfg.validation.fail_on_error = fail
        if suggestions is not None:
            cfg.validation.suggestions = suggestions
        if log_level:
            cfg.logging.level = log_level
        if log_file is not None:
            cfg.logging.file = log_file
        validate_config(cfg)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    try:
        result = run_check(input, output, cfg, show_progress=progress, console=console)
    except ArticleParseError as exc:
        console.print(f"[red]Parse error:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    report = result.report
    if report.errors:
        console.print(_errors_table(report.errors))
    else:
        console.print(
            f"[green]All {report.reference_count} references across "
            f"{report.article_count} articles resolve.[/green]"
        )
    for path in result.report_paths:
        console.print(f"Report generated: {path}")

    if result.failed:
        raise typer.Exit(code=1)


@app.command()
def graph(
    input: Path = typer.Option(..., "--input", "-i", exists=True, file_okay=False, readable=True),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, envvar="DOC_XREF_CONFIG", help="YAML config file."
    ),
):
    """Show backlink counts and unreferenced articles."""
    try:
        cfg = load_config(str(config) if config else None)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    try:
        articles = load_articles(input, cfg.content)
    except ArticleParseError as exc:
        console.print(f"[red]Parse error:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    duplicates = find_duplicate_slugs(articles)
    if duplicates:
        console.print(_errors_table(duplicates))
        raise typer.Exit(code=1)

    ref_graph = ReferenceGraph.from_collection(build(articles))
    table = Table(title="References")
    table.add_column("Article")
    table.add_column("Outgoing", justify="right")
    table.add_column("Backlinks", justify="right")
    for slug in sorted(ref_graph.graph.nodes):
        table.add_row(slug, str(len(ref_graph.outgoing(slug))), str(len(ref_graph.backlinks(slug))))
    console.print(table)

    orphans = ref_graph.orphans()
    if orphans:
        console.print(f"Unreferenced: {', '.join(orphans)}")


def _errors_table(errors) -> Table:
    table = Table(title="Resolution errors")
    table.add_column("Kind")
    table.add_column("Slug")
    table.add_column("Source")
    table.add_column("Hint")
    for error in errors:
        source = error.source or ""
        hint = ""
        if isinstance(error, DanglingReferenceError):
            if error.line is not None:
                source = f"{source}:{error.line}"
            if error.suggestions:
                hint = f"did you mean: {', '.join(error.suggestions)}?"
        else:
            hint = ", ".join(getattr(error, "paths", ()))
        table.add_row(error.kind, error.slug, source, hint)
    return table


if __name__ == "__main__":
    app()
