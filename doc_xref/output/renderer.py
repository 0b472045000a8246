"""Report renderers for cross-reference check results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.errors import DanglingReferenceError, DuplicateSlugError
from ..core.types import CheckReport


def _generated_at() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def render_html(report: CheckReport, output_path: Path) -> None:
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("report.html")

    html = template.render(
        title=report.title,
        generated_at=_generated_at(),
        report=report,
        duplicates=report.errors_of_kind(DuplicateSlugError.kind),
        dangling=report.errors_of_kind(DanglingReferenceError.kind),
    )
    output_path.write_text(html, encoding="utf-8")


def render_markdown(report: CheckReport, output_path: Path) -> None:
    lines = [
        f"# {report.title}",
        "",
        f"- Articles: {report.article_count}",
        f"- References: {report.reference_count}",
        f"- Errors: {len(report.errors)}",
        "",
    ]

    duplicates = report.errors_of_kind(DuplicateSlugError.kind)
    if duplicates:
        lines.append("## Duplicate slugs")
        lines.append("")
        for error in duplicates:
            paths = f" ({', '.join(error.paths)})" if error.paths else ""
            lines.append(f"- `{error.slug}`{paths}")
        lines.append("")

    dangling = report.errors_of_kind(DanglingReferenceError.kind)
    if dangling:
        lines.append("## Dangling references")
        lines.append("")
        for error in dangling:
            location = error.source if error.line is None else f"{error.source}:{error.line}"
            line = f"- `{error.slug}` in {location}"
            if error.suggestions:
                line += f" (did you mean: {', '.join(error.suggestions)}?)"
            lines.append(line)
        lines.append("")

    if report.duplicate_topics:
        lines.append("## Repeated topic entries")
        lines.append("")
        for ref in report.duplicate_topics:
            lines.append(f"- `{ref.target}` in {ref.source}")
        lines.append("")

    if report.orphans:
        lines.append("## Unreferenced articles")
        lines.append("")
        for slug in report.orphans:
            lines.append(f"- `{slug}`")
        lines.append("")

    if report.ok:
        lines.append("All references resolve.")
        lines.append("")

    output_path.write_text("\n".join(lines), encoding="utf-8")


def render_json(report: CheckReport, output_path: Path) -> None:
    payload = {
        "title": report.title,
        "generated_at": _generated_at(),
        "ok": report.ok,
        "article_count": report.article_count,
        "reference_count": report.reference_count,
        "errors": [error.to_dict() for error in report.errors],
        "orphans": report.orphans,
        "duplicate_topics": [
            {"slug": ref.target, "source": ref.source, "line": ref.line}
            for ref in report.duplicate_topics
        ],
    }
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


RENDERERS = {
    "markdown": (render_markdown, ".md"),
    "html": (render_html, ".html"),
    "json": (render_json, ".json"),
}


def render_reports(
    report: CheckReport, output_dir: Path, formats: list[str], report_name: str = "report"
) -> list[Path]:
    """Write one report file per requested format and return their paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for fmt in formats:
        render, suffix = RENDERERS[fmt]
        path = output_dir / f"{report_name}{suffix}"
        render(report, path)
        paths.append(path)
    return paths
