"""Tests for the check pipeline."""

from __future__ import annotations

import json
from pathlib import Path

from doc_xref.config import AppConfig
from doc_xref.core.errors import DanglingReferenceError, DuplicateSlugError
from doc_xref.input.parser import parse_article
from doc_xref.runner import check_articles, run_check


ROOT = """\
# Me

@Metadata {
    @TechnologyRoot
}

Portfolio and blog.

## Topics

### Experience

- <doc:PwC>
- <doc:Google>
"""

PWC = """\
# Working at PwC

Before <doc:Google> I was at PwC. See also <doc:Mobil>.
"""

GOOGLE = """\
# Working at Google

Back to <doc:Me>.
"""


def _cfg() -> AppConfig:
    cfg = AppConfig()
    cfg.logging.console = False
    return cfg


def _write_docs(root: Path, extra: dict[str, str] | None = None) -> Path:
    docs = root / "Documentation"
    docs.mkdir()
    (docs / "Me.md").write_text(ROOT, encoding="utf-8")
    (docs / "PwC.md").write_text(PWC, encoding="utf-8")
    (docs / "Google.md").write_text(GOOGLE, encoding="utf-8")
    for name, text in (extra or {}).items():
        path = docs / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return docs


def test_check_articles_clean():
    articles = [
        parse_article("# A\n\nSee <doc:b>.\n", slug="a"),
        parse_article("# B\n\nSee <doc:a>.\n", slug="b"),
    ]

    report = check_articles(articles, _cfg())

    assert report.ok
    assert report.article_count == 2
    assert report.reference_count == 2
    assert report.orphans == []


def test_check_articles_reports_dangling_with_suggestions():
    articles = [
        parse_article("# Mobile\n", slug="Mobile"),
        parse_article("# PwC\n\nSee <doc:Mobil>.\n", slug="PwC"),
    ]

    report = check_articles(articles, _cfg())

    assert report.errors == [DanglingReferenceError("Mobil", "PwC")]
    assert report.errors[0].suggestions == ("Mobile",)
    assert report.errors[0].line == 3


def test_check_articles_without_suggestions():
    cfg = _cfg()
    cfg.validation.suggestions = False
    articles = [
        parse_article("# Mobile\n", slug="Mobile"),
        parse_article("# PwC\n\nSee <doc:Mobil>.\n", slug="PwC"),
    ]

    report = check_articles(articles, cfg)

    assert report.errors[0].suggestions == ()


def test_duplicate_slugs_stop_before_resolution():
    articles = [
        parse_article("# One\n\n<doc:missing>\n", slug="x"),
        parse_article("# Two\n", slug="x"),
    ]

    report = check_articles(articles, _cfg())

    assert report.errors == [DuplicateSlugError("x")]
    assert report.errors_of_kind("dangling_reference") == []


def test_repeated_topic_entries_are_warnings_only():
    articles = [
        parse_article("# A\n\n## Topics\n\n- <doc:b>\n- <doc:b>\n", slug="a"),
        parse_article("# B\n", slug="b"),
    ]

    report = check_articles(articles, _cfg())

    assert report.ok
    assert [r.target for r in report.duplicate_topics] == ["b"]


def test_run_check_writes_reports_and_fails_on_dangling(tmp_path: Path):
    docs = _write_docs(tmp_path)
    out = tmp_path / "out"
    cfg = _cfg()
    cfg.output.formats = ["markdown", "json"]

    result = run_check(docs, out, cfg, show_progress=False)

    assert result.failed is True
    assert result.report.article_count == 3
    assert result.report.errors == [DanglingReferenceError("Mobil", "PwC")]
    assert [p.name for p in result.report_paths] == ["report.md", "report.json"]
    payload = json.loads((out / "report.json").read_text(encoding="utf-8"))
    assert payload["errors"][0]["slug"] == "Mobil"
    assert "Cross-reference report - Documentation" in (out / "report.md").read_text(encoding="utf-8")


def test_run_check_writes_jsonl_log(tmp_path: Path):
    docs = _write_docs(tmp_path)
    out = tmp_path / "out"

    run_check(docs, out, _cfg(), show_progress=False)

    events = [
        json.loads(line)
        for line in (out / "run.jsonl").read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]
    names = [e.get("event") for e in events]
    assert names[0] == "check_start"
    assert "dangling_reference" in names
    assert names[-1] == "check_complete"


def test_run_check_no_fail_downgrades_errors(tmp_path: Path):
    docs = _write_docs(tmp_path)
    cfg = _cfg()
    cfg.validation.fail_on_error = False

    result = run_check(docs, tmp_path / "out", cfg, show_progress=False)

    assert not result.report.ok
    assert result.failed is False


def test_run_check_clean_directory_with_progress(tmp_path: Path):
    docs = _write_docs(tmp_path, {"Mobil.md": "# Mobile\n\nBack to <doc:PwC>.\n"})

    result = run_check(docs, tmp_path / "out", _cfg(), show_progress=True)

    assert result.report.ok
    assert result.failed is False
    assert result.report.orphans == []


def test_run_check_reports_duplicate_files(tmp_path: Path):
    docs = _write_docs(tmp_path, {"old/PwC.md": "# Old PwC\n"})

    result = run_check(docs, tmp_path / "out", _cfg(), show_progress=False)

    assert result.failed is True
    assert result.report.errors == [DuplicateSlugError("PwC")]


def _log_records(out: Path) -> list[dict]:
    return [
        json.loads(line)
        for line in (out / "run.jsonl").read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]


def test_dangling_references_are_logged_at_error_level(tmp_path: Path):
    out = tmp_path / "out"

    run_check(_write_docs(tmp_path), out, _cfg(), show_progress=False)

    dangling = [r for r in _log_records(out) if r.get("event") == "dangling_reference"]
    assert dangling
    assert all(r["level"] == "ERROR" for r in dangling)
    assert dangling[0]["slug"] == "Mobil"


def test_duplicate_slugs_are_logged_at_error_level(tmp_path: Path):
    docs = _write_docs(tmp_path, {"nested/Me.md": "# Me again\n"})
    out = tmp_path / "out"

    run_check(docs, out, _cfg(), show_progress=False)

    duplicates = [r for r in _log_records(out) if r.get("event") == "duplicate_slug"]
    assert [r["level"] for r in duplicates] == ["ERROR"]
