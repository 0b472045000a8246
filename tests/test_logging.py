"""Tests for logging setup and the JSONL formatter."""

import json
import logging
from pathlib import Path

from rich.logging import RichHandler

from doc_xref.config import LoggingConfig
from doc_xref.utils.logging import JsonlFormatter, close_logging, log_event, setup_logging


def test_setup_logging_attaches_console_and_file_handlers(tmp_path: Path) -> None:
    logger = setup_logging(LoggingConfig(level="DEBUG"), tmp_path)
    try:
        assert logger.name == "doc_xref"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert any(isinstance(h, RichHandler) for h in logger.handlers)
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    finally:
        close_logging(logger)

    assert logger.handlers == []


def test_setup_logging_without_output_dir_skips_file(tmp_path: Path) -> None:
    logger = setup_logging(LoggingConfig(console=False), None)

    assert logger.handlers == []


def test_log_event_writes_jsonl(tmp_path: Path) -> None:
    """Structured fields should land in the JSONL record"""
    logger = setup_logging(LoggingConfig(console=False), tmp_path)
    log_event(logger, "Dangling reference", event="dangling_reference", slug="Missing", line=4)
    close_logging(logger)

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip().split("\n")
    entry = json.loads(lines[0])

    assert entry["message"] == "Dangling reference"
    assert entry["event"] == "dangling_reference"
    assert entry["slug"] == "Missing"
    assert entry["line"] == 4
    assert entry["level"] == "INFO"
    assert "timestamp" in entry


def test_plain_file_format(tmp_path: Path) -> None:
    logger = setup_logging(LoggingConfig(console=False, format="plain", filename="run.log"), tmp_path)
    logger.info("hello")
    close_logging(logger)

    assert "INFO hello" in (tmp_path / "run.log").read_text(encoding="utf-8")


def test_log_event_ignores_missing_logger() -> None:
    log_event(None, "nothing")


def test_jsonl_formatter_serialises_unknown_types() -> None:
    record = logging.LogRecord("doc_xref", logging.INFO, __file__, 1, "msg", None, None)
    record.path = Path("docs/A.md")

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["path"] == "docs/A.md"
