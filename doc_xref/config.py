"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ContentConfig: Which files under the documentation directory are articles
- ValidationConfig: Resolver behaviour and failure policy
- OutputConfig: Report formats and file names
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml


REPORT_FORMATS = ("markdown", "html", "json")


@dataclass
class ContentConfig:
    """Configuration for article discovery.

    Attributes:
        extensions: File extensions treated as articles
        recursive: Whether to descend into subdirectories
        ignore: Glob patterns (relative to the content root) to skip
    """

    extensions: list[str] = field(default_factory=lambda: [".md"])
    recursive: bool = True
    ignore: list[str] = field(default_factory=list)


@dataclass
class ValidationConfig:
    """Configuration for reference validation.

    Attributes:
        fail_on_error: If True, any resolution error makes the run fail
        workers: Threads used to check articles; 1 checks sequentially
        warn_duplicate_topics: Log a warning for repeated topic list entries
        suggestions: Attach "did you mean" slugs to dangling references
        suggestion_threshold: Minimum similarity (0-100) for a suggestion
        max_suggestions: Maximum suggestions per dangling reference
    """

    fail_on_error: bool = True
    workers: int = 1
    warn_duplicate_topics: bool = True
    suggestions: bool = True
    suggestion_threshold: int = 80
    max_suggestions: int = 3


@dataclass
class OutputConfig:
    """Configuration for report generation.

    Attributes:
        formats: Report formats to write ("markdown", "html", "json")
        report_name: File name stem of the written reports
    """

    formats: list[str] = field(default_factory=lambda: ["markdown"])
    report_name: str = "report"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    content: ContentConfig = field(default_factory=ContentConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Raises:
        ValueError: If the file is not a mapping, has an unknown key inside a
            section, or names an unknown report format
    """
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file {path}: expected a mapping")

    cfg = _merge_config(AppConfig(), raw)
    validate_config(cfg)
    return cfg


def validate_config(cfg: AppConfig) -> None:
    """Reject values the pipeline cannot act on."""
    unknown = [fmt for fmt in cfg.output.formats if fmt not in REPORT_FORMATS]
    if unknown:
        raise ValueError(
            f"Unknown report format(s): {', '.join(unknown)} "
            f"(expected any of: {', '.join(REPORT_FORMATS)})"
        )
    if cfg.validation.workers < 1:
        raise ValueError("validation.workers must be at least 1")


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        return AppConfig(
            content=ContentConfig(**data["content"]),
            validation=ValidationConfig(**data["validation"]),
            output=OutputConfig(**data["output"]),
            logging=LoggingConfig(**data["logging"]),
        )
    except TypeError as exc:
        raise ValueError(f"Invalid config: {exc}") from exc
