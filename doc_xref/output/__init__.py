"""Report rendering."""

from .renderer import render_html, render_json, render_markdown, render_reports

__all__ = [
    "render_html",
    "render_json",
    "render_markdown",
    "render_reports",
]
