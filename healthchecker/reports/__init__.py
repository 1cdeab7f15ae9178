"""Report exports: JSON, Markdown and standalone HTML."""

from healthchecker.reports.html import render_html, sanitize_html
from healthchecker.reports.markdown import render_markdown
from healthchecker.reports.report import Report, build_report, export_filename, render_json

RENDERERS = {
    "json": render_json,
    "md": render_markdown,
    "html": render_html,
}

__all__ = [
    "RENDERERS",
    "Report",
    "build_report",
    "export_filename",
    "render_html",
    "render_json",
    "render_markdown",
    "sanitize_html",
]
