"""Markdown export: one table per category, paste-able into tickets and chats."""

from __future__ import annotations

import re

import html2text
from bs4 import BeautifulSoup

from healthchecker.health.models import HealthStatus
from healthchecker.reports.report import Report

STATUS_EMOJI = {
    HealthStatus.CRITICAL: "\U0001F534",
    HealthStatus.WARNING: "\U0001F7E1",
    HealthStatus.GOOD: "\U0001F7E2",
}

PROJECT_LINK = "[Health Checker](https://github.com/mySites-guru/HealthCheckerForJoomla)"

_WHITESPACE = re.compile(r"\s+")


def _converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.ignore_links = False
    converter.ignore_images = True
    converter.body_width = 0
    return converter


def html_to_markdown(text: str) -> str:
    return _converter().handle(text or "").strip()


def html_to_markdown_inline(text: str) -> str:
    """Single-line Markdown safe to put in a table cell."""
    text = _WHITESPACE.sub(" ", html_to_markdown(text))
    return text.replace("|", "\\|").strip()


def strip_html(text: str) -> str:
    return BeautifulSoup(text or "", "html.parser").get_text().strip()


def render_markdown(report: Report) -> str:
    counts = report.counts
    generated = report.generated_at.strftime("%B %d, %Y at %H:%M")
    subtitle = f"Generated on {generated}"
    if report.cms_version:
        subtitle += f" | Version {report.cms_version}"

    lines = [
        f"# Health Report - {report.site_name}",
        "",
        subtitle,
        "",
        "## Summary",
        "",
        "| Status | Count |",
        "|--------|------:|",
        f"| {STATUS_EMOJI[HealthStatus.CRITICAL]} Critical | {counts.critical} |",
        f"| {STATUS_EMOJI[HealthStatus.WARNING]} Warning | {counts.warning} |",
        f"| {STATUS_EMOJI[HealthStatus.GOOD]} Good | {counts.good} |",
        f"| **Total** | **{counts.total}** |",
        "",
    ]

    for category, results in report.results_by_category.items():
        if not results:
            continue
        lines += [
            f"## {report.category_label(category)}",
            "",
            "| Status | Check | Description |",
            "|--------|-------|-------------|",
        ]
        for r in results:
            title = strip_html(r.title)
            if r.provider != "core":
                title += f" _({report.provider_name(r.provider)})_"
            description = html_to_markdown_inline(r.description)
            if r.docs_url:
                description += (" " if description else "") + f"[Docs]({r.docs_url})"
            status = r.health_status
            lines.append(f"| {STATUS_EMOJI[status]} {status.value.upper()} | {title} | {description} |")
        lines.append("")

    footer = f"Generated by {PROJECT_LINK}"
    community = report.third_party_providers
    if community:
        links = [f"[{p.name}]({p.url})" if p.url else p.name for p in community]
        footer += " | with Community plugins: " + ", ".join(links)
    lines += ["---", "", footer, ""]
    return "\n".join(lines)
