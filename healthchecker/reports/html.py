"""Standalone HTML export rendered with Jinja2.

Check descriptions carry a small amount of markup. They are passed through an
allow-list sanitizer before being marked safe; the rest of the template is
autoescaped. Plugin-provided blocks are trusted and inserted as is.
"""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from healthchecker.health.models import HealthStatus
from healthchecker.reports.report import Report

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"

ALLOWED_TAGS = frozenset({"strong", "b", "em", "i", "code", "pre", "br", "p", "ul", "ol", "li", "a"})
# Removed with their content rather than unwrapped
DROPPED_TAGS = ("script", "style", "iframe", "object", "template")


def sanitize_html(text: str) -> Markup:
    """Keep basic formatting tags and http(s) links; escape everything else."""
    soup = BeautifulSoup(text or "", "html.parser")
    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        href = tag.get("href") if tag.name == "a" else None
        tag.attrs = {}
        if tag.name != "a":
            continue
        if isinstance(href, str) and href.lower().startswith(("http://", "https://")):
            tag.attrs = {"href": href, "rel": "noopener noreferrer"}
        else:
            tag.unwrap()

    return Markup(str(soup))


def build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "j2"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["sanitize"] = sanitize_html
    return env


def render_html(report: Report, env: Environment | None = None) -> str:
    env = env or build_environment()
    template = env.get_template(TEMPLATE_NAME)
    return template.render(
        report=report,
        statuses=list(HealthStatus),
        extra_html=[Markup(block) for block in report.extra_html],
    )
