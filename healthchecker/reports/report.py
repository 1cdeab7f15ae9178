"""The filtered, grouped report view that every export format renders."""

from __future__ import annotations

import json
import re
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from urllib.parse import urlparse

from healthchecker.health.filters import STATUS_ALL, count_results, filter_grouped
from healthchecker.health.models import HealthCheckResult, StatusCounts
from healthchecker.health.registry import HealthCategory, ProviderMetadata
from healthchecker.health.runner import HealthCheckRunner

EXPORT_EXTENSIONS = ("html", "md", "json")

_DOMAIN_UNSAFE = re.compile(r"[^a-z0-9.-]+")


@dataclass
class Report:
    site_name: str
    generated_at: datetime
    results_by_category: dict[str, list[HealthCheckResult]]
    counts: StatusCounts
    categories: dict[str, HealthCategory]
    providers: dict[str, ProviderMetadata]
    last_run: datetime | None = None
    cms_version: str = ""
    status_filter: str = STATUS_ALL
    extra_html: list[str] = field(default_factory=list)

    @property
    def results(self) -> list[HealthCheckResult]:
        return [r for group in self.results_by_category.values() for r in group]

    @property
    def third_party_providers(self) -> list[ProviderMetadata]:
        return [p for p in self.providers.values() if not p.is_core]

    def category_label(self, slug: str) -> str:
        category = self.categories.get(slug)
        return category.label if category else slug

    def provider_name(self, slug: str) -> str:
        provider = self.providers.get(slug)
        return provider.name if provider else slug

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastRun": self.last_run.isoformat() if self.last_run else None,
            "summary": self.counts.to_dict(),
            "categories": [c.to_dict() for c in self.categories.values()],
            "providers": [p.to_dict() for p in self.providers.values()],
            "results": [r.to_dict() for r in self.results],
        }


def build_report(
    runner: HealthCheckRunner,
    site_name: str = "Site",
    status: str = STATUS_ALL,
    categories: Collection[str] = (),
    checks: Collection[str] = (),
    cms_version: str = "",
    extra_html: list[str] | None = None,
    generated_at: datetime | None = None,
) -> Report:
    """Build the export view of the runner's last run.

    Results hidden by their check's export visibility are always left out;
    the status/category/check filters then narrow what remains. An invalid
    status raises ValueError.
    """
    grouped = filter_grouped(
        runner.exportable_results_by_category(), status, categories, checks,
    )
    flat = [r for group in grouped.values() for r in group]
    return Report(
        site_name=site_name,
        generated_at=generated_at or runner.last_run or datetime.now(),
        results_by_category=grouped,
        counts=count_results(flat),
        categories={c.slug: c for c in runner.categories.all()},
        providers={p.slug: p for p in runner.providers.all()},
        last_run=runner.last_run,
        cms_version=cms_version,
        status_filter=status,
        extra_html=list(extra_html or []),
    )


def export_filename(extension: str, site_url: str = "", today: date | None = None) -> str:
    """health-report-<domain>-<date>.html for HTML, health-report-<date>.<ext> otherwise."""
    if extension not in EXPORT_EXTENSIONS:
        raise ValueError(f"Unknown export extension: {extension!r}")
    stamp = (today or date.today()).isoformat()
    if extension == "html":
        return f"health-report-{site_domain(site_url)}-{stamp}.html"
    return f"health-report-{stamp}.{extension}"


def site_domain(site_url: str) -> str:
    host = urlparse(site_url).hostname if "//" in site_url else site_url
    domain = _DOMAIN_UNSAFE.sub("-", (host or "").lower()).strip("-.")
    return domain or "site"


def render_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"
