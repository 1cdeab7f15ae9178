"""Base class for checks.

A check is identified by a dotted ``category.name`` slug, belongs to one
category and one provider, and produces exactly one HealthCheckResult from
``perform_check``. Checks may raise; the runner turns failures into Warning
results, so implementations should not wrap their own bodies in try/except
unless a failure means something specific (e.g. an unreachable service is
Critical).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from healthchecker.health.models import ExportVisibility, HealthCheckResult, HealthStatus

if TYPE_CHECKING:
    from healthchecker.site import SiteContext


class HealthCheck(ABC):
    slug: str = ""
    category: str = ""
    provider: str = "core"
    title: str = ""
    docs_url: str | None = None
    action_url: str | None = None
    export_visibility: ExportVisibility = ExportVisibility.ALWAYS

    def __init__(self, context: SiteContext) -> None:
        self.context = context

    @abstractmethod
    def perform_check(self) -> HealthCheckResult:
        ...

    # ── Result helpers ───────────────────────────────────────────────────

    def result(self, status: HealthStatus, description: str) -> HealthCheckResult:
        return HealthCheckResult(
            slug=self.slug,
            category=self.category,
            provider=self.provider,
            health_status=status,
            title=self.title or self.slug,
            description=description,
            docs_url=self.docs_url,
            action_url=self.action_url if status.is_issue else None,
        )

    def good(self, description: str) -> HealthCheckResult:
        return self.result(HealthStatus.GOOD, description)

    def warning(self, description: str) -> HealthCheckResult:
        return self.result(HealthStatus.WARNING, description)

    def critical(self, description: str) -> HealthCheckResult:
        return self.result(HealthStatus.CRITICAL, description)

    def require_database(self) -> Any:
        return self.context.require_database()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.slug}>"
