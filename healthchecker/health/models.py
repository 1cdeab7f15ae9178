"""Health check value objects: status taxonomy, results, aggregate counts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ── Status taxonomy ──────────────────────────────────────────────────────────


class HealthStatus(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    GOOD = "good"

    @property
    def severity(self) -> int:
        """Numeric rank, higher is worse."""
        return _SEVERITY[self]

    @property
    def is_issue(self) -> bool:
        return self is not HealthStatus.GOOD

    @classmethod
    def worst(cls, *statuses: HealthStatus) -> HealthStatus:
        """Pick the most severe status (Good when nothing is given)."""
        if not statuses:
            return cls.GOOD
        return max(statuses, key=lambda s: s.severity)


_SEVERITY = {
    HealthStatus.GOOD: 0,
    HealthStatus.WARNING: 1,
    HealthStatus.CRITICAL: 2,
}


class ExportVisibility(str, Enum):
    """Whether a check's result appears in exported reports."""

    ALWAYS = "always"
    ISSUES_ONLY = "issues"
    NEVER = "never"

    def allows(self, status: HealthStatus) -> bool:
        if self is ExportVisibility.NEVER:
            return False
        if self is ExportVisibility.ISSUES_ONLY:
            return status.is_issue
        return True


# ── Results ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of a single check execution. Never mutated after creation."""

    slug: str
    category: str
    provider: str
    health_status: HealthStatus
    title: str
    description: str = ""
    docs_url: str | None = None
    action_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "category": self.category,
            "provider": self.provider,
            "status": self.health_status.value,
            "title": self.title,
            "description": self.description,
            "docsUrl": self.docs_url,
            "actionUrl": self.action_url,
        }


@dataclass
class StatusCounts:
    critical: int = 0
    warning: int = 0
    good: int = 0
    total: int = 0

    def add(self, status: HealthStatus) -> None:
        if status is HealthStatus.CRITICAL:
            self.critical += 1
        elif status is HealthStatus.WARNING:
            self.warning += 1
        else:
            self.good += 1
        self.total += 1

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "warning": self.warning,
            "good": self.good,
            "total": self.total,
        }


@dataclass
class AggregatedResults:
    """Results grouped by category plus per-status counts."""

    by_category: dict[str, list[HealthCheckResult]] = field(default_factory=dict)
    counts: StatusCounts = field(default_factory=StatusCounts)


@dataclass(frozen=True)
class HealthStats:
    """Aggregate counts of one full run, as held by the stats cache."""

    critical: int
    warning: int
    good: int
    total: int
    last_run: datetime

    @classmethod
    def from_counts(cls, counts: StatusCounts, last_run: datetime) -> HealthStats:
        return cls(
            critical=counts.critical,
            warning=counts.warning,
            good=counts.good,
            total=counts.total,
            last_run=last_run,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "critical": self.critical,
            "warning": self.warning,
            "good": self.good,
            "total": self.total,
            "lastRun": self.last_run.isoformat(),
        }
