"""Result filtering for export-style callers.

A result survives when it passes the status filter AND its category is in the
category filter AND its slug is in the check filter. An empty category or check
filter means no restriction.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping

from healthchecker.health.models import HealthCheckResult, StatusCounts

STATUS_ALL = "all"
STATUS_ISSUES = "issues"
STATUS_FILTERS = (STATUS_ALL, STATUS_ISSUES)


def _matcher(status: str, categories: Collection[str], checks: Collection[str]):
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status!r} (expected one of {STATUS_FILTERS})")
    category_set = set(categories)
    check_set = set(checks)

    def keep(result: HealthCheckResult) -> bool:
        if status == STATUS_ISSUES and not result.health_status.is_issue:
            return False
        if category_set and result.category not in category_set:
            return False
        if check_set and result.slug not in check_set:
            return False
        return True

    return keep


def filter_results(
    results: Iterable[HealthCheckResult],
    status: str = STATUS_ALL,
    categories: Collection[str] = (),
    checks: Collection[str] = (),
) -> list[HealthCheckResult]:
    keep = _matcher(status, categories, checks)
    return [r for r in results if keep(r)]


def filter_grouped(
    grouped: Mapping[str, list[HealthCheckResult]],
    status: str = STATUS_ALL,
    categories: Collection[str] = (),
    checks: Collection[str] = (),
) -> dict[str, list[HealthCheckResult]]:
    """Filter a category → results mapping, dropping categories left empty."""
    keep = _matcher(status, categories, checks)
    filtered: dict[str, list[HealthCheckResult]] = {}
    for category, results in grouped.items():
        kept = [r for r in results if keep(r)]
        if kept:
            filtered[category] = kept
    return filtered


def count_results(results: Iterable[HealthCheckResult]) -> StatusCounts:
    counts = StatusCounts()
    for r in results:
        counts.add(r.health_status)
    return counts
