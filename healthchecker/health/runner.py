"""Health check runner: executes registered checks and aggregates results.

Checks run sequentially in registration order. A check that raises, or that
returns something the runner cannot interpret, is replaced by a Warning result
naming the check and the failure, so one broken check never takes down the
report. Only caller mistakes (an unknown slug or category) raise.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any

from healthchecker.health.cache import MemoryStatsCache, StatsCache
from healthchecker.health.check import HealthCheck
from healthchecker.health.errors import UnknownCategoryError, UnknownSlugError
from healthchecker.health.filters import count_results
from healthchecker.health.models import (
    AggregatedResults,
    HealthCheckResult,
    HealthStats,
    HealthStatus,
    StatusCounts,
)
from healthchecker.health.registry import CategoryRegistry, CheckRegistry, ProviderRegistry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthCheckRunner:
    """Owns the registries and the stats cache; runs and aggregates checks."""

    def __init__(
        self,
        checks: CheckRegistry | None = None,
        categories: CategoryRegistry | None = None,
        providers: ProviderRegistry | None = None,
        cache: StatsCache | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.checks = checks or CheckRegistry()
        self.categories = categories or CategoryRegistry()
        self.providers = providers or ProviderRegistry()
        self.cache: StatsCache = cache or MemoryStatsCache()
        self._clock = clock or utcnow
        self._results: list[HealthCheckResult] = []
        self._last_run: datetime | None = None

    # ── Execution ────────────────────────────────────────────────────────

    def run_all(self) -> list[HealthCheckResult]:
        """Run every registered check and remember the results as the last run."""
        results = [self._execute(check) for check in self.checks.all()]
        self._results = results
        self._last_run = self._clock()

        counts = count_results(results)
        logger.info(
            "Health run complete: %d checks (%d critical, %d warning, %d good)",
            counts.total, counts.critical, counts.warning, counts.good,
        )
        return results

    def run_category(self, category: str) -> list[HealthCheckResult]:
        """Run the checks of one category.

        A registered category with no checks yields an empty list; a category
        that is neither registered nor used by any check raises.
        """
        selected = self.checks.by_category(category)
        if not selected and not self.categories.has(category):
            raise UnknownCategoryError(category)
        return [self._execute(check) for check in selected]

    def run_single_check(self, slug: str) -> HealthCheckResult:
        check = self.checks.by_slug(slug)
        if check is None:
            raise UnknownSlugError(slug)
        return self._execute(check)

    def _execute(self, check: HealthCheck) -> HealthCheckResult:
        try:
            result = check.perform_check()
        except Exception as e:
            logger.exception("Health check %s failed", check.slug)
            return self._failure(check, f"{type(e).__name__}: {e}")

        if not isinstance(result, HealthCheckResult):
            logger.warning(
                "Health check %s returned %s instead of a result", check.slug, type(result).__name__,
            )
            return self._failure(check, f"returned an unexpected value ({type(result).__name__})")

        if not isinstance(result.health_status, HealthStatus):
            try:
                status = HealthStatus(result.health_status)
            except ValueError:
                logger.warning(
                    "Health check %s returned unknown status %r", check.slug, result.health_status,
                )
                return self._failure(check, f"returned an unknown status ({result.health_status!r})")
            result = dataclasses.replace(result, health_status=status)

        if result.slug != check.slug:
            logger.warning("Health check %s returned a result for %s", check.slug, result.slug)
            return self._failure(check, f"returned a result for another check ({result.slug})")

        return result

    def _failure(self, check: HealthCheck, reason: str) -> HealthCheckResult:
        title = check.title or check.slug
        return HealthCheckResult(
            slug=check.slug,
            category=check.category,
            provider=check.provider,
            health_status=HealthStatus.WARNING,
            title=title,
            description=f"The check '{title}' ({check.slug}) could not be completed: {reason}",
            docs_url=check.docs_url,
        )

    # ── Aggregation ──────────────────────────────────────────────────────

    def aggregate(self, results: Iterable[HealthCheckResult]) -> AggregatedResults:
        """Group by category in registry order; keep check-registration order inside."""
        results = list(results)
        category_rank = {slug: i for i, slug in enumerate(self.categories.slugs())}

        groups: dict[str, list[tuple[int, HealthCheckResult]]] = {}
        counts = StatusCounts()
        for arrival, r in enumerate(results):
            groups.setdefault(r.category, []).append((arrival, r))
            counts.add(r.health_status)

        def check_key(item: tuple[int, HealthCheckResult]) -> tuple[int, int]:
            arrival, r = item
            index = self.checks.index_of(r.slug)
            return (0, index) if index is not None else (1, arrival)

        arrival_rank = {category: i for i, category in enumerate(groups)}

        def category_key(category: str) -> tuple[int, int]:
            if category in category_rank:
                return (0, category_rank[category])
            return (1, arrival_rank[category])

        by_category = {
            category: [r for _, r in sorted(groups[category], key=check_key)]
            for category in sorted(groups, key=category_key)
        }
        return AggregatedResults(by_category=by_category, counts=counts)

    # ── Stats cache ──────────────────────────────────────────────────────

    def stats(self, use_cache: bool = False, ttl_seconds: int = 0) -> HealthStats:
        """Aggregate counts of a full run, optionally served from the cache.

        With ``use_cache`` a cached entry younger than ``ttl_seconds`` is returned
        as is. A TTL of 0 never reads the cache but still writes the fresh entry,
        so a later call with a nonzero TTL can reuse it.
        """
        if use_cache and ttl_seconds > 0:
            cached = self.cache.get()
            if cached is not None:
                age = (self._clock() - cached.last_run).total_seconds()
                if age <= ttl_seconds:
                    logger.debug("Stats cache hit (age %.0fs, ttl %ds)", age, ttl_seconds)
                    return cached
                logger.debug("Stats cache expired (age %.0fs, ttl %ds)", age, ttl_seconds)

        aggregated = self.aggregate(self.run_all())
        fresh = HealthStats.from_counts(aggregated.counts, self._last_run or self._clock())
        if use_cache:
            self.cache.set(fresh)
        return fresh

    def clear_cache(self) -> None:
        try:
            self.cache.clear()
        except Exception:
            logger.exception("Failed to clear stats cache")

    # ── Last-run state ───────────────────────────────────────────────────

    @property
    def results(self) -> list[HealthCheckResult]:
        return list(self._results)

    @property
    def last_run(self) -> datetime | None:
        return self._last_run

    def results_by_category(self) -> dict[str, list[HealthCheckResult]]:
        return self.aggregate(self._results).by_category

    def counts(self) -> StatusCounts:
        return count_results(self._results)

    def exportable_results(self) -> list[HealthCheckResult]:
        """Last-run results minus those hidden by their check's export visibility."""
        exportable = []
        for r in self._results:
            check = self.checks.by_slug(r.slug)
            if check is None or check.export_visibility.allows(r.health_status):
                exportable.append(r)
        return exportable

    def exportable_results_by_category(self) -> dict[str, list[HealthCheckResult]]:
        return self.aggregate(self.exportable_results()).by_category

    def to_dict(self, results: Iterable[HealthCheckResult] | None = None) -> dict[str, Any]:
        """Full report payload for the given results (default: the last run)."""
        selected = list(self._results if results is None else results)
        return {
            "lastRun": self._last_run.isoformat() if self._last_run else None,
            "summary": count_results(selected).to_dict(),
            "categories": [c.to_dict() for c in self.categories.all()],
            "providers": [p.to_dict() for p in self.providers.all()],
            "results": [r.to_dict() for r in selected],
        }

    def metadata(self) -> dict[str, Any]:
        """Registry contents without running anything."""
        return {
            "categories": [c.to_dict() for c in self.categories.all()],
            "providers": [p.to_dict() for p in self.providers.all()],
            "checks": [
                {
                    "slug": c.slug,
                    "category": c.category,
                    "provider": c.provider,
                    "title": c.title or c.slug,
                }
                for c in self.checks.all()
            ],
        }
