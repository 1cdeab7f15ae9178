"""Health subsystem: check model, registries, runner, stats cache."""

from healthchecker.health.cache import MemoryStatsCache, SqliteStatsCache, StatsCache
from healthchecker.health.check import HealthCheck
from healthchecker.health.errors import (
    DatabaseUnavailableError,
    DuplicateSlugError,
    HealthCheckerError,
    UnknownCategoryError,
    UnknownSlugError,
)
from healthchecker.health.filters import count_results, filter_grouped, filter_results
from healthchecker.health.models import (
    AggregatedResults,
    ExportVisibility,
    HealthCheckResult,
    HealthStats,
    HealthStatus,
    StatusCounts,
)
from healthchecker.health.registry import (
    CategoryRegistry,
    CheckRegistry,
    HealthCategory,
    ProviderMetadata,
    ProviderRegistry,
)
from healthchecker.health.runner import HealthCheckRunner
