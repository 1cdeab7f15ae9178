"""Wiring shared by the API server and the CLI.

Turns Settings into a loaded site, plugins, a populated runner and a stats
cache, and renders exports from the runner's last run.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from healthchecker.config import Settings
from healthchecker.health.cache import MemoryStatsCache, SqliteStatsCache, StatsCache
from healthchecker.health.filters import STATUS_ALL
from healthchecker.health.runner import Clock, HealthCheckRunner
from healthchecker.plugins import HealthCheckerPlugin, build_runner, collect_export_html, load_plugins
from healthchecker.reports import RENDERERS, build_report, export_filename
from healthchecker.site import SiteContext, load_site, open_database

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "json": "application/json",
    "md": "text/markdown; charset=utf-8",
    "html": "text/html; charset=utf-8",
}


@dataclass
class Export:
    filename: str
    content: str
    media_type: str


@dataclass
class HealthService:
    context: SiteContext
    plugins: list[HealthCheckerPlugin]
    runner: HealthCheckRunner
    _closers: list[Any] = field(default_factory=list)

    @property
    def site_name(self) -> str:
        return str(self.context.get("sitename") or "Site")

    def export(
        self,
        fmt: str,
        status: str = STATUS_ALL,
        categories: Collection[str] = (),
        checks: Collection[str] = (),
        today: date | None = None,
    ) -> Export:
        """Run every check and render the filtered report in ``fmt`` (json, md, html)."""
        if fmt not in RENDERERS:
            raise ValueError(f"Unknown export format: {fmt!r}")
        self.runner.run_all()
        report = build_report(
            self.runner,
            site_name=self.site_name,
            status=status,
            categories=categories,
            checks=checks,
            cms_version=str(self.context.get("version") or ""),
            extra_html=collect_export_html(self.plugins, self.runner) if fmt == "html" else None,
        )
        return Export(
            filename=export_filename(fmt, self.context.site_url, today),
            content=RENDERERS[fmt](report),
            media_type=MEDIA_TYPES[fmt],
        )

    def close(self) -> None:
        for resource in self._closers:
            try:
                resource.close()
            except Exception:
                logger.exception("Failed to close %r", resource)
        self._closers.clear()


def make_cache(settings: Settings) -> StatsCache:
    if settings.stats_cache_backend == "sqlite":
        return SqliteStatsCache(Path(settings.stats_cache_path))
    if settings.stats_cache_backend != "memory":
        logger.warning(
            "Unknown stats cache backend %r, using memory", settings.stats_cache_backend,
        )
    return MemoryStatsCache()


def build_service(settings: Settings, clock: Clock | None = None) -> HealthService:
    database = open_database(settings.database_path)
    context = load_site(
        Path(settings.site_file),
        site_url=settings.site_url,
        root_path=Path(settings.site_root) if settings.site_root else None,
        database=database,
        http_timeout=settings.http_timeout_seconds,
    )
    plugins = load_plugins(settings.plugins)
    cache = make_cache(settings)
    runner = build_runner(context, plugins, cache=cache, clock=clock)

    closers: list[Any] = []
    if database is not None:
        closers.append(database)
    if isinstance(cache, SqliteStatsCache):
        closers.append(cache)
    return HealthService(context=context, plugins=plugins, runner=runner, _closers=closers)
