"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx
import pytest

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult, HealthStatus
from healthchecker.health.registry import HealthCategory
from healthchecker.health.runner import HealthCheckRunner
from healthchecker.site import SiteContext

DB_PREFIX = "t1_"


class FakeClock:
    """Manually advanced clock for cache TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeCheck(HealthCheck):
    """Returns a fixed status, or raises when ``error`` is set. Counts calls."""

    def __init__(
        self,
        slug: str,
        category: str,
        status: HealthStatus = HealthStatus.GOOD,
        error: Exception | None = None,
        provider: str = "core",
        title: str = "",
        context: SiteContext | None = None,
    ) -> None:
        super().__init__(context or SiteContext())
        self.slug = slug
        self.category = category
        self.provider = provider
        self.title = title or slug
        self.status = status
        self.error = error
        self.calls = 0

    def perform_check(self) -> HealthCheckResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result(self.status, f"{self.slug} is {self.status.value}")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_runner(clock: FakeClock) -> Callable[..., HealthCheckRunner]:
    """Runner preloaded with categories 'a', 'b', 'c' and the given checks."""

    def _make(*checks: HealthCheck) -> HealthCheckRunner:
        runner = HealthCheckRunner(clock=clock)
        for i, slug in enumerate(("a", "b", "c")):
            runner.categories.register(HealthCategory(slug, slug.upper(), sort_order=(i + 1) * 10))
        for check in checks:
            runner.checks.register(check)
        return runner

    return _make


# ── Site fixtures ────────────────────────────────────────────────────────────


@pytest.fixture
def site_db() -> sqlite3.Connection:
    """In-memory site database with the tables the core checks read."""
    conn = sqlite3.connect(":memory:")
    conn.executescript(f"""
        CREATE TABLE {DB_PREFIX}users (
            id INTEGER PRIMARY KEY,
            username TEXT NOT NULL,
            block INTEGER NOT NULL DEFAULT 0,
            registerDate TEXT NOT NULL DEFAULT '2026-01-01 00:00:00',
            lastResetTime TEXT
        );
        CREATE TABLE {DB_PREFIX}extensions (
            extension_id INTEGER PRIMARY KEY,
            type TEXT NOT NULL,
            element TEXT NOT NULL,
            folder TEXT NOT NULL DEFAULT '',
            enabled INTEGER NOT NULL DEFAULT 1,
            params TEXT NOT NULL DEFAULT '',
            ordering INTEGER NOT NULL DEFAULT 0
        );
        CREATE TABLE {DB_PREFIX}content (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL,
            introtext TEXT,
            fulltext TEXT,
            state INTEGER NOT NULL DEFAULT 1
        );
        CREATE TABLE {DB_PREFIX}template_styles (
            id INTEGER PRIMARY KEY,
            template TEXT NOT NULL,
            client_id INTEGER NOT NULL DEFAULT 0,
            home INTEGER NOT NULL DEFAULT 0
        );
        CREATE TABLE {DB_PREFIX}modules (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL,
            position TEXT NOT NULL DEFAULT '',
            client_id INTEGER NOT NULL DEFAULT 0,
            published INTEGER NOT NULL DEFAULT 1
        );
    """)
    yield conn
    conn.close()


@pytest.fixture
def make_context(site_db: sqlite3.Connection, tmp_path) -> Callable[..., SiteContext]:
    """SiteContext over the in-memory database; keyword overrides win."""

    def _make(
        config: dict[str, Any] | None = None,
        php: dict[str, Any] | None = None,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        **kwargs: Any,
    ) -> SiteContext:
        values: dict[str, Any] = {
            "config": {"dbprefix": DB_PREFIX, **(config or {})},
            "php": php or {},
            "root_path": tmp_path,
            "site_url": "https://www.example.com/",
            "database": site_db,
        }
        if handler is not None:
            values["http_transport"] = httpx.MockTransport(handler)
        values.update(kwargs)
        return SiteContext(**values)

    return _make
