"""Site snapshot: the read-only view of an installation that checks inspect.

A site is described by a YAML file with two sections:

    config:   global configuration values (dbprefix, mailer, caching, ...)
    php:      PHP runtime snapshot (version, ini values, loaded extensions)
    db_server: database server version and variables (SHOW VARIABLES output)

plus optional ``site_url`` / ``root_path`` keys. The database handle is a
DB-API 2 connection owned by the caller and shared sequentially by all checks.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import yaml

from healthchecker.health.errors import DatabaseUnavailableError

logger = logging.getLogger(__name__)

TABLE_PREFIX_PLACEHOLDER = "#__"


@dataclass
class SiteContext:
    """Everything a check may read. Checks never write through it."""

    config: dict[str, Any] = field(default_factory=dict)
    php: dict[str, Any] = field(default_factory=dict)
    db_server: dict[str, Any] = field(default_factory=dict)
    root_path: Path = field(default_factory=Path.cwd)
    site_url: str = ""
    database: Any | None = None
    http_timeout: float = 10.0
    http_transport: httpx.BaseTransport | None = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def php_value(self, key: str, default: Any = None) -> Any:
        return self.php.get(key, default)

    @property
    def db_prefix(self) -> str:
        return str(self.config.get("dbprefix") or "")

    # ── Database access ──────────────────────────────────────────────────

    def require_database(self) -> Any:
        if self.database is None:
            raise DatabaseUnavailableError("No database connection available")
        return self.database

    def query(self, sql: str, params: tuple[Any, ...] = ()) -> list[tuple[Any, ...]]:
        """Run a read query; ``#__`` is replaced with the table prefix."""
        conn = self.require_database()
        cursor = conn.cursor()
        try:
            cursor.execute(sql.replace(TABLE_PREFIX_PLACEHOLDER, self.db_prefix), params)
            return list(cursor.fetchall())
        finally:
            cursor.close()

    def query_scalar(self, sql: str, params: tuple[Any, ...] = ()) -> Any:
        rows = self.query(sql, params)
        return rows[0][0] if rows else None

    # ── HTTP access ──────────────────────────────────────────────────────

    def http_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.http_timeout,
            follow_redirects=True,
            transport=self.http_transport,
        )


# ── Loading ──────────────────────────────────────────────────────────────────


def load_site(
    path: Path,
    site_url: str = "",
    root_path: Path | None = None,
    database: Any | None = None,
    http_timeout: float = 10.0,
) -> SiteContext:
    """Parse a site snapshot YAML file into a SiteContext.

    Explicit ``site_url`` / ``root_path`` arguments win over values in the file.
    A missing file yields an empty context so checks report what they cannot see.
    """
    raw: dict[str, Any] = {}
    if path.exists():
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            logger.error("Failed to parse %s: %s", path, e)
            raw = {}
    else:
        logger.warning("Site file not found: %s", path)

    file_root = raw.get("root_path")
    return SiteContext(
        config=dict(raw.get("config") or {}),
        php=dict(raw.get("php") or {}),
        db_server=dict(raw.get("db_server") or {}),
        root_path=root_path or (Path(file_root) if file_root else Path.cwd()),
        site_url=site_url or str(raw.get("site_url") or ""),
        database=database,
        http_timeout=http_timeout,
    )


def open_database(path: str) -> sqlite3.Connection | None:
    """Open the site database read-only. Empty path means no database."""
    if not path:
        return None
    db_file = Path(path)
    if not db_file.exists():
        logger.warning("Database file not found: %s, database checks will warn", db_file)
        return None
    return sqlite3.connect(f"file:{db_file}?mode=ro", uri=True, check_same_thread=False)
