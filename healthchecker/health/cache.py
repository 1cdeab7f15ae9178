"""Stats cache backends.

The cache holds at most one HealthStats entry. It is either absent or present
with the timestamp of the run that produced it; freshness is decided by the
runner, not here.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Protocol

from healthchecker.health.models import HealthStats

logger = logging.getLogger(__name__)


class StatsCache(Protocol):
    def get(self) -> HealthStats | None: ...

    def set(self, stats: HealthStats) -> None: ...

    def clear(self) -> None: ...


class MemoryStatsCache:
    """Process-local cache entry."""

    def __init__(self) -> None:
        self._entry: HealthStats | None = None

    def get(self) -> HealthStats | None:
        return self._entry

    def set(self, stats: HealthStats) -> None:
        self._entry = stats

    def clear(self) -> None:
        self._entry = None


class SqliteStatsCache:
    """Single-row SQLite table so the entry survives server restarts."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self) -> None:
        conn = self._get_conn()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS stats_cache (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                critical INTEGER NOT NULL,
                warning INTEGER NOT NULL,
                good INTEGER NOT NULL,
                total INTEGER NOT NULL,
                last_run TEXT NOT NULL
            );
        """)
        conn.commit()

    def get(self) -> HealthStats | None:
        try:
            row = self._get_conn().execute(
                "SELECT * FROM stats_cache WHERE id = 1",
            ).fetchone()
        except sqlite3.Error:
            logger.warning("Stats cache read failed, treating as miss", exc_info=True)
            return None
        if not row:
            return None
        return HealthStats(
            critical=row["critical"],
            warning=row["warning"],
            good=row["good"],
            total=row["total"],
            last_run=datetime.fromisoformat(row["last_run"]),
        )

    def set(self, stats: HealthStats) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO stats_cache "
            "(id, critical, warning, good, total, last_run) VALUES (1, ?, ?, ?, ?, ?)",
            (stats.critical, stats.warning, stats.good, stats.total, stats.last_run.isoformat()),
        )
        conn.commit()

    def clear(self) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM stats_cache")
        conn.commit()

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None
