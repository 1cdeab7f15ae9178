"""Database checks."""

from __future__ import annotations

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult


class DatabaseConnectionCheck(HealthCheck):
    slug = "database.connection"
    category = "database"
    title = "Database Connection"

    def perform_check(self) -> HealthCheckResult:
        self.require_database()
        try:
            self.context.query_scalar("SELECT 1")
        except Exception as e:
            return self.critical(f"The database did not answer a trivial query: {e}")
        return self.good("The database connection is working.")


class TablePrefixCheck(HealthCheck):
    slug = "database.table_prefix"
    category = "database"
    title = "Table Prefix"

    def perform_check(self) -> HealthCheckResult:
        prefix = self.context.db_prefix
        if not prefix:
            return self.warning(
                "No table prefix is set; tables may clash with other applications sharing the database."
            )
        # Well-known legacy default, targeted by automated attacks
        if prefix == "jos_":
            return self.warning(
                "The table prefix is the old default <code>jos_</code>. Use a random prefix."
            )
        if len(prefix) < 3:
            return self.warning(f"The table prefix <code>{prefix}</code> is very short.")
        return self.good(f"The table prefix <code>{prefix}</code> is not a default value.")
