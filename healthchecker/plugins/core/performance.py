"""Performance checks."""

from __future__ import annotations

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult
from healthchecker.plugins.core.extensions import decode_params
from healthchecker.plugins.core.values import as_bool, as_int, parse_version

GLOBAL_CONFIG_URL = "/administrator/index.php?option=com_config"


class CachingCheck(HealthCheck):
    slug = "performance.caching"
    category = "performance"
    title = "System Cache"
    action_url = GLOBAL_CONFIG_URL

    def perform_check(self) -> HealthCheckResult:
        mode = as_int(self.context.get("caching", 0))
        if mode == 0:
            return self.warning("System caching is disabled.")
        handler = self.context.get("cache_handler", "file")
        label = "progressive" if mode == 2 else "conservative"
        return self.good(f"System caching is enabled ({label}, <code>{handler}</code> handler).")


class GzipCheck(HealthCheck):
    slug = "performance.gzip"
    category = "performance"
    title = "Gzip Page Compression"
    action_url = GLOBAL_CONFIG_URL

    def perform_check(self) -> HealthCheckResult:
        if as_bool(self.context.get("gzip", False)):
            return self.good("Gzip page compression is enabled.")
        return self.warning(
            "Gzip page compression is disabled. Enable it unless the web server already compresses responses."
        )


class PageCacheCheck(HealthCheck):
    slug = "performance.page_cache"
    category = "performance"
    title = "Page Cache Plugin"
    action_url = "/administrator/index.php?option=com_plugins&view=plugins&filter[folder]=system&filter[element]=cache"

    def perform_check(self) -> HealthCheckResult:
        rows = self.context.query(
            "SELECT enabled, params FROM #__extensions WHERE element = ? AND folder = ? AND type = ?",
            ("cache", "system", "plugin"),
        )
        if not rows or as_int(rows[0][0]) != 1:
            return self.warning(
                "System - Page Cache plugin is disabled. Enable it in production for faster guest page loads."
            )

        params = decode_params(rows[0][1])
        if not params:
            return self.good("System - Page Cache plugin is enabled.")
        if as_int(params.get("browsercache", 0)) == 1:
            return self.good("System - Page Cache plugin is enabled with browser caching.")
        return self.warning(
            "System - Page Cache plugin is enabled but browser caching is disabled."
        )


class DatabaseQueryCacheCheck(HealthCheck):
    """The query cache was removed in MySQL 8.0 but MariaDB still benefits from it."""

    slug = "performance.database_query_cache"
    category = "performance"
    title = "Database Query Cache"

    def perform_check(self) -> HealthCheckResult:
        raw_version = str(self.context.db_server.get("version") or "")
        version = parse_version(raw_version)
        if version is None:
            return self.warning("Could not determine the database server version.")
        is_mariadb = "mariadb" in raw_version.lower()
        if not is_mariadb and version >= (8, 0):
            return self.good("MySQL 8.0 and later have no query cache; nothing to configure.")

        variables = self.context.db_server.get("variables") or {}
        if not any(name.startswith("query_cache") for name in variables):
            return self.good("The database server does not report query cache variables.")

        cache_type = str(variables.get("query_cache_type", "OFF")).upper()
        cache_size = as_int(variables.get("query_cache_size", 0))
        if cache_type in ("OFF", "0"):
            if is_mariadb:
                return self.warning(
                    "The MariaDB query cache is disabled. Enabling it can speed up repeated reads."
                )
            return self.good("The query cache is disabled, which is fine for this server version.")
        if cache_size == 0:
            return self.warning(
                "The query cache is enabled but <code>query_cache_size</code> is 0, so nothing is cached."
            )
        return self.good(f"The query cache is enabled with {round(cache_size / 1024 / 1024, 2):g} MB.")


class LazyLoadCheck(HealthCheck):
    slug = "performance.lazy_load"
    category = "performance"
    title = "Lazy Loading Images"
    action_url = "/administrator/index.php?option=com_plugins&view=plugins&filter[folder]=content&filter[element]=joomla"

    def perform_check(self) -> HealthCheckResult:
        rows = self.context.query(
            "SELECT enabled, params FROM #__extensions WHERE element = ? AND folder = ? AND type = ?",
            ("joomla", "content", "plugin"),
        )
        if not rows or as_int(rows[0][0]) != 1:
            return self.warning("The Content - Joomla plugin is disabled, so images are not lazy loaded.")
        if not rows[0][1]:
            return self.warning("The Content - Joomla plugin has no saved settings; lazy loading is off.")
        params = decode_params(rows[0][1])
        if not params:
            return self.warning("The Content - Joomla plugin settings could not be read.")
        if as_int(params.get("lazy_images", 0)) == 0:
            return self.warning("Lazy loading of images is disabled in the Content - Joomla plugin.")
        return self.good("Images in content are lazy loaded.")


class MediaManagerThumbnailsCheck(HealthCheck):
    slug = "performance.media_manager_thumbnails"
    category = "performance"
    title = "Media Manager Thumbnails"
    action_url = "/administrator/index.php?option=com_plugins&view=plugins&filter[folder]=filesystem"

    def perform_check(self) -> HealthCheckResult:
        rows = self.context.query(
            "SELECT enabled, params FROM #__extensions WHERE type = ? AND folder = ? AND element = ?",
            ("plugin", "filesystem", "local"),
        )
        if not rows:
            return self.warning("The FileSystem - Local plugin is not installed.")
        enabled, raw_params = rows[0]
        if as_int(enabled) == 0:
            return self.warning("The FileSystem - Local plugin is disabled; the media manager cannot browse files.")
        params = decode_params(raw_params)
        if not params:
            return self.warning("The FileSystem - Local plugin settings could not be read.")
        size = as_int(params.get("thumbnail_size", 0))
        if size <= 0:
            return self.warning(
                "Media manager thumbnails are disabled, so full-size images load when browsing media."
            )
        return self.good(f"Media manager thumbnails are generated at {size} px.")
