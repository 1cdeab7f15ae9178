"""System checks: PHP runtime snapshot and host filesystem."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult, HealthStatus
from healthchecker.plugins.core.values import format_bytes, parse_seconds, parse_size, parse_version

MIN_SUPPORTED_PHP = (8, 1)
RECOMMENDED_PHP = (8, 2)

REQUIRED_EXTENSIONS = ("json", "simplexml", "dom", "zlib", "gd", "mbstring")
RECOMMENDED_EXTENSIONS = ("intl", "curl", "openssl", "zip", "fileinfo")

CORE_DIRECTORIES = (
    "administrator",
    "components",
    "images",
    "language",
    "libraries",
    "media",
    "modules",
    "plugins",
    "templates",
)


class PhpVersionCheck(HealthCheck):
    slug = "system.php_version"
    category = "system"
    title = "PHP Version"

    def perform_check(self) -> HealthCheckResult:
        raw = self.context.php_value("version")
        version = parse_version(raw)
        if version is None:
            return self.warning("Could not determine the PHP version.")
        if version[:2] < MIN_SUPPORTED_PHP:
            return self.critical(
                f"PHP {raw} is no longer supported. Upgrade to PHP "
                f"{'.'.join(map(str, RECOMMENDED_PHP))} or newer."
            )
        if version[:2] < RECOMMENDED_PHP:
            return self.warning(
                f"PHP {raw} only receives security fixes. Plan an upgrade to PHP "
                f"{'.'.join(map(str, RECOMMENDED_PHP))} or newer."
            )
        return self.good(f"PHP {raw} is supported.")


class MemoryLimitCheck(HealthCheck):
    slug = "system.memory_limit"
    category = "system"
    title = "PHP Memory Limit"

    CRITICAL_BYTES = 128 * 1024 * 1024
    WARNING_BYTES = 256 * 1024 * 1024

    def perform_check(self) -> HealthCheckResult:
        raw = self.context.php_value("memory_limit")
        limit = parse_size(raw)
        if limit is None:
            return self.warning("Could not determine <code>memory_limit</code>.")
        if limit == -1:
            return self.good("<code>memory_limit</code> is unlimited.")
        if limit < self.CRITICAL_BYTES:
            return self.critical(
                f"<code>memory_limit</code> is {format_bytes(limit)}; at least 128 MB is required."
            )
        if limit < self.WARNING_BYTES:
            return self.warning(
                f"<code>memory_limit</code> is {format_bytes(limit)}; 256 MB or more is recommended."
            )
        return self.good(f"<code>memory_limit</code> is {format_bytes(limit)}.")


class MaxExecutionTimeCheck(HealthCheck):
    slug = "system.max_execution_time"
    category = "system"
    title = "PHP Max Execution Time"

    MIN_SECONDS = 30

    def perform_check(self) -> HealthCheckResult:
        seconds = parse_seconds(self.context.php_value("max_execution_time"))
        if seconds is None:
            return self.warning("Could not determine <code>max_execution_time</code>.")
        if seconds == 0:
            return self.warning(
                "<code>max_execution_time</code> is unlimited; a stuck request can run forever."
            )
        if seconds < self.MIN_SECONDS:
            return self.warning(
                f"<code>max_execution_time</code> is {seconds}s; updates and backups may time out."
            )
        return self.good(f"<code>max_execution_time</code> is {seconds}s.")


class UploadMaxFilesizeCheck(HealthCheck):
    slug = "system.upload_max_filesize"
    category = "system"
    title = "PHP Upload Size"

    MIN_BYTES = 2 * 1024 * 1024

    def perform_check(self) -> HealthCheckResult:
        upload = parse_size(self.context.php_value("upload_max_filesize"))
        post = parse_size(self.context.php_value("post_max_size"))
        if upload is None or post is None:
            return self.warning(
                "Could not determine <code>upload_max_filesize</code> / <code>post_max_size</code>."
            )
        if post > 0 and upload > post:
            return self.warning(
                f"<code>upload_max_filesize</code> ({format_bytes(upload)}) is larger than "
                f"<code>post_max_size</code> ({format_bytes(post)}); uploads are capped at the smaller value."
            )
        if 0 < upload < self.MIN_BYTES:
            return self.warning(
                f"<code>upload_max_filesize</code> is only {format_bytes(upload)}; "
                "media and extension uploads may fail."
            )
        return self.good(f"Uploads up to {format_bytes(upload)} are allowed.")


class PhpExtensionsCheck(HealthCheck):
    slug = "system.php_extensions"
    category = "system"
    title = "PHP Extensions"

    def perform_check(self) -> HealthCheckResult:
        loaded = {str(e).lower() for e in self.context.php_value("extensions") or []}
        if not loaded:
            return self.warning("Could not determine the loaded PHP extensions.")

        missing_required = [e for e in REQUIRED_EXTENSIONS if e not in loaded]
        missing_recommended = [e for e in RECOMMENDED_EXTENSIONS if e not in loaded]

        findings: list[tuple[HealthStatus, str]] = []
        if missing_required:
            findings.append((
                HealthStatus.CRITICAL,
                f"Required extensions missing: {', '.join(missing_required)}.",
            ))
        if missing_recommended:
            findings.append((
                HealthStatus.WARNING,
                f"Recommended extensions missing: {', '.join(missing_recommended)}.",
            ))
        if not findings:
            return self.good("All required and recommended PHP extensions are loaded.")

        status = HealthStatus.worst(*(s for s, _ in findings))
        return self.result(status, " ".join(msg for _, msg in findings))


class DiskSpaceCheck(HealthCheck):
    slug = "system.disk_space"
    category = "system"
    title = "Disk Space"

    CRITICAL_BYTES = 100 * 1024 * 1024
    WARNING_BYTES = 500 * 1024 * 1024

    def perform_check(self) -> HealthCheckResult:
        try:
            free = shutil.disk_usage(self.context.root_path).free
        except OSError:
            return self.warning("Could not determine free disk space.")

        if free < self.CRITICAL_BYTES:
            return self.critical(f"Only {format_bytes(free)} of disk space left.")
        if free < self.WARNING_BYTES:
            return self.warning(f"Disk space is getting low: {format_bytes(free)} free.")
        return self.good(f"{format_bytes(free)} of disk space available.")


class CoreDirectoriesCheck(HealthCheck):
    slug = "system.core_directories"
    category = "system"
    title = "Core Directories"

    def perform_check(self) -> HealthCheckResult:
        root = self.context.root_path
        missing = [d for d in CORE_DIRECTORIES if not (root / d).is_dir()]
        if missing:
            listing = "".join(f"<li><code>{d}</code></li>" for d in missing)
            return self.critical(f"Core directories are missing:<ul>{listing}</ul>")
        return self.good("All core directories are present.")


class TempDirectoryCheck(HealthCheck):
    slug = "system.temp_directory"
    category = "system"
    title = "Temporary Directory"
    action_url = "/administrator/index.php?option=com_config"

    def perform_check(self) -> HealthCheckResult:
        configured = self.context.get("tmp_path")
        if not configured:
            return self.warning("No temporary directory is configured.")
        path = Path(configured)
        if not path.is_absolute():
            path = self.context.root_path / path
        if not path.is_dir():
            return self.critical(f"Temporary directory <code>{configured}</code> does not exist.")
        if not os.access(path, os.W_OK):
            return self.critical(f"Temporary directory <code>{configured}</code> is not writable.")
        return self.good(f"Temporary directory <code>{configured}</code> is writable.")


class LogFileSizeCheck(HealthCheck):
    slug = "system.log_file_size"
    category = "system"
    title = "Log File Size"

    WARNING_BYTES = 100 * 1024 * 1024

    def perform_check(self) -> HealthCheckResult:
        configured = self.context.get("log_path")
        if not configured:
            return self.good("No log directory is configured.")
        path = Path(configured)
        if not path.is_absolute():
            path = self.context.root_path / path
        if not path.is_dir():
            return self.good("The log directory does not exist yet.")

        total = sum(f.stat().st_size for f in path.iterdir() if f.is_file())
        if total > self.WARNING_BYTES:
            return self.warning(
                f"Log files use {format_bytes(total)}. Rotate or delete old logs."
            )
        return self.good(f"Log files use {format_bytes(total)}.")
