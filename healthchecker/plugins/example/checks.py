"""Example checks: a minimal template for third-party check authors."""

from __future__ import annotations

import time

import httpx

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult

PROVIDER = "example"


class CustomConfigCheck(HealthCheck):
    """Counts installed extensions; large installs are harder to keep patched."""

    slug = "example.custom_config"
    category = "extensions"
    provider = PROVIDER
    title = "Installed Extension Count"
    action_url = "/administrator/index.php?option=com_installer&view=manage"

    MAX_EXTENSIONS = 100

    def perform_check(self) -> HealthCheckResult:
        if self.context.database is None:
            return self.warning("Database not available; cannot count extensions.")

        count = self.context.query_scalar("SELECT COUNT(*) FROM #__extensions") or 0
        if count > self.MAX_EXTENSIONS:
            return self.warning(
                f"{count} extensions are installed. Remove the ones you no longer use."
            )
        return self.good(f"{count} extensions are installed.")


class ThirdPartyServiceCheck(HealthCheck):
    slug = "example.thirdparty_service"
    category = "thirdparty"
    provider = PROVIDER
    title = "Third-Party Service Reachability"

    SERVICE_URL = "https://api.joomla.org/"
    SLOW_THRESHOLD_SECONDS = 3.0

    timer = staticmethod(time.monotonic)

    def perform_check(self) -> HealthCheckResult:
        try:
            started = self.timer()
            with self.context.http_client() as client:
                response = client.head(self.SERVICE_URL)
            duration = self.timer() - started
        except httpx.HTTPError as e:
            return self.critical(f"{self.SERVICE_URL} is unreachable: {e}")

        if response.status_code == 0 or response.status_code >= 400:
            return self.critical(
                f"{self.SERVICE_URL} answered with HTTP {response.status_code}."
            )
        if duration > self.SLOW_THRESHOLD_SECONDS:
            return self.warning(
                f"{self.SERVICE_URL} is responding slowly ({duration:.1f}s)."
            )
        return self.good(f"{self.SERVICE_URL} is reachable ({duration:.1f}s).")
