"""Example plugin: shows how a third party adds a provider, a category and checks.

Enable it by adding ``healthchecker.plugins.example`` to the ``plugins`` setting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from healthchecker.health.check import HealthCheck
from healthchecker.health.registry import HealthCategory, ProviderMetadata
from healthchecker.plugins import HealthCheckerPlugin
from healthchecker.plugins.example.checks import PROVIDER, CustomConfigCheck, ThirdPartyServiceCheck

if TYPE_CHECKING:
    from healthchecker.site import SiteContext


class ExamplePlugin(HealthCheckerPlugin):
    name = PROVIDER

    def collect_categories(self) -> list[HealthCategory]:
        return [HealthCategory("thirdparty", "Third-Party Services", "fa-plug", 90)]

    def collect_providers(self) -> list[ProviderMetadata]:
        return [
            ProviderMetadata(
                slug=PROVIDER,
                name="Example Provider",
                description="Example health checks demonstrating the SDK",
                url="https://github.com/mySites-guru/HealthCheckerForJoomla/tree/main/healthchecker/plugins/example",
                icon="fa-flask",
                version="1.0.0",
            )
        ]

    def collect_checks(self, context: SiteContext) -> list[HealthCheck]:
        return [CustomConfigCheck(context), ThirdPartyServiceCheck(context)]


def create_plugin() -> ExamplePlugin:
    return ExamplePlugin()
