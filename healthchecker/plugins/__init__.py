"""Plugin loading: plugins contribute categories, providers and checks.

Plugins are named by dotted module path; each module exposes ``create_plugin()``.
Everything is collected once into the runner's registries at startup.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, TypeVar

from healthchecker.health.check import HealthCheck
from healthchecker.health.registry import HealthCategory, ProviderMetadata
from healthchecker.health.runner import Clock, HealthCheckRunner

if TYPE_CHECKING:
    from healthchecker.health.cache import StatsCache
    from healthchecker.site import SiteContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HealthCheckerPlugin:
    """Base for plugins. Every hook is optional."""

    name: str = ""

    def collect_categories(self) -> list[HealthCategory]:
        return []

    def collect_providers(self) -> list[ProviderMetadata]:
        return []

    def collect_checks(self, context: SiteContext) -> list[HealthCheck]:
        return []

    def collect_export_html(self, runner: HealthCheckRunner) -> list[str]:
        """Extra HTML blocks shown at the end of the HTML export."""
        return []


def load_plugins(module_paths: Iterable[str]) -> list[HealthCheckerPlugin]:
    """Import plugin modules; modules that fail to load are logged and skipped."""
    plugins: list[HealthCheckerPlugin] = []
    for path in module_paths:
        try:
            module = importlib.import_module(path)
        except Exception:
            logger.exception("Skipping plugin %s: import failed", path)
            continue

        factory = getattr(module, "create_plugin", None)
        if factory is None:
            logger.warning("Skipping plugin %s: no create_plugin()", path)
            continue

        try:
            plugin = factory()
        except Exception:
            logger.exception("Skipping plugin %s: create_plugin() failed", path)
            continue
        plugins.append(plugin)
        logger.info("Loaded plugin %s", plugin.name or path)
    return plugins


def _collect(plugin: HealthCheckerPlugin, what: str, hook: Callable[[], list[T]]) -> list[T]:
    try:
        return list(hook())
    except Exception:
        logger.exception("Plugin %s failed to provide %s", plugin.name, what)
        return []


def build_runner(
    context: SiteContext,
    plugins: Iterable[HealthCheckerPlugin],
    cache: StatsCache | None = None,
    clock: Clock | None = None,
) -> HealthCheckRunner:
    """Register every plugin's categories, providers and checks in one runner.

    Duplicate check slugs raise DuplicateSlugError here, at startup.
    """
    runner = HealthCheckRunner(cache=cache, clock=clock)
    for plugin in plugins:
        for category in _collect(plugin, "categories", plugin.collect_categories):
            runner.categories.register(category)
        for provider in _collect(plugin, "providers", plugin.collect_providers):
            runner.providers.register(provider)
        for check in _collect(plugin, "checks", lambda p=plugin: p.collect_checks(context)):
            runner.checks.register(check)

    logger.info(
        "Registered %d checks in %d categories from %d providers",
        len(runner.checks), len(runner.categories), len(runner.providers),
    )
    return runner


def collect_export_html(
    plugins: Iterable[HealthCheckerPlugin], runner: HealthCheckRunner,
) -> list[str]:
    blocks: list[str] = []
    for plugin in plugins:
        blocks.extend(_collect(plugin, "export HTML", lambda p=plugin: p.collect_export_html(runner)))
    return blocks
