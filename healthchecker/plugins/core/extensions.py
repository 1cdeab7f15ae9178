"""Extension and core update checks."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any

from markupsafe import escape

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult
from healthchecker.plugins.core.values import as_int, parse_version

UPDATE_URL = "/administrator/index.php?option=com_joomlaupdate"
UPDATE_OPTIONS_URL = "/administrator/index.php?option=com_config&view=component&component=com_joomlaupdate"

CHANNEL_LABELS = {
    "default": "Default",
    "next": "Joomla Next",
    "testing": "Testing",
    "custom": "Custom URL",
}

STABLE = "4"
STABILITY_LABELS = {
    "0": "Development",
    "1": "Alpha",
    "2": "Beta",
    "3": "Release Candidate",
    "4": "Stable",
}


def decode_params(raw: Any) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        params = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return params if isinstance(params, dict) else {}


class JoomlaCoreVersionCheck(HealthCheck):
    slug = "extensions.joomla_core_version"
    category = "extensions"
    title = "CMS Core Version"
    action_url = UPDATE_URL

    def perform_check(self) -> HealthCheckResult:
        raw = self.context.get("version")
        version = parse_version(raw)
        if version is None:
            return self.warning("Could not determine the installed CMS version.")
        if version[0] < 4:
            return self.critical(f"Version {raw} is end of life and receives no security fixes.")
        if version[0] < 5:
            return self.warning(f"Version {raw} is in its final support phase. Plan the upgrade to 5.x.")
        return self.good(f"Version {raw} is a supported release.")


class JoomlaUpdateChannelCheck(HealthCheck):
    slug = "extensions.joomla_update_channel"
    category = "extensions"
    title = "Update Channel"
    action_url = UPDATE_OPTIONS_URL

    def perform_check(self) -> HealthCheckResult:
        params = decode_params(self.context.query_scalar(
            "SELECT params FROM #__extensions WHERE element = ? AND type = ?",
            ("com_joomlaupdate", "component"),
        ))
        source = str(params.get("updatesource") or "default")
        if source != "default":
            label = CHANNEL_LABELS.get(source, source)
            return self.warning(
                f"The update channel is <strong>{label}</strong>; production sites should use Default."
            )
        return self.good("The update channel is Default.")


class LegacyExtensionsCheck(HealthCheck):
    slug = "extensions.legacy_extensions"
    category = "extensions"
    title = "Backward Compatibility Layer"
    action_url = "/administrator/index.php?option=com_plugins&view=plugins&filter[folder]=behaviour"

    def perform_check(self) -> HealthCheckResult:
        enabled = self.context.query_scalar(
            "SELECT enabled FROM #__extensions WHERE type = ? AND folder = ? AND element = ?",
            ("plugin", "behaviour", "compat"),
        )
        if enabled is None:
            return self.good("The backward compatibility plugin is not installed.")
        if as_int(enabled) == 1:
            return self.warning(
                "The backward compatibility plugin is enabled; some extensions still rely on "
                "deprecated APIs that the next major release removes."
            )
        return self.good("The backward compatibility plugin is disabled.")


class JoomlaUpdateStabilityCheck(HealthCheck):
    slug = "extensions.joomla_update_stability"
    category = "extensions"
    title = "Update Minimum Stability"
    action_url = UPDATE_OPTIONS_URL

    def perform_check(self) -> HealthCheckResult:
        params = decode_params(self.context.query_scalar(
            "SELECT params FROM #__extensions WHERE element = ? AND type = ?",
            ("com_joomlaupdate", "component"),
        ))
        value = params.get("minimum_stability")
        stability = STABLE if value in (None, "") else str(value)
        if stability != STABLE:
            label = STABILITY_LABELS.get(stability, stability)
            return self.warning(
                f"Core updates accept <strong>{label}</strong> releases. Production sites should "
                "only install Stable releases."
            )
        return self.good("Core updates are limited to Stable releases.")


class CachePluginCheck(HealthCheck):
    slug = "extensions.cache_plugin"
    category = "extensions"
    title = "Cache Plugin"
    action_url = "/administrator/index.php?option=com_plugins&view=plugins&filter[folder]=system&filter[element]=cache"

    def perform_check(self) -> HealthCheckResult:
        plugin_enabled = as_int(self.context.query_scalar(
            "SELECT enabled FROM #__extensions WHERE type = ? AND folder = ? AND element = ?",
            ("plugin", "system", "cache"),
        )) == 1
        system_cache = as_int(self.context.get("caching", 0)) > 0

        if not plugin_enabled and not system_cache:
            return self.warning("Neither the System - Page Cache plugin nor system caching is enabled.")
        if not system_cache:
            return self.warning(
                "The System - Page Cache plugin is enabled but system caching is off, "
                "so only guest pages are cached."
            )
        if not plugin_enabled:
            return self.good("System caching is enabled; the page cache plugin is optional.")
        handler = self.context.get("cache_handler", "file")
        lifetime = self.context.get("cachetime", 15)
        return self.good(
            f"Page cache and system caching are enabled (<code>{handler}</code> handler, "
            f"{lifetime} minute lifetime)."
        )


class ModulePositionCheck(HealthCheck):
    slug = "extensions.module_positions"
    category = "extensions"
    title = "Module Positions"
    action_url = "/administrator/index.php?option=com_modules&view=modules&client_id=0"

    def perform_check(self) -> HealthCheckResult:
        template = self.context.query_scalar(
            "SELECT template FROM #__template_styles WHERE client_id = 0 AND home = 1",
        )
        if template is None:
            return self.warning("Could not determine the default site template.")

        manifest = self.context.root_path / "templates" / template / "templateDetails.xml"
        if not manifest.is_file():
            return self.warning(f"The manifest of template <code>{escape(template)}</code> was not found.")
        try:
            positions_node = ET.parse(manifest).getroot().find("positions")
        except ET.ParseError:
            positions_node = None
        if positions_node is None:
            return self.good(f"Template <code>{escape(template)}</code> does not declare module positions.")
        positions = {(p.text or "").strip() for p in positions_node.findall("position")}

        modules = self.context.query(
            "SELECT title, position FROM #__modules "
            "WHERE client_id = 0 AND published = 1 AND position != ''",
        )
        orphaned = [f"{title} ({position})" for title, position in modules if position not in positions]
        if orphaned:
            items = "".join(f"<li>{escape(name)}</li>" for name in orphaned)
            return self.warning(
                f"{len(orphaned)} published module(s) use positions that template "
                f"<code>{escape(template)}</code> does not have:<ul>{items}</ul>"
            )
        return self.good(
            f"All {len(modules)} published module(s) use positions of template <code>{escape(template)}</code>."
        )


class PluginOrderCheck(HealthCheck):
    slug = "extensions.plugin_order"
    category = "extensions"
    title = "System Plugin Order"
    action_url = "/administrator/index.php?option=com_plugins&view=plugins&filter[folder]=system"

    # Plugins allowed to run before the session plugin
    SESSION_EARLY_LIMIT = 5
    # How far from the end the cache plugin may sit
    CACHE_LATE_MARGIN = 5

    def perform_check(self) -> HealthCheckResult:
        rows = self.context.query(
            "SELECT element, ordering FROM #__extensions "
            "WHERE type = ? AND folder = ? AND enabled = 1 ORDER BY ordering ASC",
            ("plugin", "system"),
        )
        order = {element: as_int(ordering) for element, ordering in rows}
        issues: list[str] = []

        if "sef" in order and "redirect" in order and order["sef"] < order["redirect"]:
            issues.append("the SEF plugin runs before the Redirect plugin")
        if "session" in order:
            earlier = sum(1 for element, o in order.items() if element != "session" and o < order["session"])
            if earlier > self.SESSION_EARLY_LIMIT:
                issues.append(f"{earlier} plugins run before the Session plugin")
        if "cache" in order and order["cache"] < max(order.values()) - self.CACHE_LATE_MARGIN:
            issues.append("the Page Cache plugin does not run near the end")

        if issues:
            return self.warning(f"System plugin order issues: {'; '.join(issues)}.")
        return self.good(f"The order of {len(rows)} enabled system plugin(s) looks fine.")
