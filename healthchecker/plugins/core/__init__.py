"""Core plugin: the built-in categories, the core provider and its checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from healthchecker.health.check import HealthCheck
from healthchecker.health.registry import CORE_PROVIDER, HealthCategory, ProviderMetadata
from healthchecker.plugins import HealthCheckerPlugin
from healthchecker.plugins.core.content import EmptyArticlesCheck
from healthchecker.plugins.core.database import DatabaseConnectionCheck, TablePrefixCheck
from healthchecker.plugins.core.extensions import (
    CachePluginCheck,
    JoomlaCoreVersionCheck,
    JoomlaUpdateChannelCheck,
    JoomlaUpdateStabilityCheck,
    LegacyExtensionsCheck,
    ModulePositionCheck,
    PluginOrderCheck,
)
from healthchecker.plugins.core.performance import (
    CachingCheck,
    DatabaseQueryCacheCheck,
    GzipCheck,
    LazyLoadCheck,
    MediaManagerThumbnailsCheck,
    PageCacheCheck,
)
from healthchecker.plugins.core.security import (
    DebugModeCheck,
    DefaultSecretCheck,
    ErrorReportingCheck,
    ForceSslCheck,
    MailerSecurityCheck,
    XFrameOptionsCheck,
)
from healthchecker.plugins.core.seo import (
    AltTextCheck,
    MetaDescriptionCheck,
    MetaKeywordsCheck,
    SefUrlsCheck,
    TwitterCardsCheck,
)
from healthchecker.plugins.core.system import (
    CoreDirectoriesCheck,
    DiskSpaceCheck,
    LogFileSizeCheck,
    MaxExecutionTimeCheck,
    MemoryLimitCheck,
    PhpExtensionsCheck,
    PhpVersionCheck,
    TempDirectoryCheck,
    UploadMaxFilesizeCheck,
)
from healthchecker.plugins.core.users import DefaultAdminUsernameCheck, PasswordExpiryCheck, UserRegistrationCheck

if TYPE_CHECKING:
    from healthchecker.site import SiteContext

CORE_CATEGORIES = (
    HealthCategory("system", "System & Hosting", "fa-server", 10),
    HealthCategory("database", "Database", "fa-database", 20),
    HealthCategory("security", "Security", "fa-shield-alt", 30),
    HealthCategory("users", "Users", "fa-users", 40),
    HealthCategory("extensions", "Extensions", "fa-puzzle-piece", 50),
    HealthCategory("performance", "Performance", "fa-tachometer-alt", 60),
    HealthCategory("seo", "SEO", "fa-search", 70),
    HealthCategory("content", "Content Quality", "fa-file-alt", 80),
)

CORE_PROVIDER_METADATA = ProviderMetadata(
    slug=CORE_PROVIDER,
    name="Health Checker",
    description="Built-in health checks",
    icon="fa-heartbeat",
)

CORE_CHECKS: tuple[type[HealthCheck], ...] = (
    PhpVersionCheck,
    MemoryLimitCheck,
    MaxExecutionTimeCheck,
    UploadMaxFilesizeCheck,
    PhpExtensionsCheck,
    DiskSpaceCheck,
    CoreDirectoriesCheck,
    TempDirectoryCheck,
    LogFileSizeCheck,
    DatabaseConnectionCheck,
    TablePrefixCheck,
    DebugModeCheck,
    ErrorReportingCheck,
    ForceSslCheck,
    DefaultSecretCheck,
    MailerSecurityCheck,
    XFrameOptionsCheck,
    DefaultAdminUsernameCheck,
    UserRegistrationCheck,
    PasswordExpiryCheck,
    JoomlaCoreVersionCheck,
    JoomlaUpdateChannelCheck,
    JoomlaUpdateStabilityCheck,
    LegacyExtensionsCheck,
    CachePluginCheck,
    ModulePositionCheck,
    PluginOrderCheck,
    CachingCheck,
    GzipCheck,
    PageCacheCheck,
    DatabaseQueryCacheCheck,
    LazyLoadCheck,
    MediaManagerThumbnailsCheck,
    SefUrlsCheck,
    MetaDescriptionCheck,
    MetaKeywordsCheck,
    TwitterCardsCheck,
    AltTextCheck,
    EmptyArticlesCheck,
)


class CorePlugin(HealthCheckerPlugin):
    name = "core"

    def collect_categories(self) -> list[HealthCategory]:
        return list(CORE_CATEGORIES)

    def collect_providers(self) -> list[ProviderMetadata]:
        return [CORE_PROVIDER_METADATA]

    def collect_checks(self, context: SiteContext) -> list[HealthCheck]:
        return [cls(context) for cls in CORE_CHECKS]


def create_plugin() -> CorePlugin:
    return CorePlugin()
