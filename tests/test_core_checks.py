"""Tests for the built-in checks against an in-memory site database and mocked HTTP."""

from __future__ import annotations

import json
from datetime import datetime

import httpx
import pytest

from healthchecker.health.errors import DatabaseUnavailableError
from healthchecker.health.models import HealthStatus
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
from healthchecker.plugins.core.homepage import meta_tags
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
from healthchecker.plugins.core.seo import AltTextCheck, MetaDescriptionCheck, MetaKeywordsCheck, TwitterCardsCheck
from healthchecker.plugins.core.system import (
    CoreDirectoriesCheck,
    CORE_DIRECTORIES,
    MaxExecutionTimeCheck,
    MemoryLimitCheck,
    PhpExtensionsCheck,
    PhpVersionCheck,
    REQUIRED_EXTENSIONS,
    TempDirectoryCheck,
    UploadMaxFilesizeCheck,
)
from healthchecker.plugins.core.users import DefaultAdminUsernameCheck, PasswordExpiryCheck, UserRegistrationCheck
from healthchecker.plugins.core.values import format_bytes, parse_size, parse_version
from tests.conftest import DB_PREFIX

G, W, C = HealthStatus.GOOD, HealthStatus.WARNING, HealthStatus.CRITICAL


def _page(html: str, status: int = 200, headers: dict[str, str] | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=html, headers=headers or {})
    return handler


# ── Value helpers ────────────────────────────────────────────────────────────


class TestValues:
    @pytest.mark.parametrize("raw,expected", [
        ("256M", 256 * 1024**2), ("1G", 1024**3), ("512k", 512 * 1024),
        ("-1", -1), (1024, 1024), ("lots", None), (None, None), (True, None),
    ])
    def test_parse_size(self, raw, expected) -> None:
        assert parse_size(raw) == expected

    def test_parse_version(self) -> None:
        assert parse_version("8.2.12-1ubuntu") == (8, 2, 12)
        assert parse_version("") is None

    def test_format_bytes(self) -> None:
        assert format_bytes(256 * 1024**2) == "256 MB"
        assert format_bytes(1536) == "1.5 KB"


# ── System ───────────────────────────────────────────────────────────────────


class TestSystemChecks:
    @pytest.mark.parametrize("version,expected", [
        ("7.4.33", C), ("8.1.27", W), ("8.3.7", G), (None, W),
    ])
    def test_php_version(self, make_context, version, expected) -> None:
        check = PhpVersionCheck(make_context(php={"version": version}))
        assert check.perform_check().health_status is expected

    @pytest.mark.parametrize("limit,expected", [
        ("64M", C), ("128M", W), ("256M", G), ("-1", G), ("1G", G),
    ])
    def test_memory_limit(self, make_context, limit, expected) -> None:
        check = MemoryLimitCheck(make_context(php={"memory_limit": limit}))
        assert check.perform_check().health_status is expected

    @pytest.mark.parametrize("raw,expected", [
        ("0", W), ("10", W), ("60s", G), (300, G), ("", W), ("forever", W), (None, W),
    ])
    def test_max_execution_time(self, make_context, raw, expected) -> None:
        result = MaxExecutionTimeCheck(make_context(php={"max_execution_time": raw})).perform_check()
        assert result.health_status is expected
        if raw in ("", "forever", None):
            assert "Could not determine" in result.description

    def test_upload_larger_than_post(self, make_context) -> None:
        check = UploadMaxFilesizeCheck(make_context(php={"upload_max_filesize": "64M", "post_max_size": "8M"}))
        assert check.perform_check().health_status is W

    def test_extensions(self, make_context) -> None:
        everything = list(REQUIRED_EXTENSIONS) + ["intl", "curl", "openssl", "zip", "fileinfo"]
        assert PhpExtensionsCheck(make_context(php={"extensions": everything})).perform_check().health_status is G

        no_intl = [e for e in everything if e != "intl"]
        assert PhpExtensionsCheck(make_context(php={"extensions": no_intl})).perform_check().health_status is W

        no_gd_no_intl = [e for e in no_intl if e != "gd"]
        result = PhpExtensionsCheck(make_context(php={"extensions": no_gd_no_intl})).perform_check()
        assert result.health_status is C
        assert "gd" in result.description
        assert "intl" in result.description

    def test_core_directories(self, make_context, tmp_path) -> None:
        result = CoreDirectoriesCheck(make_context()).perform_check()
        assert result.health_status is C
        for name in CORE_DIRECTORIES:
            (tmp_path / name).mkdir()
        assert CoreDirectoriesCheck(make_context()).perform_check().health_status is G

    def test_temp_directory(self, make_context, tmp_path) -> None:
        assert TempDirectoryCheck(make_context()).perform_check().health_status is W
        missing = TempDirectoryCheck(make_context(config={"tmp_path": "nope"})).perform_check()
        assert missing.health_status is C
        assert missing.action_url is not None
        (tmp_path / "tmp").mkdir()
        assert TempDirectoryCheck(make_context(config={"tmp_path": "tmp"})).perform_check().health_status is G


# ── Database ─────────────────────────────────────────────────────────────────


class TestDatabaseChecks:
    def test_connection(self, make_context) -> None:
        assert DatabaseConnectionCheck(make_context()).perform_check().health_status is G

    def test_connection_without_database_raises(self, make_context) -> None:
        with pytest.raises(DatabaseUnavailableError):
            DatabaseConnectionCheck(make_context(database=None)).perform_check()

    @pytest.mark.parametrize("prefix,expected", [
        ("", W), ("jos_", W), ("a_", W), ("x7k2_", G),
    ])
    def test_table_prefix(self, make_context, prefix, expected) -> None:
        check = TablePrefixCheck(make_context(config={"dbprefix": prefix}))
        assert check.perform_check().health_status is expected


# ── Security ─────────────────────────────────────────────────────────────────


class TestSecurityChecks:
    def test_debug_mode(self, make_context) -> None:
        assert DebugModeCheck(make_context(config={"debug": 1})).perform_check().health_status is W
        assert DebugModeCheck(make_context(config={"debug": "0"})).perform_check().health_status is G

    def test_error_reporting(self, make_context) -> None:
        assert ErrorReportingCheck(make_context(config={"error_reporting": "maximum"})).perform_check().health_status is W
        assert ErrorReportingCheck(make_context(config={"error_reporting": "none"})).perform_check().health_status is G

    @pytest.mark.parametrize("mode,expected", [(0, W), (1, W), (2, G)])
    def test_force_ssl(self, make_context, mode, expected) -> None:
        assert ForceSslCheck(make_context(config={"force_ssl": mode})).perform_check().health_status is expected

    @pytest.mark.parametrize("secret,expected", [
        ("", C), ("FBVtggIk5lAzEU9H", C), ("short", W), ("Zq8cV2mLp4rT9wXy", G),
    ])
    def test_default_secret(self, make_context, secret, expected) -> None:
        assert DefaultSecretCheck(make_context(config={"secret": secret})).perform_check().health_status is expected

    @pytest.mark.parametrize("mailer,secure,expected", [
        ("smtp", "none", W), ("smtp", "", W), ("smtp", "tls", G), ("mail", None, G), ("sendmail", None, G),
    ])
    def test_mailer_security(self, make_context, mailer, secure, expected) -> None:
        context = make_context(config={"mailer": mailer, "smtpsecure": secure})
        assert MailerSecurityCheck(context).perform_check().health_status is expected

    def test_x_frame_options_header(self, make_context) -> None:
        context = make_context(handler=_page("<html></html>", headers={"X-Frame-Options": "SAMEORIGIN"}))
        assert XFrameOptionsCheck(context).perform_check().health_status is G

    def test_csp_frame_ancestors(self, make_context) -> None:
        headers = {"Content-Security-Policy": "default-src 'self'; frame-ancestors 'none'"}
        context = make_context(handler=_page("<html></html>", headers=headers))
        assert XFrameOptionsCheck(context).perform_check().health_status is G

    def test_missing_header(self, make_context) -> None:
        context = make_context(handler=_page("<html></html>"))
        assert XFrameOptionsCheck(context).perform_check().health_status is W

    def test_homepage_down(self, make_context) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = XFrameOptionsCheck(make_context(handler=handler)).perform_check()
        assert result.health_status is W
        assert "ConnectError" in result.description


# ── Users ────────────────────────────────────────────────────────────────────


class TestUserChecks:
    def test_admin_username(self, make_context, site_db) -> None:
        assert DefaultAdminUsernameCheck(make_context()).perform_check().health_status is G

        site_db.execute(f"INSERT INTO {DB_PREFIX}users (username, block) VALUES ('admin', 1)")
        assert DefaultAdminUsernameCheck(make_context()).perform_check().health_status is G

        site_db.execute(f"INSERT INTO {DB_PREFIX}users (username, block) VALUES ('Admin', 0)")
        result = DefaultAdminUsernameCheck(make_context()).perform_check()
        assert result.health_status is W
        assert result.action_url is not None

    def test_registration(self, make_context) -> None:
        closed = make_context(config={"allowUserRegistration": 0})
        assert UserRegistrationCheck(closed).perform_check().health_status is G

        no_activation = make_context(config={"allowUserRegistration": 1, "useractivation": 0})
        assert UserRegistrationCheck(no_activation).perform_check().health_status is W

        privileged = make_context(config={"allowUserRegistration": 1, "new_usertype": 8})
        assert UserRegistrationCheck(privileged).perform_check().health_status is C

    def _password_check(self, make_context) -> PasswordExpiryCheck:
        check = PasswordExpiryCheck(make_context())
        check.clock = lambda: datetime(2026, 6, 1, 12, 0, 0)
        return check

    def _add_user(self, site_db, name: str, registered: str, last_reset: str | None, block: int = 0) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}users (username, block, registerDate, lastResetTime) VALUES (?, ?, ?, ?)",
            (name, block, registered, last_reset),
        )

    def test_password_expiry_no_users(self, make_context) -> None:
        assert self._password_check(make_context).perform_check().health_status is G

    def test_password_expiry_few_stale(self, make_context, site_db) -> None:
        self._add_user(site_db, "old", "2020-01-01 00:00:00", "2024-01-01 00:00:00")
        for i in range(4):
            self._add_user(site_db, f"fresh{i}", "2020-01-01 00:00:00", "2026-03-01 00:00:00")
        result = self._password_check(make_context).perform_check()
        assert result.health_status is G
        assert "1 of 5" in result.description

    def test_password_expiry_never_reset_uses_register_date(self, make_context, site_db) -> None:
        self._add_user(site_db, "a", "2020-01-01 00:00:00", None)
        self._add_user(site_db, "b", "2020-01-01 00:00:00", "0000-00-00 00:00:00")
        self._add_user(site_db, "c", "2026-05-01 00:00:00", None)
        self._add_user(site_db, "blocked", "2019-01-01 00:00:00", None, block=1)
        result = self._password_check(make_context).perform_check()
        assert result.health_status is W
        assert "2 of 3" in result.description
        assert "67%" in result.description

    def test_password_expiry_most_stale(self, make_context, site_db) -> None:
        for i in range(4):
            self._add_user(site_db, f"u{i}", "2020-01-01 00:00:00", None)
        result = self._password_check(make_context).perform_check()
        assert result.health_status is W
        assert "rotate" in result.description


# ── Extensions ───────────────────────────────────────────────────────────────


class TestExtensionChecks:
    @pytest.mark.parametrize("version,expected", [
        ("3.10.12", C), ("4.4.9", W), ("5.2.3", G), (None, W),
    ])
    def test_core_version(self, make_context, version, expected) -> None:
        check = JoomlaCoreVersionCheck(make_context(config={"version": version}))
        assert check.perform_check().health_status is expected

    def test_update_channel(self, make_context, site_db) -> None:
        assert JoomlaUpdateChannelCheck(make_context()).perform_check().health_status is G

        site_db.execute(
            f"INSERT INTO {DB_PREFIX}extensions (type, element, params) VALUES (?, ?, ?)",
            ("component", "com_joomlaupdate", json.dumps({"updatesource": "testing"})),
        )
        result = JoomlaUpdateChannelCheck(make_context()).perform_check()
        assert result.health_status is W
        assert "Testing" in result.description

    def test_legacy_extensions(self, make_context, site_db) -> None:
        assert LegacyExtensionsCheck(make_context()).perform_check().health_status is G
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}extensions (type, element, folder, enabled) "
            "VALUES ('plugin', 'compat', 'behaviour', 1)"
        )
        assert LegacyExtensionsCheck(make_context()).perform_check().health_status is W

    @pytest.mark.parametrize("params,expected", [
        (None, G), ("", G), ('{"minimum_stability": "4"}', G), ('{"minimum_stability": ""}', G),
        ('{"minimum_stability": "2"}', W), ('{"minimum_stability": 0}', W),
    ])
    def test_update_stability(self, make_context, site_db, params, expected) -> None:
        if params is not None:
            site_db.execute(
                f"INSERT INTO {DB_PREFIX}extensions (type, element, params) VALUES (?, ?, ?)",
                ("component", "com_joomlaupdate", params),
            )
        assert JoomlaUpdateStabilityCheck(make_context()).perform_check().health_status is expected

    def test_update_stability_label(self, make_context, site_db) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}extensions (type, element, params) VALUES (?, ?, ?)",
            ("component", "com_joomlaupdate", '{"minimum_stability": "3"}'),
        )
        assert "Release Candidate" in JoomlaUpdateStabilityCheck(make_context()).perform_check().description

    @pytest.mark.parametrize("plugin_enabled,caching,expected", [
        (None, 0, W), (1, 0, W), (0, 1, G), (1, 2, G),
    ])
    def test_cache_plugin(self, make_context, site_db, plugin_enabled, caching, expected) -> None:
        if plugin_enabled is not None:
            site_db.execute(
                f"INSERT INTO {DB_PREFIX}extensions (type, element, folder, enabled) "
                "VALUES ('plugin', 'cache', 'system', ?)",
                (plugin_enabled,),
            )
        check = CachePluginCheck(make_context(config={"caching": caching, "cachetime": 30}))
        result = check.perform_check()
        assert result.health_status is expected
        if plugin_enabled and caching:
            assert "30 minute" in result.description

    def _default_template(self, site_db, tmp_path, positions: list[str] | None) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}template_styles (template, client_id, home) VALUES ('cassiopeia', 0, 1)"
        )
        folder = tmp_path / "templates" / "cassiopeia"
        folder.mkdir(parents=True)
        body = ""
        if positions is not None:
            body = "<positions>" + "".join(f"<position>{p}</position>" for p in positions) + "</positions>"
        (folder / "templateDetails.xml").write_text(
            f'<?xml version="1.0" encoding="utf-8"?><extension type="template">{body}</extension>',
            encoding="utf-8",
        )

    def _add_module(self, site_db, title: str, position: str, published: int = 1) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}modules (title, position, client_id, published) VALUES (?, ?, 0, ?)",
            (title, position, published),
        )

    def test_module_positions_no_default_template(self, make_context) -> None:
        assert ModulePositionCheck(make_context()).perform_check().health_status is W

    def test_module_positions_missing_manifest(self, make_context, site_db) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}template_styles (template, client_id, home) VALUES ('gone', 0, 1)"
        )
        result = ModulePositionCheck(make_context()).perform_check()
        assert result.health_status is W
        assert "gone" in result.description

    def test_module_positions_without_declared_positions(self, make_context, site_db, tmp_path) -> None:
        self._default_template(site_db, tmp_path, None)
        self._add_module(site_db, "Menu", "anywhere")
        assert ModulePositionCheck(make_context()).perform_check().health_status is G

    def test_module_positions_orphaned(self, make_context, site_db, tmp_path) -> None:
        self._default_template(site_db, tmp_path, ["menu", "sidebar-right"])
        self._add_module(site_db, "Main Menu", "menu")
        self._add_module(site_db, "Old Banner", "banner-top")
        self._add_module(site_db, "Unpublished", "gone", published=0)
        self._add_module(site_db, "Unassigned", "")
        result = ModulePositionCheck(make_context()).perform_check()
        assert result.health_status is W
        assert "<li>Old Banner (banner-top)</li>" in result.description
        assert "Unpublished" not in result.description

    def test_module_positions_all_valid(self, make_context, site_db, tmp_path) -> None:
        self._default_template(site_db, tmp_path, ["menu"])
        self._add_module(site_db, "Main Menu", "menu")
        result = ModulePositionCheck(make_context()).perform_check()
        assert result.health_status is G
        assert "All 1 published" in result.description

    def _system_plugins(self, site_db, order: dict[str, int]) -> None:
        site_db.executemany(
            f"INSERT INTO {DB_PREFIX}extensions (type, element, folder, enabled, ordering) "
            "VALUES ('plugin', ?, 'system', 1, ?)",
            list(order.items()),
        )

    def test_plugin_order_good(self, make_context, site_db) -> None:
        self._system_plugins(site_db, {"session": 0, "redirect": 1, "sef": 2, "cache": 3})
        assert PluginOrderCheck(make_context()).perform_check().health_status is G

    def test_plugin_order_sef_before_redirect(self, make_context, site_db) -> None:
        self._system_plugins(site_db, {"sef": 1, "redirect": 2})
        result = PluginOrderCheck(make_context()).perform_check()
        assert result.health_status is W
        assert "Redirect" in result.description

    def test_plugin_order_late_session_and_early_cache(self, make_context, site_db) -> None:
        order = {f"p{i}": i for i in range(1, 7)}
        order.update({"cache": 0, "session": 10, "last": 20})
        self._system_plugins(site_db, order)
        result = PluginOrderCheck(make_context()).perform_check()
        assert result.health_status is W
        assert "7 plugins run before the Session plugin" in result.description
        assert "Page Cache" in result.description


# ── Performance ──────────────────────────────────────────────────────────────


class TestPerformanceChecks:
    def test_caching_and_gzip(self, make_context) -> None:
        assert CachingCheck(make_context(config={"caching": 0})).perform_check().health_status is W
        assert CachingCheck(make_context(config={"caching": 2})).perform_check().health_status is G
        assert GzipCheck(make_context(config={"gzip": 0})).perform_check().health_status is W
        assert GzipCheck(make_context(config={"gzip": 1})).perform_check().health_status is G

    def _install_page_cache(self, site_db, enabled: int, params: str) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}extensions (type, element, folder, enabled, params) "
            "VALUES ('plugin', 'cache', 'system', ?, ?)",
            (enabled, params),
        )

    def test_page_cache_missing(self, make_context) -> None:
        assert PageCacheCheck(make_context()).perform_check().health_status is W

    def test_page_cache_disabled(self, make_context, site_db) -> None:
        self._install_page_cache(site_db, 0, "{}")
        assert PageCacheCheck(make_context()).perform_check().health_status is W

    @pytest.mark.parametrize("params,expected", [
        ('{"browsercache": 1}', G), ('{"browsercache": "1"}', G),
        ('{"browsercache": 0}', W), ("", G), ("not json", G),
    ])
    def test_page_cache_browser_caching(self, make_context, site_db, params, expected) -> None:
        self._install_page_cache(site_db, 1, params)
        assert PageCacheCheck(make_context()).perform_check().health_status is expected

    @pytest.mark.parametrize("server,expected", [
        ({}, W),
        ({"version": "8.0.36"}, G),
        ({"version": "5.7.44"}, G),
        ({"version": "5.7.44", "variables": {"query_cache_type": "OFF", "query_cache_size": 0}}, G),
        ({"version": "10.11.6-MariaDB", "variables": {"query_cache_type": "OFF"}}, W),
        ({"version": "10.11.6-MariaDB", "variables": {"query_cache_type": "ON", "query_cache_size": 0}}, W),
        ({"version": "10.11.6-MariaDB", "variables": {"query_cache_type": "ON", "query_cache_size": 16777216}}, G),
    ])
    def test_database_query_cache(self, make_context, server, expected) -> None:
        result = DatabaseQueryCacheCheck(make_context(db_server=server)).perform_check()
        assert result.health_status is expected

    def test_database_query_cache_size_reported(self, make_context) -> None:
        server = {"version": "10.6.0-MariaDB", "variables": {"query_cache_type": "1", "query_cache_size": 16777216}}
        assert "16 MB" in DatabaseQueryCacheCheck(make_context(db_server=server)).perform_check().description

    def _install_plugin(self, site_db, folder: str, element: str, enabled: int, params: str) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}extensions (type, element, folder, enabled, params) "
            "VALUES ('plugin', ?, ?, ?, ?)",
            (element, folder, enabled, params),
        )

    @pytest.mark.parametrize("installed,enabled,params,expected", [
        (False, 1, "", W),
        (True, 0, '{"lazy_images": 1}', W),
        (True, 1, "", W),
        (True, 1, "not json", W),
        (True, 1, '{"lazy_images": 0}', W),
        (True, 1, '{"lazy_images": "1"}', G),
    ])
    def test_lazy_load(self, make_context, site_db, installed, enabled, params, expected) -> None:
        if installed:
            self._install_plugin(site_db, "content", "joomla", enabled, params)
        assert LazyLoadCheck(make_context()).perform_check().health_status is expected

    @pytest.mark.parametrize("installed,enabled,params,expected", [
        (False, 1, "", W),
        (True, 0, '{"thumbnail_size": 200}', W),
        (True, 1, "[]", W),
        (True, 1, '{"thumbnail_size": 0}', W),
        (True, 1, '{"thumbnail_size": 200}', G),
    ])
    def test_media_thumbnails(self, make_context, site_db, installed, enabled, params, expected) -> None:
        if installed:
            self._install_plugin(site_db, "filesystem", "local", enabled, params)
        result = MediaManagerThumbnailsCheck(make_context()).perform_check()
        assert result.health_status is expected
        if expected is G:
            assert "200 px" in result.description


# ── SEO ──────────────────────────────────────────────────────────────────────


class TestSeoChecks:
    def test_meta_description(self, make_context) -> None:
        assert MetaDescriptionCheck(make_context(config={"MetaDesc": ""})).perform_check().health_status is W
        good = "A" * 120
        assert MetaDescriptionCheck(make_context(config={"MetaDesc": good})).perform_check().health_status is G

    def test_meta_keywords_always_good(self, make_context) -> None:
        assert MetaKeywordsCheck(make_context(config={"MetaKeys": "a, b"})).perform_check().health_status is G
        assert MetaKeywordsCheck(make_context()).perform_check().health_status is G

    def test_meta_tags_parser(self) -> None:
        html = """
            <meta name="Twitter:Card" content="summary">
            <meta property='og:title' content='Hello &amp; welcome'>
            <meta charset="utf-8">
        """
        assert meta_tags(html) == {"twitter:card": "summary", "og:title": "Hello & welcome"}

    def test_meta_tags_unquoted_attributes(self) -> None:
        html = "<meta name=twitter:card content=summary><meta name=twitter:title content=Home>"
        assert meta_tags(html) == {"twitter:card": "summary", "twitter:title": "Home"}

    def test_twitter_cards_complete(self, make_context) -> None:
        html = """<head>
            <meta name="twitter:card" content="summary_large_image">
            <meta name="twitter:title" content="Home">
            <meta name="twitter:description" content="Welcome">
            <meta name="twitter:image" content="https://www.example.com/a.png">
        </head>"""
        result = TwitterCardsCheck(make_context(handler=_page(html))).perform_check()
        assert result.health_status is G

    def test_twitter_cards_minified_page(self, make_context) -> None:
        html = (
            "<head><meta name=twitter:card content=summary><meta name=twitter:title content=Home>"
            "<meta name=twitter:description content=Welcome></head>"
        )
        result = TwitterCardsCheck(make_context(handler=_page(html))).perform_check()
        assert result.health_status is G

    def test_twitter_cards_og_fallbacks(self, make_context) -> None:
        html = """<head>
            <meta name="twitter:card" content="summary">
            <meta property="og:title" content="Home">
            <meta property="og:description" content="Welcome">
        </head>"""
        result = TwitterCardsCheck(make_context(handler=_page(html))).perform_check()
        assert result.health_status is G
        assert "Open Graph" in result.description

    def test_twitter_cards_missing(self, make_context) -> None:
        html = '<head><meta property="og:title" content="Home"></head>'
        result = TwitterCardsCheck(make_context(handler=_page(html))).perform_check()
        assert result.health_status is W
        assert "twitter:card" in result.description
        assert "twitter:description" in result.description

    def _article(self, site_db, introtext: str, fulltext: str = "", state: int = 1) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}content (title, introtext, fulltext, state) VALUES ('A', ?, ?, ?)",
            (introtext, fulltext, state),
        )

    def test_alt_text_all_present(self, make_context, site_db) -> None:
        self._article(site_db, '<img src="a.png" alt="Logo">', "<img src=b.png alt=Chart>")
        self._article(site_db, '<img src="c.png">', state=0)
        assert AltTextCheck(make_context()).perform_check().health_status is G

    def test_alt_text_missing_or_blank(self, make_context, site_db) -> None:
        self._article(site_db, '<img src="a.png"><img src="b.png" alt="  ">', '<IMG SRC="c.png" ALT="ok">')
        result = AltTextCheck(make_context()).perform_check()
        assert result.health_status is W
        assert result.description.startswith("2 image(s)")

    def test_alt_text_many_missing(self, make_context, site_db) -> None:
        self._article(site_db, '<img src="a.png">' * 8)
        self._article(site_db, "", '<img src="b.png" alt="">' * 4)
        result = AltTextCheck(make_context()).perform_check()
        assert result.health_status is W
        assert "12 images in 2 published article(s)" in result.description

    def test_twitter_cards_without_site_url(self, make_context) -> None:
        result = TwitterCardsCheck(make_context(site_url="")).perform_check()
        assert result.health_status is W

    def test_twitter_cards_http_error(self, make_context) -> None:
        result = TwitterCardsCheck(make_context(handler=_page("", status=503))).perform_check()
        assert result.health_status is W
        assert "503" in result.description


# ── Content ──────────────────────────────────────────────────────────────────


class TestContentChecks:
    def test_empty_articles(self, make_context, site_db) -> None:
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}content (title, introtext, fulltext, state) VALUES ('Full', '<p>Hi</p>', '', 1)"
        )
        site_db.execute(
            f"INSERT INTO {DB_PREFIX}content (title, introtext, fulltext, state) VALUES ('Draft', '', '', 0)"
        )
        assert EmptyArticlesCheck(make_context()).perform_check().health_status is G

        site_db.execute(
            f"INSERT INTO {DB_PREFIX}content (title, introtext, fulltext, state) VALUES ('Empty', '  ', NULL, 1)"
        )
        result = EmptyArticlesCheck(make_context()).perform_check()
        assert result.health_status is W
        assert result.description.startswith("1 ")
