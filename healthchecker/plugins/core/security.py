"""Security checks: global configuration and response headers."""

from __future__ import annotations

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult
from healthchecker.plugins.core.homepage import HomepageUnavailable, fetch_homepage
from healthchecker.plugins.core.values import as_bool, as_int

GLOBAL_CONFIG_URL = "/administrator/index.php?option=com_config"

# Secrets shipped in old sample configuration files
KNOWN_DEFAULT_SECRETS = frozenset({"FBVtggIk5lAzEU9H", "secret"})
MIN_SECRET_LENGTH = 16


class DebugModeCheck(HealthCheck):
    slug = "security.debug_mode"
    category = "security"
    title = "Debug Mode"
    action_url = GLOBAL_CONFIG_URL

    def perform_check(self) -> HealthCheckResult:
        if as_bool(self.context.get("debug", False)):
            return self.warning(
                "Debug mode is <strong>enabled</strong>. It exposes queries and paths to visitors; "
                "disable it on production sites."
            )
        return self.good("Debug mode is disabled.")


class ErrorReportingCheck(HealthCheck):
    slug = "security.error_reporting"
    category = "security"
    title = "Error Reporting"
    action_url = GLOBAL_CONFIG_URL

    VERBOSE_LEVELS = ("maximum", "development")

    def perform_check(self) -> HealthCheckResult:
        level = str(self.context.get("error_reporting", "default")).lower()
        if level in self.VERBOSE_LEVELS:
            return self.warning(
                f"Error reporting is set to <code>{level}</code>; error details may leak to visitors."
            )
        return self.good(f"Error reporting is set to <code>{level}</code>.")


class ForceSslCheck(HealthCheck):
    slug = "security.force_ssl"
    category = "security"
    title = "Force HTTPS"
    action_url = GLOBAL_CONFIG_URL

    def perform_check(self) -> HealthCheckResult:
        mode = as_int(self.context.get("force_ssl", 0))
        if mode >= 2:
            return self.good("HTTPS is enforced for the entire site.")
        if mode == 1:
            return self.warning("HTTPS is only enforced for the administrator area.")
        return self.warning("HTTPS is not enforced; logins and forms can be sent in clear text.")


class DefaultSecretCheck(HealthCheck):
    slug = "security.default_secret"
    category = "security"
    title = "Site Secret"

    def perform_check(self) -> HealthCheckResult:
        secret = str(self.context.get("secret") or "")
        if not secret:
            return self.critical("The site secret is empty.")
        if secret in KNOWN_DEFAULT_SECRETS:
            return self.critical("The site secret is a publicly known default value.")
        if len(secret) < MIN_SECRET_LENGTH:
            return self.warning(
                f"The site secret is only {len(secret)} characters long; use at least {MIN_SECRET_LENGTH}."
            )
        return self.good("The site secret is set and not a known default.")


class MailerSecurityCheck(HealthCheck):
    slug = "security.mailer_security"
    category = "security"
    title = "Mailer Security"
    action_url = GLOBAL_CONFIG_URL

    def perform_check(self) -> HealthCheckResult:
        mailer = str(self.context.get("mailer", "mail"))
        smtp_security = str(self.context.get("smtpsecure") or "none")

        if mailer == "smtp":
            if smtp_security == "none":
                return self.warning("SMTP is used without encryption. Enable SSL or TLS.")
            return self.good(f"SMTP is used with {smtp_security.upper()} encryption.")
        if mailer == "mail":
            return self.good("PHP mail() is used; transport security is handled by the server.")
        if mailer == "sendmail":
            return self.good("Sendmail is used; transport security is handled by the server.")
        return self.good(f"Mailer <code>{mailer}</code> is configured.")


class XFrameOptionsCheck(HealthCheck):
    slug = "security.x_frame_options"
    category = "security"
    title = "Clickjacking Protection"

    def perform_check(self) -> HealthCheckResult:
        try:
            response = fetch_homepage(self.context)
        except HomepageUnavailable as e:
            return self.warning(f"Could not check response headers: {e}.")

        xfo = response.headers.get("x-frame-options", "").upper()
        csp = response.headers.get("content-security-policy", "").lower()
        if xfo in ("DENY", "SAMEORIGIN"):
            return self.good(f"<code>X-Frame-Options: {xfo}</code> is sent.")
        if "frame-ancestors" in csp:
            return self.good("A <code>frame-ancestors</code> Content-Security-Policy is sent.")
        return self.warning(
            "Neither <code>X-Frame-Options</code> nor a CSP <code>frame-ancestors</code> "
            "directive is sent; the site can be embedded by other sites."
        )
