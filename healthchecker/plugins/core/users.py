"""User account checks."""

from __future__ import annotations

from datetime import datetime, timedelta

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult
from healthchecker.plugins.core.values import as_bool, as_int

USERS_URL = "/administrator/index.php?option=com_users&view=users"
USERS_OPTIONS_URL = "/administrator/index.php?option=com_config&view=component&component=com_users"

# Core group ids that must never be granted on self-registration
PRIVILEGED_GROUPS = {6: "Manager", 7: "Administrator", 8: "Super Users"}


class DefaultAdminUsernameCheck(HealthCheck):
    slug = "users.default_admin_username"
    category = "users"
    title = "Default Admin Username"
    action_url = USERS_URL

    def perform_check(self) -> HealthCheckResult:
        count = self.context.query_scalar(
            "SELECT COUNT(*) FROM #__users WHERE LOWER(username) = ? AND block = 0",
            ("admin",),
        )
        if count:
            return self.warning(
                "An active account named <code>admin</code> exists. It is the first name "
                "brute-force attacks try; rename it."
            )
        return self.good("No active account uses the username <code>admin</code>.")


class UserRegistrationCheck(HealthCheck):
    slug = "users.user_registration"
    category = "users"
    title = "User Registration"
    action_url = USERS_OPTIONS_URL

    def perform_check(self) -> HealthCheckResult:
        if not as_bool(self.context.get("allowUserRegistration", False)):
            return self.good("Public user registration is disabled.")

        group = as_int(self.context.get("new_usertype", 2), 2)
        if group in PRIVILEGED_GROUPS:
            return self.critical(
                f"New registrations are placed in the <strong>{PRIVILEGED_GROUPS[group]}</strong> group."
            )
        if as_int(self.context.get("useractivation", 1), 1) == 0:
            return self.warning(
                "Public registration is enabled without account activation; expect spam accounts."
            )
        return self.good("Public registration is enabled with account activation.")


class PasswordExpiryCheck(HealthCheck):
    slug = "users.password_expiry"
    category = "users"
    title = "Password Age"

    MAX_AGE_DAYS = 365
    NULL_DATE = "0000-00-00 00:00:00"

    clock = staticmethod(datetime.now)

    def perform_check(self) -> HealthCheckResult:
        cutoff = (self.clock() - timedelta(days=self.MAX_AGE_DAYS)).strftime("%Y-%m-%d %H:%M:%S")
        # Accounts that never reset their password age from the registration date
        expired = as_int(self.context.query_scalar(
            "SELECT COUNT(*) FROM #__users WHERE block = 0 AND ("
            "(lastResetTime IS NOT NULL AND lastResetTime != ? AND lastResetTime < ?) "
            "OR ((lastResetTime IS NULL OR lastResetTime = ?) AND registerDate < ?))",
            (self.NULL_DATE, cutoff, self.NULL_DATE, cutoff),
        ))
        total = as_int(self.context.query_scalar("SELECT COUNT(*) FROM #__users WHERE block = 0"))

        if not expired or not total:
            return self.good(f"No active account has a password older than {self.MAX_AGE_DAYS} days.")
        percentage = round(expired / total * 100)
        summary = (
            f"{expired} of {total} active account(s) ({percentage}%) have not changed their "
            f"password in over {self.MAX_AGE_DAYS} days"
        )
        if percentage > 75:
            return self.warning(f"{summary}. Ask users to rotate their passwords.")
        if percentage > 25:
            return self.warning(f"{summary}.")
        return self.good(f"{summary}.")
