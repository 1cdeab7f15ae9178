"""Content checks."""

from __future__ import annotations

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult


class EmptyArticlesCheck(HealthCheck):
    slug = "content.empty_articles"
    category = "content"
    title = "Empty Articles"
    action_url = "/administrator/index.php?option=com_content&view=articles"

    def perform_check(self) -> HealthCheckResult:
        count = self.context.query_scalar(
            "SELECT COUNT(*) FROM #__content "
            "WHERE state = 1 AND TRIM(COALESCE(introtext, '')) = '' "
            "AND TRIM(COALESCE(fulltext, '')) = ''",
        ) or 0
        if count:
            return self.warning(f"{count} published article(s) have no content.")
        return self.good("Every published article has content.")
