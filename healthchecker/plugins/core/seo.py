"""SEO checks: configuration values and the rendered homepage."""

from __future__ import annotations

from healthchecker.health.check import HealthCheck
from healthchecker.health.models import HealthCheckResult
from healthchecker.plugins.core.homepage import HomepageUnavailable, fetch_homepage, meta_tags, parse_page
from healthchecker.plugins.core.values import as_bool

GLOBAL_CONFIG_URL = "/administrator/index.php?option=com_config"

TWITTER_REQUIRED_TAGS = ("twitter:card", "twitter:title", "twitter:description")
TWITTER_OG_FALLBACKS = {
    "twitter:title": "og:title",
    "twitter:description": "og:description",
}


class SefUrlsCheck(HealthCheck):
    slug = "seo.sef_urls"
    category = "seo"
    title = "Search Engine Friendly URLs"
    action_url = GLOBAL_CONFIG_URL

    def perform_check(self) -> HealthCheckResult:
        if not as_bool(self.context.get("sef", True)):
            return self.warning("Search engine friendly URLs are disabled.")
        if not as_bool(self.context.get("sef_rewrite", False)):
            return self.good(
                "Search engine friendly URLs are enabled. URL rewriting is off, so URLs contain "
                "<code>index.php</code>."
            )
        return self.good("Search engine friendly URLs and URL rewriting are enabled.")


class MetaDescriptionCheck(HealthCheck):
    slug = "seo.meta_description"
    category = "seo"
    title = "Site Meta Description"
    action_url = GLOBAL_CONFIG_URL

    MIN_LENGTH = 50
    MAX_LENGTH = 160

    def perform_check(self) -> HealthCheckResult:
        description = str(self.context.get("MetaDesc") or "").strip()
        if not description:
            return self.warning("The site meta description is empty.")
        if len(description) < self.MIN_LENGTH:
            return self.warning(
                f"The site meta description is only {len(description)} characters long."
            )
        if len(description) > self.MAX_LENGTH:
            return self.warning(
                f"The site meta description is {len(description)} characters; search engines "
                f"truncate after about {self.MAX_LENGTH}."
            )
        return self.good(f"The site meta description is {len(description)} characters long.")


class MetaKeywordsCheck(HealthCheck):
    """Meta keywords are ignored by search engines; informational only."""

    slug = "seo.meta_keywords"
    category = "seo"
    title = "Meta Keywords"

    def perform_check(self) -> HealthCheckResult:
        keywords = str(self.context.get("MetaKeys") or "").strip()
        if keywords and keywords != "0":
            return self.good(
                "Meta keywords are set. They are harmless but ignored by major search engines."
            )
        return self.good("Meta keywords are empty, which is current best practice.")


class TwitterCardsCheck(HealthCheck):
    slug = "seo.twitter_cards"
    category = "seo"
    title = "Twitter Cards"

    def perform_check(self) -> HealthCheckResult:
        try:
            response = fetch_homepage(self.context)
        except HomepageUnavailable as e:
            return self.warning(f"Could not check Twitter Card tags: {e}.")

        tags = meta_tags(response.text)
        missing: list[str] = []
        fallbacks: list[str] = []
        for tag in TWITTER_REQUIRED_TAGS:
            if tag in tags:
                continue
            fallback = TWITTER_OG_FALLBACKS.get(tag)
            if fallback and fallback in tags:
                fallbacks.append(tag)
                continue
            missing.append(tag)

        if missing:
            found = len(TWITTER_REQUIRED_TAGS) - len(missing)
            return self.warning(
                f"Missing Twitter Card tags: {', '.join(missing)} "
                f"({found} of {len(TWITTER_REQUIRED_TAGS)} present)."
            )

        message = "Twitter Card tags are present."
        if fallbacks:
            message += f" Using Open Graph fallbacks for {', '.join(fallbacks)}."
        if "twitter:image" not in tags and "og:image" not in tags:
            message += " No share image is set."
        return self.good(message)


class AltTextCheck(HealthCheck):
    slug = "seo.alt_text"
    category = "seo"
    title = "Image Alt Text"
    action_url = "/administrator/index.php?option=com_content&view=articles"

    # Above this many images the count is reported with the article count
    MANY_IMAGES = 10

    def perform_check(self) -> HealthCheckResult:
        rows = self.context.query(
            "SELECT introtext, fulltext FROM #__content WHERE state = 1",
        )
        missing_images = 0
        articles = 0
        for introtext, fulltext in rows:
            page = parse_page(f"{introtext or ''}{fulltext or ''}")
            missing = sum(1 for img in page.find_all("img") if not (img.get("alt") or "").strip())
            if missing:
                missing_images += missing
                articles += 1

        if missing_images > self.MANY_IMAGES:
            return self.warning(
                f"{missing_images} images in {articles} published article(s) have no alt text."
            )
        if missing_images:
            return self.warning(f"{missing_images} image(s) in published articles have no alt text.")
        return self.good("Every image in published articles has alt text.")
