"""Homepage fetching and meta tag parsing shared by header and SEO checks."""

from __future__ import annotations

import httpx
from bs4 import BeautifulSoup

from healthchecker.site import SiteContext


class HomepageUnavailable(Exception):
    pass


def fetch_homepage(context: SiteContext) -> httpx.Response:
    """GET the site root. Raises HomepageUnavailable with a readable reason."""
    if not context.site_url:
        raise HomepageUnavailable("the site URL is not configured")
    try:
        with context.http_client() as client:
            response = client.get(context.site_url)
    except httpx.HTTPError as e:
        raise HomepageUnavailable(f"{type(e).__name__}: {e}") from e
    if response.status_code != 200:
        raise HomepageUnavailable(f"the homepage returned HTTP {response.status_code}")
    return response


def parse_page(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def meta_tags(html: str) -> dict[str, str]:
    """Map of meta name/property to content for every <meta> tag in the page.

    Keys are lowercased; the first tag wins when a name repeats.
    """
    tags: dict[str, str] = {}
    for tag in parse_page(html).find_all("meta"):
        key = tag.get("name") or tag.get("property")
        content = tag.get("content")
        if key and content is not None:
            tags.setdefault(key.lower(), content)
    return tags
