"""Registries: checks by slug, category metadata, provider metadata.

Built once at startup by explicit ``register`` calls and treated as read-only
for the rest of the process. Insertion order is the display order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from healthchecker.health.check import HealthCheck
from healthchecker.health.errors import DuplicateSlugError

logger = logging.getLogger(__name__)

CORE_PROVIDER = "core"


# ── Metadata models ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HealthCategory:
    """A logical grouping of checks shown as one report section."""

    slug: str
    label: str
    icon: str = "fa-question"
    sort_order: int = 100
    logo_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "label": self.label,
            "icon": self.icon,
            "sortOrder": self.sort_order,
            "logoUrl": self.logo_url,
        }


@dataclass(frozen=True)
class ProviderMetadata:
    """Attribution for the origin of a set of checks."""

    slug: str
    name: str
    description: str = ""
    url: str | None = None
    icon: str = "fa-plug"
    logo_url: str | None = None
    version: str | None = None

    @property
    def is_core(self) -> bool:
        return self.slug == CORE_PROVIDER

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "icon": self.icon,
            "logoUrl": self.logo_url,
            "version": self.version,
        }


# ── Check registry ───────────────────────────────────────────────────────────


class CheckRegistry:
    """Holds every registered check keyed by slug."""

    def __init__(self) -> None:
        self._checks: dict[str, HealthCheck] = {}
        self._order: dict[str, int] = {}

    def register(self, check: HealthCheck) -> None:
        """Add a check. Raises DuplicateSlugError on slug collision."""
        if check.slug in self._checks:
            raise DuplicateSlugError(check.slug)
        self._order[check.slug] = len(self._checks)
        self._checks[check.slug] = check

    def all(self) -> list[HealthCheck]:
        return list(self._checks.values())

    def by_category(self, category: str) -> list[HealthCheck]:
        return [c for c in self._checks.values() if c.category == category]

    def by_slug(self, slug: str) -> HealthCheck | None:
        return self._checks.get(slug)

    def index_of(self, slug: str) -> int | None:
        return self._order.get(slug)

    def categories_in_use(self) -> list[str]:
        seen: dict[str, None] = {}
        for c in self._checks.values():
            seen.setdefault(c.category, None)
        return list(seen)

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, slug: object) -> bool:
        return slug in self._checks

    def __iter__(self) -> Iterator[HealthCheck]:
        return iter(self.all())


# ── Category / provider registries ───────────────────────────────────────────


class CategoryRegistry:
    def __init__(self) -> None:
        self._categories: dict[str, HealthCategory] = {}

    def register(self, category: HealthCategory) -> None:
        if category.slug in self._categories:
            logger.debug("Category '%s' re-registered, replacing", category.slug)
        self._categories[category.slug] = category

    def get(self, slug: str) -> HealthCategory | None:
        return self._categories.get(slug)

    def has(self, slug: str) -> bool:
        return slug in self._categories

    def all(self) -> list[HealthCategory]:
        """Categories sorted by sort order; ties keep registration order."""
        return sorted(self._categories.values(), key=lambda c: c.sort_order)

    def slugs(self) -> list[str]:
        return [c.slug for c in self.all()]

    def label(self, slug: str) -> str:
        category = self._categories.get(slug)
        return category.label if category else slug

    def __len__(self) -> int:
        return len(self._categories)


class ProviderRegistry:
    def __init__(self) -> None:
        self._providers: dict[str, ProviderMetadata] = {}

    def register(self, provider: ProviderMetadata) -> None:
        self._providers[provider.slug] = provider

    def get(self, slug: str) -> ProviderMetadata | None:
        return self._providers.get(slug)

    def has(self, slug: str) -> bool:
        return slug in self._providers

    def all(self) -> list[ProviderMetadata]:
        return list(self._providers.values())

    def third_party(self) -> list[ProviderMetadata]:
        return [p for p in self._providers.values() if not p.is_core]

    def display_name(self, slug: str) -> str:
        """Provider name, or the raw slug when the provider is unknown."""
        provider = self._providers.get(slug)
        return provider.name if provider else slug

    def __len__(self) -> int:
        return len(self._providers)
