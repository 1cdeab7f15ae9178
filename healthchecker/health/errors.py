"""Exceptions raised by the check registry and runner."""

from __future__ import annotations


class HealthCheckerError(Exception):
    """Base class for all healthchecker errors."""


class DuplicateSlugError(HealthCheckerError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"A check with slug '{slug}' is already registered")
        self.slug = slug


class UnknownSlugError(HealthCheckerError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Check not found: {slug}")
        self.slug = slug


class UnknownCategoryError(HealthCheckerError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Category not found: {slug}")
        self.slug = slug


class DatabaseUnavailableError(HealthCheckerError):
    """A check needed the database but none was injected."""
