"""Health Checker: read-only diagnostics for a CMS installation."""

__version__ = "1.0.0"
