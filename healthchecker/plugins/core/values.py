"""Parsing helpers for configuration and php.ini style values."""

from __future__ import annotations

import re
from typing import Any

_SIZE_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([KMGT]?)B?\s*$", re.IGNORECASE)
_UNITS = {"": 1, "K": 1024, "M": 1024**2, "G": 1024**3, "T": 1024**4}


def parse_size(value: Any) -> int | None:
    """'256M' → bytes. -1 stays -1 (unlimited). Unparseable → None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    m = _SIZE_RE.match(str(value))
    if not m:
        return None
    number, unit = m.groups()
    return int(float(number) * _UNITS[unit.upper()])


def format_bytes(size: float) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1
    return f"{round(size, 2):g} {units[i]}"


def parse_version(value: Any) -> tuple[int, ...] | None:
    """'8.2.12-1ubuntu' → (8, 2, 12)."""
    if value is None:
        return None
    parts = re.findall(r"\d+", str(value))[:3]
    if not parts:
        return None
    return tuple(int(p) for p in parts)


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_seconds(value: Any) -> int | None:
    """'60', 60 or '60s' → 60. Unparseable → None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    m = re.match(r"^\s*(\d+)\s*s?\s*$", str(value), re.IGNORECASE)
    return int(m.group(1)) if m else None
