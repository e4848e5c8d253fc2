"""
Shared utility functions for the folio core.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Iterable

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.

    Args:
        prefix: Optional prefix (e.g., "project", "section")

    Returns:
        A unique ID like "project_a1b2c3d4e5f6"
    """
    uid = str(uuid.uuid4())[:12]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def generate_slug(title: str) -> str:
    """
    Generate a URL-friendly slug from a title.

    "My Demo!" -> "my-demo"
    """
    return _SLUG_INVALID.sub("-", title.lower()).strip("-")


def unique_slug(base: str, taken: Iterable[str]) -> str:
    """
    Return `base`, or `base-2`, `base-3`, ... whichever is not taken.
    """
    taken = set(taken)
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def dedupe(items: Iterable[str]) -> list[str]:
    """Remove duplicates, keeping the first occurrence of each item."""
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
