"""
Project validation rules.

The rules live here once; every boundary that writes projects (the
store, the editor, import) goes through `validate_project`.
"""

from __future__ import annotations

import re

from folio.core.errors import ValidationError
from folio.core.models import UnifiedProject

TITLE_MAX_LENGTH = 200
SUMMARY_MAX_LENGTH = 500
MAX_TAGS = 20

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


def validate_project(project: UnifiedProject) -> list[str]:
    """
    Check a project against the content rules.

    Returns:
        Human-readable error messages (empty if valid)
    """
    errors: list[str] = []

    if not project.title.strip():
        errors.append("Title is required")
    if len(project.title) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be less than {TITLE_MAX_LENGTH} characters")

    if not project.role.strip():
        errors.append("Role is required")

    if not project.summary.strip():
        errors.append("Summary is required")
    if len(project.summary) > SUMMARY_MAX_LENGTH:
        errors.append(f"Summary must be less than {SUMMARY_MAX_LENGTH} characters")

    if project.slug and not SLUG_PATTERN.match(project.slug):
        errors.append("Slug must contain only lowercase letters, numbers, and hyphens")

    if len(project.tags) > MAX_TAGS:
        errors.append(f"Maximum {MAX_TAGS} tags allowed")

    return errors


def ensure_valid(project: UnifiedProject) -> UnifiedProject:
    """Raise ValidationError unless the project passes every rule."""
    errors = validate_project(project)
    if errors:
        raise ValidationError(errors)
    return project
