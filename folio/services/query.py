"""
Project Query/Filter Engine.

Pure, stateless functions over a list of projects: filtering, sorting,
searching and statistics. Nothing here mutates its input.
"""

from __future__ import annotations

from typing import Any

from folio.core.models import (
    OrderBy,
    ProjectFilters,
    ProjectImage,
    ProjectStatus,
    SortDirection,
    UnifiedProject,
)
from folio.resources.catalog import TemplateCatalog

# Projects without a manual position sort after every positioned one
UNORDERED_SENTINEL = 999999


def filter_projects(projects: list[UnifiedProject], filters: ProjectFilters) -> list[UnifiedProject]:
    """
    Keep projects matching every given criterion.

    `tags` matches a project having any of the listed tags; `search`
    is a case-insensitive substring match on title, summary and tags.
    """
    result = list(projects)

    if filters.status is not None and filters.status != "all":
        result = [p for p in result if p.status == filters.status]

    if filters.featured is not None:
        result = [p for p in result if p.featured == filters.featured]

    if filters.type is not None:
        result = [p for p in result if p.type == filters.type]

    if filters.template_id:
        result = [p for p in result if p.template_id == filters.template_id]

    if filters.tags:
        wanted = set(filters.tags)
        result = [p for p in result if wanted.intersection(p.tags)]

    needle = (filters.search or "").strip().lower()
    if needle:
        result = [
            p for p in result
            if needle in p.title.lower()
            or needle in p.summary.lower()
            or any(needle in tag.lower() for tag in p.tags)
        ]

    return result


def _sort_key(order_by: OrderBy):
    if order_by == OrderBy.TITLE:
        return lambda p: p.title.lower()
    if order_by == OrderBy.CREATED_AT:
        return lambda p: p.created_at
    if order_by == OrderBy.ORDER_INDEX:
        return lambda p: p.order_index if p.order_index is not None else UNORDERED_SENTINEL
    return lambda p: p.updated_at


def sort_projects(
    projects: list[UnifiedProject],
    order_by: OrderBy = OrderBy.UPDATED_AT,
    direction: SortDirection = SortDirection.DESC,
) -> list[UnifiedProject]:
    """Sort by one field. Ties keep their input order."""
    return sorted(
        projects,
        key=_sort_key(OrderBy(order_by)),
        reverse=SortDirection(direction) == SortDirection.DESC,
    )


def query_projects(
    projects: list[UnifiedProject],
    filters: ProjectFilters | None = None,
) -> list[UnifiedProject]:
    """Filter, then sort (newest update first unless told otherwise)."""
    filters = filters or ProjectFilters()
    result = filter_projects(projects, filters)
    return sort_projects(
        result,
        filters.order_by or OrderBy.UPDATED_AT,
        filters.order_direction or SortDirection.DESC,
    )


def search_projects(projects: list[UnifiedProject], query: str) -> list[UnifiedProject]:
    """
    Case-insensitive substring search across title, summary, tags, role
    and the challenge/solution/results text. A blank query matches all.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(projects)

    def matches(project: UnifiedProject) -> bool:
        fields = [
            project.title,
            project.summary,
            project.role,
            project.content.challenge,
            project.content.solution,
            project.content.results,
            *project.tags,
        ]
        return any(needle in value.lower() for value in fields)

    return [p for p in projects if matches(p)]


def project_stats(projects: list[UnifiedProject]) -> dict[str, Any]:
    """Counts by status, type and template, plus featured."""
    stats: dict[str, Any] = {
        "total": len(projects),
        "featured": 0,
        "by_status": {status.value: 0 for status in ProjectStatus},
        "by_type": {},
        "by_template": {},
    }

    for project in projects:
        stats["by_status"][project.status.value] += 1
        if project.featured:
            stats["featured"] += 1
        stats["by_type"][project.type.value] = stats["by_type"].get(project.type.value, 0) + 1
        if project.template_id:
            stats["by_template"][project.template_id] = stats["by_template"].get(project.template_id, 0) + 1

    return stats


def all_tags(projects: list[UnifiedProject]) -> list[str]:
    """Every tag in use, sorted."""
    return sorted({tag for project in projects for tag in project.tags})


def templates_with_usage(catalog: TemplateCatalog, projects: list[UnifiedProject]) -> list[dict[str, Any]]:
    """Each catalog template with the number of projects created from it."""
    counts = project_stats(projects)["by_template"]
    return [
        {"template": template, "usage_count": counts.get(template.id, 0)}
        for template in catalog.list_templates()
    ]


def cover_image(project: UnifiedProject) -> ProjectImage | None:
    """The image with order 0, else the first image."""
    if not project.images:
        return None
    return next((img for img in project.images if img.order == 0), project.images[0])
