"""Services - the store, the editor and the pure functions they build on."""

from folio.services.store import ProjectStore
from folio.services.editor import ProjectEditor
from folio.services.media_usage import MediaUsageIndex, build_media_usage
from folio.services.query import (
    filter_projects,
    sort_projects,
    query_projects,
    search_projects,
    project_stats,
)
from folio.services.migration import migrate_project, migrate_projects, to_legacy_project
from folio.services.sync import content_from_sections, sections_from_content
from folio.services.validation import validate_project

__all__ = [
    "ProjectStore",
    "ProjectEditor",
    "MediaUsageIndex",
    "build_media_usage",
    "filter_projects",
    "sort_projects",
    "query_projects",
    "search_projects",
    "project_stats",
    "content_from_sections",
    "sections_from_content",
    "migrate_project",
    "migrate_projects",
    "to_legacy_project",
    "validate_project",
]
