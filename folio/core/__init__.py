"""
Core module - fundamental data models and infrastructure.

This module contains:
- models: Core data models (UnifiedProject, ProjectSection, ProjectImage)
- errors: Exceptions raised by the services
- events: Event bus for change notifications
- utils: Shared utility functions
"""

from folio.core.models import (
    UnifiedProject,
    ProjectContent,
    ProjectImage,
    ProjectSection,
    ProjectSEO,
    SectionMedia,
    SectionKind,
    SectionLayout,
    ProjectStatus,
    ProjectType,
    MediaType,
    EditorMode,
    OrderBy,
    SortDirection,
    CreateProjectData,
    ProjectUpdate,
    ProjectFilters,
    ProjectReference,
    BulkUpdateFailure,
    BulkUpdateResult,
    SimpleEditorState,
)

from folio.core.errors import (
    FolioError,
    ValidationError,
    NotFoundError,
    TemplateNotFoundError,
    ConflictError,
    StorageError,
)

from folio.core.events import (
    COLLECTION,
    Event,
    EventBus,
    ProjectEventType,
    get_event_bus,
    reset_event_bus,
)

from folio.core.utils import (
    generate_id,
    generate_slug,
    utc_now,
)

__all__ = [
    # Models
    "UnifiedProject",
    "ProjectContent",
    "ProjectImage",
    "ProjectSection",
    "ProjectSEO",
    "SectionMedia",
    "SectionKind",
    "SectionLayout",
    "ProjectStatus",
    "ProjectType",
    "MediaType",
    "EditorMode",
    "OrderBy",
    "SortDirection",
    "CreateProjectData",
    "ProjectUpdate",
    "ProjectFilters",
    "ProjectReference",
    "BulkUpdateFailure",
    "BulkUpdateResult",
    "SimpleEditorState",
    # Errors
    "FolioError",
    "ValidationError",
    "NotFoundError",
    "TemplateNotFoundError",
    "ConflictError",
    "StorageError",
    # Events
    "COLLECTION",
    "Event",
    "EventBus",
    "ProjectEventType",
    "get_event_bus",
    "reset_event_bus",
    # Utils
    "generate_id",
    "generate_slug",
    "utc_now",
]
