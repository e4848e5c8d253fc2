"""
Core data models for the folio content core.

These models represent the fundamental entities: Unified Projects (with
their dual simple/section content), project media, and the derived
records the services hand back (media references, bulk results).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from folio.core.utils import dedupe, generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    DRAFT = "draft"  # Being written, not visible on the site
    PUBLISHED = "published"  # Live
    ARCHIVED = "archived"  # Hidden but kept


class ProjectType(str, Enum):
    """What kind of portfolio entry a project is."""

    CASE_STUDY = "case-study"
    PROJECT = "project"
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"


class MediaType(str, Enum):
    """Type of an embedded media asset."""

    IMAGE = "image"
    VIDEO = "video"


class SectionKind(str, Enum):
    """Layout block types available in advanced mode."""

    HERO = "hero"
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    GALLERY = "gallery"
    GRID = "grid"
    SPLIT = "split"
    STATS = "stats"
    TESTIMONIAL = "testimonial"
    CTA = "cta"
    TIMELINE = "timeline"
    PROCESS = "process"
    FEATURES = "features"
    CODE = "code"
    QUOTE = "quote"


class SectionLayout(str, Enum):
    """How a section is laid out on the page."""

    DEFAULT = "default"
    FULL_WIDTH = "full-width"
    CONTAINED = "contained"
    SPLIT_LEFT = "split-left"
    SPLIT_RIGHT = "split-right"


class EditorMode(str, Enum):
    """Which view of a project the editor is showing."""

    SIMPLE = "simple"  # Flat content fields
    ADVANCED = "advanced"  # Ordered sections


class OrderBy(str, Enum):
    """Sortable project fields."""

    TITLE = "title"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    ORDER_INDEX = "order_index"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# =============================================================================
# Media
# =============================================================================


class ProjectImage(BaseModel):
    """A cover / quick-access media item in a project's flat image list."""

    id: str = Field(default_factory=lambda: generate_id("media"))
    url: str
    alt: str = ""
    caption: str = ""
    type: MediaType = MediaType.IMAGE
    order: int = 0


class SectionMedia(BaseModel):
    """A media asset embedded in a section (supplied by the media service)."""

    id: str
    url: str
    name: str = ""
    alt: str = ""
    caption: str = ""
    type: MediaType = MediaType.IMAGE
    order: int | None = None  # Position in the flat image list, if it came from one


# =============================================================================
# Content
# =============================================================================


class ProjectContent(BaseModel):
    """
    The flat "simple mode" content record.

    The first six fields are the core case-study story; the rest are
    optional project details.
    """

    challenge: str = ""
    solution: str = ""
    results: str = ""
    process: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    # Optional details
    client: str | None = None
    timeline: str | None = None
    budget: str | None = None
    team: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list)
    metrics: list[str] = Field(default_factory=list)

    @field_validator("technologies", "skills")
    @classmethod
    def _ordered_set(cls, value: list[str]) -> list[str]:
        return dedupe(value)

    @field_validator("client", "timeline", "budget")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        return value or None


class ProjectSection(BaseModel):
    """
    A titled, typed content block in a project's advanced representation.

    `content` holds the kind-specific fields (e.g. `text` for text blocks,
    `steps` for process blocks, `technologies` for feature blocks).
    """

    id: str = Field(default_factory=lambda: generate_id("section"))
    kind: SectionKind
    title: str = ""
    content: dict[str, Any] = Field(default_factory=dict)
    media: list[SectionMedia] = Field(default_factory=list)
    layout: SectionLayout = SectionLayout.DEFAULT
    order: int = 0
    settings: dict[str, Any] = Field(default_factory=dict)


class ProjectSEO(BaseModel):
    """Search / social metadata."""

    meta_title: str | None = None
    meta_description: str | None = None
    keywords: list[str] = Field(default_factory=list)
    og_image: str | None = None


# =============================================================================
# Unified Project
# =============================================================================


class UnifiedProject(BaseModel):
    """
    A portfolio project - the canonical record.

    Content lives in two shapes: the flat `content` + `images` pair edited
    in simple mode, and the ordered `sections` list edited in advanced
    mode. The content synchronizer keeps the shared fields consistent.
    """

    id: str = Field(default_factory=lambda: generate_id("project"))
    slug: str = ""

    # Descriptive
    title: str
    role: str = ""
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    type: ProjectType = ProjectType.PROJECT
    featured: bool = False

    # Which template seeded the sections (None for ad hoc projects)
    template_id: str | None = None

    # Dual content representation
    content: ProjectContent = Field(default_factory=ProjectContent)
    images: list[ProjectImage] = Field(default_factory=list)
    sections: list[ProjectSection] = Field(default_factory=list)

    seo: ProjectSEO = Field(default_factory=ProjectSEO)

    # Lifecycle
    status: ProjectStatus = ProjectStatus.DRAFT
    order_index: int | None = None

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    published_at: datetime | None = None

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return dedupe(value)

    def mark_updated(self) -> None:
        """Stamp updated_at."""
        self.updated_at = utc_now()

    def get_section(self, section_id: str) -> ProjectSection | None:
        """Get a section by ID."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


# =============================================================================
# Inputs
# =============================================================================


class CreateProjectData(BaseModel):
    """Input for creating a project. Missing required fields fail validation."""

    title: str = ""
    slug: str | None = None  # Derived from title when omitted
    role: str = ""
    summary: str = ""
    template_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    type: ProjectType = ProjectType.PROJECT


class ProjectUpdate(BaseModel):
    """
    A partial update. Only fields explicitly set are merged; lists replace
    the stored list wholesale.
    """

    title: str | None = None
    slug: str | None = None
    role: str | None = None
    summary: str | None = None
    tags: list[str] | None = None
    type: ProjectType | None = None
    featured: bool | None = None
    template_id: str | None = None
    content: ProjectContent | None = None
    images: list[ProjectImage] | None = None
    sections: list[ProjectSection] | None = None
    seo: ProjectSEO | None = None
    status: ProjectStatus | None = None
    order_index: int | None = None
    published_at: datetime | None = None

    def changes(self) -> dict[str, Any]:
        """The explicitly-set fields as plain data."""
        return self.model_dump(exclude_unset=True)

    @classmethod
    def from_project(cls, project: UnifiedProject) -> ProjectUpdate:
        """An update that overwrites every mutable field with `project`'s."""
        return cls.model_validate(project.model_dump(include=set(cls.model_fields)))


class ProjectFilters(BaseModel):
    """Criteria for listing projects. All criteria are AND-combined."""

    status: ProjectStatus | Literal["all"] | None = None
    featured: bool | None = None
    type: ProjectType | None = None
    template_id: str | None = None
    tags: list[str] = Field(default_factory=list)  # Matches ANY of these
    search: str | None = None
    order_by: OrderBy | None = None
    order_direction: SortDirection | None = None


# =============================================================================
# Derived records
# =============================================================================


class ProjectReference(BaseModel):
    """Where a media asset is used: a project, and optionally a section."""

    project_id: str
    project_title: str
    section_id: str | None = None
    section_title: str | None = None


class BulkUpdateFailure(BaseModel):
    project_id: str
    errors: list[str]


class BulkUpdateResult(BaseModel):
    """
    Outcome of a bulk update. Not all-or-nothing: every project in
    `updated` was persisted even when `failures` is non-empty.
    """

    updated: list[UnifiedProject] = Field(default_factory=list)
    failures: list[BulkUpdateFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class SimpleEditorState(BaseModel):
    """The fields an author edits in simple mode."""

    title: str
    role: str = ""
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    type: ProjectType = ProjectType.PROJECT
    featured: bool = False
    content: ProjectContent = Field(default_factory=ProjectContent)
    images: list[ProjectImage] = Field(default_factory=list)
    seo: ProjectSEO = Field(default_factory=ProjectSEO)

    @classmethod
    def from_project(cls, project: UnifiedProject) -> SimpleEditorState:
        return cls(
            title=project.title,
            role=project.role,
            summary=project.summary,
            tags=list(project.tags),
            type=project.type,
            featured=project.featured,
            content=project.content.model_copy(deep=True),
            images=[img.model_copy() for img in project.images],
            seo=project.seo.model_copy(deep=True),
        )
