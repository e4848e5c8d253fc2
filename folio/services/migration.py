"""
Migration of project records saved before projects were unified.

Two older shapes are still around in exported data:

- `LegacyProject`: flat content and an image list, no sections. Its
  sections are generated: a hero from the basic info, then the
  synchronized sections for the content.
- `PortfolioProject`: template sections only, no flat content. Its flat
  content and image list are extracted from the sections.

`to_legacy_project` goes the other way, for readers that only know the
flat shape.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from folio.core.errors import ValidationError, pydantic_messages
from folio.core.models import (
    ProjectContent,
    ProjectImage,
    ProjectSection,
    ProjectSEO,
    ProjectStatus,
    ProjectType,
    SectionKind,
    SectionLayout,
    UnifiedProject,
)
from folio.core.utils import generate_id, generate_slug, unique_slug, utc_now
from folio.services.sync import content_from_sections, sections_from_content

logger = logging.getLogger(__name__)


class LegacyProject(BaseModel):
    """A flat project from before sections existed."""

    id: str = Field(default_factory=lambda: generate_id("project"))
    title: str
    role: str = ""
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    type: ProjectType = ProjectType.PROJECT
    featured: bool = False
    content: ProjectContent = Field(default_factory=ProjectContent)
    images: list[ProjectImage] = Field(default_factory=list)
    seo: ProjectSEO = Field(default_factory=ProjectSEO)
    status: ProjectStatus = ProjectStatus.DRAFT
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    published_at: datetime | None = None


class PortfolioProject(BaseModel):
    """A template-built project that only has sections."""

    id: str = Field(default_factory=lambda: generate_id("project"))
    title: str
    slug: str = ""
    role: str = ""
    summary: str = ""
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    template_id: str | None = None
    sections: list[ProjectSection] = Field(default_factory=list)
    seo: ProjectSEO = Field(default_factory=ProjectSEO)
    status: ProjectStatus = ProjectStatus.DRAFT
    order_index: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    published_at: datetime | None = None


OldProject = Union[LegacyProject, PortfolioProject]


def hero_section(project: LegacyProject) -> ProjectSection:
    """The opening section generated for a flat project."""
    return ProjectSection(
        id="hero",
        kind=SectionKind.HERO,
        title=project.title,
        content={
            "title": project.title,
            "subtitle": project.role,
            "description": project.summary,
        },
        layout=SectionLayout.FULL_WIDTH,
    )


def migrate_legacy_project(project: LegacyProject) -> UnifiedProject:
    sections = sections_from_content(project.content, project.images, [hero_section(project)])

    return UnifiedProject(
        id=project.id,
        slug=generate_slug(project.title),
        title=project.title,
        role=project.role,
        summary=project.summary,
        tags=list(project.tags),
        type=project.type,
        featured=project.featured,
        template_id=None,
        content=project.content.model_copy(deep=True),
        images=[img.model_copy() for img in project.images],
        sections=sections,
        seo=project.seo.model_copy(deep=True),
        status=project.status,
        created_at=project.created_at,
        updated_at=project.updated_at,
        published_at=project.published_at,
    )


def migrate_portfolio_project(project: PortfolioProject) -> UnifiedProject:
    """Sections are kept as they are; content and images are read out of them."""
    content, images = content_from_sections(project.sections)
    sections = sorted(project.sections, key=lambda s: s.order)

    return UnifiedProject(
        id=project.id,
        slug=project.slug or generate_slug(project.title),
        title=project.title,
        role=project.role,
        summary=project.summary,
        tags=list(project.tags),
        type=ProjectType.CASE_STUDY,
        featured=project.featured,
        template_id=project.template_id,
        content=content,
        images=images,
        sections=[s.model_copy(deep=True) for s in sections],
        seo=project.seo.model_copy(deep=True),
        status=project.status,
        order_index=project.order_index,
        created_at=project.created_at,
        updated_at=project.updated_at,
        published_at=project.published_at,
    )


def to_legacy_project(project: UnifiedProject) -> LegacyProject:
    """Drop the sections and template link; keep everything a flat reader knows."""
    return LegacyProject.model_validate(
        project.model_dump(include=set(LegacyProject.model_fields))
    )


def parse_old_project(record: dict[str, Any] | OldProject) -> OldProject:
    """A record with a `sections` key is a portfolio project; anything else is legacy."""
    if isinstance(record, (LegacyProject, PortfolioProject)):
        return record
    if "sections" in record:
        return PortfolioProject.model_validate(record)
    return LegacyProject.model_validate(record)


def migrate_project(record: dict[str, Any] | OldProject) -> UnifiedProject:
    old = parse_old_project(record)
    if isinstance(old, PortfolioProject):
        return migrate_portfolio_project(old)
    return migrate_legacy_project(old)


def migrate_projects(
    records: Iterable[dict[str, Any] | OldProject],
    taken_slugs: Iterable[str] = (),
) -> list[UnifiedProject]:
    """
    Migrate a batch of old records.

    Slugs are made unique across the batch and against `taken_slugs`
    ("case-study", "case-study-2", ...). Records whose slug comes out
    empty get "project".

    Raises:
        ValidationError: One or more records could not be parsed; every
            problem is listed, prefixed with the record's position
    """
    taken = set(taken_slugs)
    migrated: list[UnifiedProject] = []
    errors: list[str] = []

    for position, record in enumerate(records):
        try:
            project = migrate_project(record)
        except PydanticValidationError as e:
            errors.extend(f"record {position}: {msg}" for msg in pydantic_messages(e))
            continue
        project.slug = unique_slug(project.slug or "project", taken)
        taken.add(project.slug)
        migrated.append(project)

    if errors:
        raise ValidationError(errors)

    logger.info(f"Migrated {len(migrated)} old project records")
    return migrated
