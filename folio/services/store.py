"""
Project Store - the keyed collection of Unified Projects.

The store is the only writer of persisted project state. Every mutation
follows the same path:

1. Build the candidate record(s) from the current snapshot
2. Validate; on failure raise and leave everything untouched
3. Save the whole collection through the backend
4. Only then swap the in-memory snapshot and rebuild the media index
5. Announce the change on the event bus

Single writer: there is no locking. Two writes racing on the same
project resolve as last-write-wins; pass `expected_updated_at` to
`update` to turn that into a ConflictError instead.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from folio.config_loader import load_template_catalog
from folio.core.errors import (
    ConflictError,
    FolioError,
    NotFoundError,
    ValidationError,
    pydantic_messages,
)
from folio.core.events import (
    COLLECTION,
    EventBus,
    ProjectEventType,
    get_event_bus,
    project_event,
)
from folio.core.models import (
    BulkUpdateFailure,
    BulkUpdateResult,
    CreateProjectData,
    ProjectFilters,
    ProjectReference,
    ProjectStatus,
    ProjectUpdate,
    UnifiedProject,
)
from folio.core.utils import generate_id, generate_slug, unique_slug, utc_now
from folio.resources.catalog import TemplateCatalog
from folio.services.media_usage import MediaUsageIndex
from folio.services.migration import migrate_projects
from folio.services.query import project_stats, query_projects
from folio.services.validation import ensure_valid, validate_project
from folio.storage.base import ProjectBackend
from folio.storage.local import InMemoryProjectBackend, dump_projects, parse_projects

logger = logging.getLogger(__name__)

# Fields a partial update may never change
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class ProjectStore:
    """
    CRUD, duplication, ordering and publishing for projects.

    All returned projects are copies; changing them does not change the
    store until they are passed back through `update`.
    """

    def __init__(
        self,
        backend: ProjectBackend | None = None,
        catalog: TemplateCatalog | None = None,
        event_bus: EventBus | None = None,
    ):
        self.backend = backend if backend is not None else InMemoryProjectBackend()
        self.catalog = catalog if catalog is not None else load_template_catalog()
        self.event_bus = event_bus if event_bus is not None else get_event_bus()
        self.media_usage = MediaUsageIndex()

        self._projects: dict[str, UnifiedProject] = {}
        self._loaded = False

    # =========================================================================
    # Snapshot handling
    # =========================================================================

    async def load(self) -> None:
        """(Re)load the collection from the backend."""
        projects = await self.backend.load()
        self._projects = {p.id: p for p in projects}
        self.media_usage.rebuild(projects)
        self._loaded = True
        logger.debug(f"Loaded {len(projects)} projects")

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    async def _commit(self, projects: dict[str, UnifiedProject]) -> None:
        """Persist a new snapshot, then make it current."""
        await self.backend.save(list(projects.values()))
        self._projects = projects
        self.media_usage.rebuild(list(projects.values()))

    def _require(self, project_id: str) -> UnifiedProject:
        if project_id not in self._projects:
            raise NotFoundError(project_id)
        return self._projects[project_id]

    def _slug_errors(self, project: UnifiedProject) -> list[str]:
        for other in self._projects.values():
            if other.id != project.id and other.slug == project.slug:
                return [f"Slug '{project.slug}' is already in use"]
        return []

    def _check(self, project: UnifiedProject) -> None:
        errors = validate_project(project) + self._slug_errors(project)
        if errors:
            raise ValidationError(errors)

    def _taken_slugs(self) -> set[str]:
        return {p.slug for p in self._projects.values()}

    # =========================================================================
    # Reads
    # =========================================================================

    async def get(self, project_id: str) -> UnifiedProject:
        """Get a project by ID."""
        await self._ensure_loaded()
        return self._require(project_id).model_copy(deep=True)

    async def get_by_slug(self, slug: str) -> UnifiedProject:
        """Get a project by its slug."""
        await self._ensure_loaded()
        for project in self._projects.values():
            if project.slug == slug:
                return project.model_copy(deep=True)
        raise NotFoundError(slug)

    async def list_projects(self, filters: ProjectFilters | None = None) -> list[UnifiedProject]:
        """Projects matching `filters`, most recently updated first by default."""
        await self._ensure_loaded()
        return [p.model_copy(deep=True) for p in query_projects(list(self._projects.values()), filters)]

    async def stats(self) -> dict[str, Any]:
        await self._ensure_loaded()
        return project_stats(list(self._projects.values()))

    async def get_media_usage(self, media_id: str) -> list[ProjectReference]:
        """Where a media asset is referenced."""
        await self._ensure_loaded()
        return self.media_usage.get_usage(media_id)

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(self, data: CreateProjectData | dict[str, Any]) -> UnifiedProject:
        """
        Create a draft project.

        The slug is derived from the title when not given (with a numeric
        suffix if already taken). When `template_id` is set the sections
        are seeded from that template.
        """
        await self._ensure_loaded()
        if not isinstance(data, CreateProjectData):
            data = CreateProjectData.model_validate(data)

        sections = self.catalog.instantiate(data.template_id) if data.template_id else []

        if data.slug:
            slug = data.slug
        else:
            slug = unique_slug(generate_slug(data.title) or "project", self._taken_slugs())

        now = utc_now()
        project = UnifiedProject(
            id=generate_id("project"),
            slug=slug,
            title=data.title,
            role=data.role,
            summary=data.summary,
            tags=data.tags,
            type=data.type,
            template_id=data.template_id,
            sections=sections,
            status=ProjectStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )
        self._check(project)

        await self._commit({**self._projects, project.id: project})
        logger.info(f"Created project {project.id} ({project.slug})")
        await self.event_bus.publish(project_event(
            ProjectEventType.CREATED, project.id, slug=project.slug, template_id=project.template_id,
        ))
        return project.model_copy(deep=True)

    async def update(
        self,
        project_id: str,
        partial: ProjectUpdate | dict[str, Any],
        expected_updated_at: datetime | None = None,
    ) -> UnifiedProject:
        """
        Merge `partial` into a project.

        Only keys present in `partial` are replaced; lists are replaced
        wholesale. The merged record is validated before anything is
        written, so a failure leaves the stored project unchanged.
        """
        await self._ensure_loaded()
        current = self._require(project_id)

        if expected_updated_at is not None and expected_updated_at != current.updated_at:
            raise ConflictError(project_id, expected_updated_at, current.updated_at)

        changes = partial.changes() if isinstance(partial, ProjectUpdate) else dict(partial)
        for name in IMMUTABLE_FIELDS & changes.keys():
            logger.warning(f"Ignoring attempt to change {name} of project {project_id}")
            del changes[name]

        data = current.model_dump()
        data.update(changes)
        data["updated_at"] = utc_now()
        try:
            merged = UnifiedProject.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(pydantic_messages(e)) from e
        self._check(merged)

        await self._commit({**self._projects, project_id: merged})
        logger.debug(f"Updated project {project_id}: {sorted(changes)}")
        await self.event_bus.publish(
            project_event(ProjectEventType.UPDATED, project_id, fields=sorted(changes))
        )
        return merged.model_copy(deep=True)

    async def delete(self, project_id: str) -> None:
        """
        Delete a project.

        Deletion is never blocked by media usage; the index only informs
        media deletion.
        """
        await self._ensure_loaded()
        self._require(project_id)

        remaining = {pid: p for pid, p in self._projects.items() if pid != project_id}
        await self._commit(remaining)
        logger.info(f"Deleted project {project_id}")
        await self.event_bus.publish(project_event(ProjectEventType.DELETED, project_id))

    async def duplicate(self, project_id: str) -> UnifiedProject:
        """Copy a project as a new, unfeatured draft."""
        await self._ensure_loaded()
        original = self._require(project_id)

        now = utc_now()
        copy = original.model_copy(deep=True, update={
            "id": generate_id("project"),
            "title": f"{original.title} (Copy)",
            "slug": unique_slug(f"{original.slug}-copy", self._taken_slugs()),
            "status": ProjectStatus.DRAFT,
            "featured": False,
            "published_at": None,
            "created_at": now,
            "updated_at": now,
        })
        self._check(copy)

        await self._commit({**self._projects, copy.id: copy})
        logger.info(f"Duplicated project {project_id} as {copy.id}")
        await self.event_bus.publish(
            project_event(ProjectEventType.DUPLICATED, copy.id, source_id=project_id)
        )
        return copy.model_copy(deep=True)

    async def reorder(self, ids_in_order: list[str]) -> None:
        """
        Set `order_index` to each listed project's position in the list.
        Projects not listed keep their current position.
        """
        await self._ensure_loaded()
        positions: dict[str, int] = {}
        for position, project_id in enumerate(ids_in_order):
            if project_id in self._projects:
                positions.setdefault(project_id, position)

        reordered = {
            pid: p.model_copy(update={"order_index": positions[pid]}) if pid in positions else p
            for pid, p in self._projects.items()
        }
        await self._commit(reordered)
        await self.event_bus.publish(
            project_event(ProjectEventType.REORDERED, COLLECTION, ids=list(positions))
        )

    async def bulk_update(
        self,
        ids: list[str],
        partial: ProjectUpdate | dict[str, Any],
    ) -> BulkUpdateResult:
        """
        Apply the same partial update to several projects.

        NOT atomic: each project is validated and saved on its own. A
        project that fails is reported in `failures` and does not undo
        the ones that succeeded.
        """
        result = BulkUpdateResult()
        for project_id in ids:
            try:
                result.updated.append(await self.update(project_id, partial))
            except ValidationError as e:
                result.failures.append(BulkUpdateFailure(project_id=project_id, errors=e.errors))
            except FolioError as e:
                result.failures.append(BulkUpdateFailure(project_id=project_id, errors=[str(e)]))

        if result.failures:
            logger.warning(
                f"Bulk update: {len(result.updated)} updated, {len(result.failures)} failed"
            )
        return result

    # =========================================================================
    # Publishing
    # =========================================================================

    def prepare_for_publish(self, project: UnifiedProject) -> UnifiedProject:
        """
        Validate and return a published copy of `project`.

        `published_at` is only set the first time. Raises ValidationError
        and leaves `project` as it was if it is not publishable.
        """
        ensure_valid(project)
        now = utc_now()
        return project.model_copy(deep=True, update={
            "status": ProjectStatus.PUBLISHED,
            "published_at": project.published_at or now,
            "updated_at": now,
        })

    async def publish(
        self,
        project_id: str,
        project: UnifiedProject | None = None,
    ) -> UnifiedProject:
        """
        Publish a stored project.

        Pass `project` to publish an edited version of it (e.g. the
        editor's working copy) in the same write.
        """
        await self._ensure_loaded()
        current = self._require(project_id)
        published = self.prepare_for_publish(project if project is not None else current)

        saved = await self.update(project_id, ProjectUpdate.from_project(published))
        logger.info(f"Published project {project_id}")
        await self.event_bus.publish(
            project_event(ProjectEventType.PUBLISHED, project_id, slug=saved.slug)
        )
        return saved

    # =========================================================================
    # Import / export
    # =========================================================================

    async def export_json(self) -> str:
        """The whole collection as JSON."""
        await self._ensure_loaded()
        return dump_projects(list(self._projects.values())).decode()

    async def import_json(self, raw: str | bytes) -> int:
        """
        Replace the collection with the projects in `raw`.

        Every project is validated first; nothing is replaced unless all
        of them pass.

        Returns:
            Number of projects imported
        """
        await self._ensure_loaded()
        try:
            projects = parse_projects(raw)
        except PydanticValidationError as e:
            raise ValidationError(pydantic_messages(e)) from e

        errors: list[str] = []
        seen_slugs: set[str] = set()
        for project in projects:
            errors.extend(f"{project.id}: {msg}" for msg in validate_project(project))
            if project.slug in seen_slugs:
                errors.append(f"{project.id}: Slug '{project.slug}' is already in use")
            seen_slugs.add(project.slug)
        if errors:
            raise ValidationError(errors)

        await self._commit({p.id: p for p in projects})
        logger.info(f"Imported {len(projects)} projects")
        await self.event_bus.publish(
            project_event(ProjectEventType.IMPORTED, COLLECTION, count=len(projects))
        )
        return len(projects)

    async def import_legacy(self, records: Iterable[dict[str, Any]]) -> list[UnifiedProject]:
        """
        Migrate old-format records and add them to the collection.

        Existing projects stay. Nothing is added unless every record
        migrates and validates.
        """
        await self._ensure_loaded()
        projects = migrate_projects(records, taken_slugs=self._taken_slugs())

        errors: list[str] = []
        seen_ids: set[str] = set()
        for project in projects:
            if project.id in self._projects or project.id in seen_ids:
                errors.append(f"{project.id}: Project already exists")
            seen_ids.add(project.id)
            errors.extend(f"{project.id}: {msg}" for msg in validate_project(project))
        if errors:
            raise ValidationError(errors)

        await self._commit({**self._projects, **{p.id: p for p in projects}})
        logger.info(f"Imported {len(projects)} legacy projects")
        await self.event_bus.publish(
            project_event(ProjectEventType.IMPORTED, COLLECTION, count=len(projects), legacy=True)
        )
        return [p.model_copy(deep=True) for p in projects]

    async def reset(self) -> None:
        """Remove every project."""
        await self._ensure_loaded()
        await self._commit({})
