"""
Unified Project Editor - the controller behind the project editing screen.

An editor session works on a copy of one project. In SIMPLE mode the
author edits flat fields (`simple_state`); in ADVANCED mode they edit the
ordered sections of the working project.

Switching SIMPLE -> ADVANCED runs the content synchronizer and commits
its output into the working project, so the sections always show the
latest simple edits. Going back does NOT recompute the simple fields;
`pull_from_sections()` is the explicit way to do that.

Saving:
- `save()` / `publish()` validate first and raise on failure, keeping
  the messages on `editor.errors` for display.
- Autosave runs in a background task every `autosave_interval` seconds
  while there are unsaved changes. Its failures are only logged.
- Autosave and an explicit save are not serialized: the later write
  wins. Edits made while a save is in flight stay marked unsaved.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime
from typing import Any

from folio.config import get_settings
from folio.core.errors import ValidationError
from folio.core.models import (
    EditorMode,
    ProjectContent,
    ProjectImage,
    ProjectSection,
    ProjectUpdate,
    SectionKind,
    SimpleEditorState,
    UnifiedProject,
)
from folio.services import sync
from folio.services.store import ProjectStore
from folio.services.validation import validate_project

logger = logging.getLogger(__name__)

# Simple-mode fields settable through update_field
_BASIC_FIELDS = frozenset({"title", "role", "summary", "tags", "type", "featured", "seo"})


class ProjectEditor:
    """
    One editing session on one project.

    Usage:
        async with ProjectEditor(store, project) as editor:
            editor.update_content(challenge="Legacy checkout was slow")
            editor.switch_mode(EditorMode.ADVANCED)
            await editor.save()
    """

    def __init__(
        self,
        store: ProjectStore,
        project: UnifiedProject,
        autosave_interval: float | None = None,
    ):
        self.store = store
        self.project = project.model_copy(deep=True)
        self.simple_state = SimpleEditorState.from_project(project)
        self.mode = EditorMode.SIMPLE
        self.errors: list[str] = []
        self.last_saved_at: datetime | None = None

        if autosave_interval is None:
            autosave_interval = get_settings().autosave_interval_seconds
        self.autosave_interval = autosave_interval

        # Bumped on every edit; has_changes compares it to the last saved one
        self._generation = 0
        self._saved_generation = 0

        self._autosave_task: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None

    @property
    def project_id(self) -> str:
        return self.project.id

    @property
    def has_changes(self) -> bool:
        return self._generation != self._saved_generation

    def _touch(self) -> None:
        self._generation += 1

    # =========================================================================
    # Simple mode edits
    # =========================================================================

    def update_field(self, name: str, value: Any) -> None:
        """Set a basic field (title, role, summary, tags, type, featured, seo)."""
        if name not in _BASIC_FIELDS:
            raise ValueError(f"Unknown editor field: {name}")
        data = self.simple_state.model_dump()
        data[name] = value
        self.simple_state = SimpleEditorState.model_validate(data)
        self._touch()

    def update_content(self, **changes: Any) -> None:
        """Set one or more flat content fields."""
        data = self.simple_state.content.model_dump()
        data.update(changes)
        self.simple_state.content = ProjectContent.model_validate(data)
        self._touch()

    def set_images(self, images: list[ProjectImage]) -> None:
        """Replace the flat image list."""
        self.simple_state.images = [img.model_copy() for img in images]
        self._touch()

    def add_image(self, image: ProjectImage) -> None:
        order = max((img.order for img in self.simple_state.images), default=-1) + 1
        self.simple_state.images.append(image.model_copy(update={"order": order}))
        self._touch()

    def remove_image(self, image_id: str) -> None:
        self.simple_state.images = [img for img in self.simple_state.images if img.id != image_id]
        self._touch()

    # =========================================================================
    # Advanced mode edits
    # =========================================================================

    def _set_sections(self, sections: list[ProjectSection]) -> None:
        self.project.sections = sections
        self._touch()

    def set_sections(self, sections: list[ProjectSection]) -> None:
        """Replace the section list."""
        self._set_sections([s.model_copy(deep=True) for s in sections])

    def add_section(self, kind: SectionKind, title: str | None = None) -> ProjectSection:
        self._set_sections(sync.add_section(self.project.sections, kind, title))
        return self.project.sections[-1]

    def remove_section(self, section_id: str) -> None:
        self._set_sections(sync.remove_section(self.project.sections, section_id))

    def move_section(self, from_index: int, to_index: int) -> None:
        self._set_sections(sync.reorder_sections(self.project.sections, from_index, to_index))

    def duplicate_section(self, section_id: str) -> None:
        self._set_sections(sync.duplicate_section(self.project.sections, section_id))

    def update_section(self, section_id: str, **changes: Any) -> ProjectSection:
        """Change fields of one section (e.g. title, content, media, layout)."""
        sections = []
        updated = None
        for section in self.project.sections:
            if section.id == section_id:
                data = section.model_dump()
                data.update(changes)
                section = updated = ProjectSection.model_validate(data)
            sections.append(section)

        if updated is None:
            raise KeyError(f"Section not found: {section_id}")
        self._set_sections(sections)
        return updated

    # =========================================================================
    # Modes
    # =========================================================================

    def switch_mode(self, mode: EditorMode) -> None:
        """
        Change the editing view.

        Entering ADVANCED from SIMPLE first writes the simple content into
        the sections. Leaving ADVANCED changes nothing but the view.
        """
        mode = EditorMode(mode)
        if mode == self.mode:
            return

        if mode == EditorMode.ADVANCED:
            sections = sync.sections_from_content(
                self.simple_state.content,
                self.simple_state.images,
                self.project.sections,
            )
            if sections != self.project.sections:
                self._set_sections(sections)

        logger.debug(f"Editor for {self.project_id}: {self.mode.value} -> {mode.value}")
        self.mode = mode

    def pull_from_sections(self) -> None:
        """Overwrite the simple content and images with what the sections hold."""
        content, images = sync.content_from_sections(self.project.sections)
        self.simple_state.content = content
        self.simple_state.images = images
        self._touch()

    def build_project(self) -> UnifiedProject:
        """
        The project as it would be saved right now.

        In SIMPLE mode the sections are re-synchronized from the simple
        content. In ADVANCED mode the sections are taken as edited.
        """
        state = self.simple_state
        sections = self.project.sections
        if self.mode == EditorMode.SIMPLE:
            sections = sync.sections_from_content(state.content, state.images, sections)

        return self.project.model_copy(deep=True, update={
            "title": state.title,
            "role": state.role,
            "summary": state.summary,
            "tags": list(state.tags),
            "type": state.type,
            "featured": state.featured,
            "seo": state.seo.model_copy(deep=True),
            "content": state.content.model_copy(deep=True),
            "images": [img.model_copy() for img in state.images],
            "sections": [s.model_copy(deep=True) for s in sections],
        })

    # =========================================================================
    # Persistence
    # =========================================================================

    async def _write(self, coro) -> UnifiedProject:
        # A started write always runs to completion, even if we are cancelled
        self._inflight = asyncio.ensure_future(coro)
        return await asyncio.shield(self._inflight)

    def _saved(self, saved: UnifiedProject, generation: int) -> UnifiedProject:
        if self._generation == generation:
            self.project = saved.model_copy(deep=True)
        else:
            # Keep section edits made while the write was in flight
            self.project = saved.model_copy(deep=True, update={"sections": self.project.sections})
        self._saved_generation = generation
        self.last_saved_at = saved.updated_at
        return saved

    async def save(self, autosave: bool = False) -> UnifiedProject:
        """
        Validate and persist the working project.

        Raises:
            ValidationError: The project is not valid (also kept on `errors`
                unless this is an autosave)
        """
        generation = self._generation
        candidate = self.build_project()

        try:
            errors = validate_project(candidate)
            if errors:
                raise ValidationError(errors)
            saved = await self._write(
                self.store.update(self.project_id, ProjectUpdate.from_project(candidate))
            )
        except ValidationError as e:
            if not autosave:
                self.errors = e.errors
            raise

        self.errors = []
        logger.info(f"{'Autosaved' if autosave else 'Saved'} project {self.project_id}")
        return self._saved(saved, generation)

    async def publish(self) -> UnifiedProject:
        """Validate, mark published and persist."""
        generation = self._generation
        candidate = self.build_project()

        try:
            saved = await self._write(self.store.publish(self.project_id, candidate))
        except ValidationError as e:
            self.errors = e.errors
            raise

        self.errors = []
        return self._saved(saved, generation)

    async def reload(self) -> None:
        """Discard unsaved edits and start again from the stored project."""
        project = await self.store.get(self.project_id)
        self.project = project
        self.simple_state = SimpleEditorState.from_project(project)
        self.errors = []
        self._saved_generation = self._generation

    # =========================================================================
    # Autosave
    # =========================================================================

    async def autosave(self) -> bool:
        """
        Save if there are unsaved changes, never raising.

        Returns:
            True if a save happened and succeeded
        """
        if not self.has_changes:
            return False
        try:
            await self.save(autosave=True)
        except Exception as e:
            logger.warning(f"Autosave failed for project {self.project_id}: {e}")
            return False
        return True

    async def _autosave_loop(self) -> None:
        while True:
            await asyncio.sleep(self.autosave_interval)
            await self.autosave()

    def start_autosave(self) -> None:
        """Start the background autosave task (no-op if the interval is <= 0)."""
        if self._autosave_task is not None or self.autosave_interval <= 0:
            return
        self._autosave_task = asyncio.create_task(self._autosave_loop())
        logger.debug(f"Autosave every {self.autosave_interval}s for project {self.project_id}")

    async def stop_autosave(self) -> None:
        """Stop autosaving. A write already under way is allowed to finish."""
        task, self._autosave_task = self._autosave_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self._inflight is not None and not self._inflight.done():
            await asyncio.wait([self._inflight])

    async def __aenter__(self) -> ProjectEditor:
        self.start_autosave()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop_autosave()
