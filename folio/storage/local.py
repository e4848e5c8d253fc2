"""
Local storage implementations.

These are in-memory or filesystem-based implementations
that work without any external services.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from folio.config import Settings, get_settings
from folio.core.errors import StorageError
from folio.core.models import UnifiedProject
from folio.storage.base import ProjectBackend

logger = logging.getLogger(__name__)

_projects_adapter = TypeAdapter(list[UnifiedProject])


def dump_projects(projects: list[UnifiedProject]) -> bytes:
    """Serialize a project collection to JSON."""
    return _projects_adapter.dump_json(projects, indent=2)


def parse_projects(raw: str | bytes) -> list[UnifiedProject]:
    """Parse a JSON project collection."""
    return _projects_adapter.validate_json(raw)


# =============================================================================
# In-Memory Backend
# =============================================================================


class InMemoryProjectBackend(ProjectBackend):
    """
    Keeps a serialized snapshot in memory.

    Snapshots are plain data, so nothing the store does to its own
    objects leaks into "persisted" state.
    """

    def __init__(self, projects: list[UnifiedProject] | None = None):
        self._snapshot: list[dict[str, Any]] = []
        self.save_count = 0
        if projects:
            self._snapshot = _projects_adapter.dump_python(projects, mode="json")

    async def load(self) -> list[UnifiedProject]:
        return _projects_adapter.validate_python(self._snapshot)

    async def save(self, projects: list[UnifiedProject]) -> None:
        self._snapshot = _projects_adapter.dump_python(projects, mode="json")
        self.save_count += 1


# =============================================================================
# JSON File Backend
# =============================================================================


class JsonFileProjectBackend(ProjectBackend):
    """Stores the collection in a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def load(self) -> list[UnifiedProject]:
        if not self.path.exists():
            return []
        try:
            return parse_projects(self.path.read_bytes())
        except (OSError, PydanticValidationError) as e:
            raise StorageError(f"Failed to load projects from {self.path}: {e}") from e

    async def save(self, projects: list[UnifiedProject]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = dump_projects(projects)

        # Write to a sibling temp file, then swap it in
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Failed to save projects to {self.path}: {e}") from e


# =============================================================================
# Factory
# =============================================================================


def create_backend(settings: Settings | None = None) -> ProjectBackend:
    """Create the backend selected in settings."""
    settings = settings or get_settings()
    if settings.use_file_storage:
        path = Path(settings.data_dir) / settings.projects_file
        logger.info(f"Using JSON project storage at {path}")
        return JsonFileProjectBackend(path)
    return InMemoryProjectBackend()
