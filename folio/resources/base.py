"""
Base class for file-backed resources.

A resource is read-only data loaded from a YAML file when the catalog is
built and looked up by id afterwards. Project templates are the only
kind so far.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import yaml


class ResourceError(Exception):
    """A resource file could not be read or is inconsistent."""
    pass


class Resource(ABC):
    """A versioned record, addressed by id, with a YAML form."""

    @property
    @abstractmethod
    def resource_id(self) -> str:
        pass

    @property
    def version(self) -> int:
        return 1

    @property
    def name(self) -> str:
        """Display name; derived from the id unless the file sets one."""
        return self.resource_id.replace("-", " ").title()

    @property
    def description(self) -> str:
        return ""

    @classmethod
    @abstractmethod
    def from_dict(cls, data: dict[str, Any]) -> Resource:
        pass

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        pass

    def problems(self) -> list[str]:
        """Consistency problems a loader should refuse (empty if none)."""
        return []

    @classmethod
    def from_yaml(cls, path: Path | str) -> Resource:
        """
        Load and check a resource file.

        Raises:
            ResourceError: The file is not a mapping, misses a required
                key, has an unknown value, or fails `problems()`
        """
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ResourceError(f"{path}: expected a mapping at the top level")
        try:
            resource = cls.from_dict(data)
        except (KeyError, ValueError) as e:
            raise ResourceError(f"{path}: {e!r}") from e

        problems = resource.problems()
        if problems:
            raise ResourceError(f"{path}: {'; '.join(problems)}")
        return resource

    def to_yaml(self, path: Path | str) -> None:
        with open(Path(path), "w") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False, allow_unicode=True)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.resource_id} v{self.version}>"
