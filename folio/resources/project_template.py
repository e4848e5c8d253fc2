"""
Project template resource.

Project templates are named layouts a project can be created from. A
template lists section blueprints (title + kind + layout, no content);
creating a project from a template copies those blueprints into the
project's sections.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from folio.core.models import ProjectSection, SectionKind, SectionLayout
from folio.resources.base import Resource


class TemplateCategory(str, Enum):
    """What a template is meant for."""

    CASE_STUDY = "case-study"
    PROJECT_SHOWCASE = "project-showcase"
    EXPERIMENT = "experiment"
    BLOG_POST = "blog-post"
    LANDING_PAGE = "landing-page"


@dataclass(frozen=True)
class SectionBlueprint:
    """A section slot in a template."""

    id: str
    title: str
    kind: SectionKind
    layout: SectionLayout = SectionLayout.DEFAULT
    order: int = 0

    def instantiate(self) -> ProjectSection:
        """Create a fresh, empty section from this blueprint."""
        return ProjectSection(
            id=self.id,
            kind=self.kind,
            title=self.title,
            layout=self.layout,
            order=self.order,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "kind": self.kind.value,
        }
        if self.layout != SectionLayout.DEFAULT:
            result["layout"] = self.layout.value
        if self.order:
            result["order"] = self.order
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SectionBlueprint:
        return cls(
            id=data["id"],
            title=data["title"],
            kind=SectionKind(data["kind"]),
            layout=SectionLayout(data.get("layout", "default")),
            order=data.get("order", 0),
        )


class ProjectTemplate(Resource):
    """
    An immutable catalog entry describing a project's section layout.
    """

    def __init__(
        self,
        resource_id: str,
        sections: list[SectionBlueprint],
        category: TemplateCategory = TemplateCategory.PROJECT_SHOWCASE,
        name: str | None = None,
        description: str = "",
        version: int = 1,
    ):
        self._resource_id = resource_id
        self._sections = tuple(sorted(sections, key=lambda s: s.order))
        self._category = category
        self._name = name or resource_id.replace("-", " ").title()
        self._description = description
        self._version = version

    @property
    def resource_id(self) -> str:
        return self._resource_id

    @property
    def id(self) -> str:
        return self._resource_id

    @property
    def version(self) -> int:
        return self._version

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def category(self) -> TemplateCategory:
        return self._category

    @property
    def sections(self) -> tuple[SectionBlueprint, ...]:
        """Section blueprints in order."""
        return self._sections

    def instantiate(self) -> list[ProjectSection]:
        """
        Build the sections for a new project.

        Every call returns new section objects, so projects created from
        the same template never share state.
        """
        return [blueprint.instantiate() for blueprint in self._sections]

    def problems(self) -> list[str]:
        seen: set[str] = set()
        problems = []
        for blueprint in self._sections:
            if blueprint.id in seen:
                problems.append(f"Duplicate section id '{blueprint.id}'")
            seen.add(blueprint.id)
        return problems

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self._resource_id,
            "name": self._name,
            "description": self._description,
            "category": self._category.value,
            "version": self._version,
            "sections": [s.to_dict() for s in self._sections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectTemplate:
        sections = [SectionBlueprint.from_dict(s) for s in data.get("sections", [])]

        return cls(
            resource_id=data["id"],
            sections=sections,
            category=TemplateCategory(data.get("category", "project-showcase")),
            name=data.get("name"),
            description=data.get("description", ""),
            version=data.get("version", 1),
        )
