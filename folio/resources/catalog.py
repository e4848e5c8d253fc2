"""
Template catalog.

The catalog is the read-only lookup the store goes through when a
project is created from a template.
"""

from __future__ import annotations

from folio.core.errors import TemplateNotFoundError
from folio.core.models import ProjectSection
from folio.resources.project_template import ProjectTemplate


class CatalogError(Exception):
    """Raised when the catalog is populated incorrectly."""
    pass


class TemplateCatalog:
    """A fixed set of named section layouts."""

    def __init__(self, templates: list[ProjectTemplate] | None = None):
        self._templates: dict[str, ProjectTemplate] = {}
        for template in templates or []:
            self.register(template)

    def register(self, template: ProjectTemplate) -> None:
        """Add a template. IDs must be unique."""
        if template.id in self._templates:
            raise CatalogError(f"Template '{template.id}' is already registered")
        self._templates[template.id] = template

    def list_templates(self) -> list[ProjectTemplate]:
        """All templates, ordered by ID."""
        return [self._templates[key] for key in sorted(self._templates)]

    def get_template(self, template_id: str) -> ProjectTemplate:
        """Get a template by ID."""
        if template_id not in self._templates:
            raise TemplateNotFoundError(template_id)
        return self._templates[template_id]

    def has_template(self, template_id: str) -> bool:
        return template_id in self._templates

    def instantiate(self, template_id: str) -> list[ProjectSection]:
        """Fresh sections for a new project created from `template_id`."""
        return self.get_template(template_id).instantiate()

    def __len__(self) -> int:
        return len(self._templates)
