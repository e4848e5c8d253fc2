"""Resources - versioned, read-only data that services consume."""

from folio.resources.base import Resource, ResourceError
from folio.resources.project_template import (
    ProjectTemplate,
    SectionBlueprint,
    TemplateCategory,
)
from folio.resources.catalog import TemplateCatalog, CatalogError

__all__ = [
    "Resource",
    "ResourceError",
    "ProjectTemplate",
    "SectionBlueprint",
    "TemplateCategory",
    "TemplateCatalog",
    "CatalogError",
]
