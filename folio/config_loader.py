"""
Template catalog bootstrap.

Every `*.yaml` / `*.yml` file in the templates directory is one project
template. Files load in name order; a bad file stops the load.
"""

from __future__ import annotations

import logging
from pathlib import Path

from folio.config import get_settings
from folio.resources.catalog import TemplateCatalog
from folio.resources.project_template import ProjectTemplate

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "resources" / "templates"


class ConfigLoader:
    """Reads template files into a catalog."""

    def __init__(
        self,
        templates_dir: Path | str | None = None,
        catalog: TemplateCatalog | None = None,
    ):
        self.catalog = catalog if catalog is not None else TemplateCatalog()

        if templates_dir is None:
            templates_dir = get_settings().templates_dir or DEFAULT_TEMPLATES_DIR
        self.templates_dir = Path(templates_dir)

    def template_files(self) -> list[Path]:
        if not self.templates_dir.is_dir():
            return []
        return sorted(
            p for p in self.templates_dir.iterdir()
            if p.suffix in (".yaml", ".yml")
        )

    def load_all(self) -> int:
        """Register every template file; returns how many were loaded."""
        paths = self.template_files()
        if not paths:
            logger.warning(f"No template files in {self.templates_dir}")

        for path in paths:
            self.load_template(path)

        logger.info(f"Loaded {len(paths)} project templates from {self.templates_dir}")
        return len(paths)

    def load_template(self, path: Path | str) -> ProjectTemplate:
        """
        Raises:
            ResourceError: The file is malformed
            CatalogError: A template with the same id is already registered
        """
        template = ProjectTemplate.from_yaml(path)
        self.catalog.register(template)
        logger.debug(f"Registered template {template.id} from {path}")
        return template


def load_template_catalog(templates_dir: Path | str | None = None) -> TemplateCatalog:
    """A fresh catalog from `templates_dir`, the configured one, or the bundled set."""
    loader = ConfigLoader(templates_dir)
    loader.load_all()
    return loader.catalog
