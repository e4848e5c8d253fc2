"""
Runtime settings.

Every field can be set as FOLIO_<NAME> in the environment or in a .env
file in the working directory.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings for the store, the template catalog and editors."""

    log_level: str = "INFO"

    # --- persistence ---------------------------------------------------------

    # "memory" keeps projects in-process; "json" writes them to
    # data_dir/projects_file after every commit
    storage_backend: Literal["memory", "json"] = "memory"
    data_dir: str = "./data"
    projects_file: str = "projects.json"

    # --- templates -----------------------------------------------------------

    # Empty means the templates shipped with the package
    templates_dir: str = ""

    # --- editing -------------------------------------------------------------

    # Seconds between background saves; 0 turns autosave off
    autosave_interval_seconds: float = 30.0

    @property
    def use_file_storage(self) -> bool:
        return self.storage_backend == "json"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "FOLIO_"


@lru_cache
def get_settings() -> Settings:
    """Settings read once per process; call `get_settings.cache_clear()` to re-read."""
    return Settings()
