"""
Storage abstractions.

- ProjectBackend → any durable medium that can load/save the collection
"""

from folio.storage.base import ProjectBackend
from folio.storage.local import (
    InMemoryProjectBackend,
    JsonFileProjectBackend,
    create_backend,
    dump_projects,
    parse_projects,
)

__all__ = [
    "ProjectBackend",
    "InMemoryProjectBackend",
    "JsonFileProjectBackend",
    "create_backend",
    "dump_projects",
    "parse_projects",
]
