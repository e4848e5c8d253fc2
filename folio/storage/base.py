"""
Storage abstraction layer.

All persistence goes through this interface. This allows swapping
implementations (in-memory → JSON file → key-value service, etc.)
without changing the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from folio.core.models import UnifiedProject


class ProjectBackend(ABC):
    """
    Durable storage for the whole project collection.

    `save` must be atomic from the caller's point of view: it either
    fully replaces the persisted collection or leaves the previous one in
    place and raises.
    """

    @abstractmethod
    async def load(self) -> list[UnifiedProject]:
        """Load every persisted project."""
        pass

    @abstractmethod
    async def save(self, projects: list[UnifiedProject]) -> None:
        """Persist the full collection, replacing what was there."""
        pass
