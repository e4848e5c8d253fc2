"""
Change notifications for the folio core.

Every committed store write is announced as an event. Consumers such as a
static-site rebuild or a search indexer subscribe with an fnmatch pattern
("project.*", "project.published") and optionally a single project id,
instead of being wired into the store.
"""

from __future__ import annotations

import fnmatch
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable

from folio.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)

EventHandler = Callable[["Event"], Awaitable[None]]

# project_id of events about the collection as a whole (reorder, import)
COLLECTION = "*"


class ProjectEventType(str, Enum):
    """Everything the project store announces."""

    CREATED = "project.created"
    UPDATED = "project.updated"
    DELETED = "project.deleted"
    DUPLICATED = "project.duplicated"
    REORDERED = "project.reordered"
    PUBLISHED = "project.published"
    IMPORTED = "project.imported"


@dataclass(frozen=True)
class Event:
    """Something that happened to a project, after it was persisted."""

    event_type: str
    project_id: str
    payload: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: generate_id("event"))
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_type": self.event_type,
            "project_id": self.project_id,
            "payload": self.payload,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Subscription:
    pattern: str
    handler: EventHandler
    project_id: str | None = None

    def matches(self, event: Event) -> bool:
        if self.project_id is not None and event.project_id != self.project_id:
            return False
        return fnmatch.fnmatch(event.event_type, self.pattern)


class EventBus:
    """
    In-process publish/subscribe with a bounded history.

    Handlers are awaited one after another in subscription order. A
    handler that raises is logged; the remaining handlers still run and
    the publisher never sees the error.
    """

    def __init__(self, max_history: int = 1000):
        self._subscriptions: list[Subscription] = []
        self._history: deque[Event] = deque(maxlen=max_history)

    def subscribe(
        self,
        pattern: str,
        handler: EventHandler,
        project_id: str | None = None,
    ) -> Subscription:
        """
        Call `handler` for events whose type matches `pattern`.

        Keep the returned subscription to unsubscribe later.
        """
        subscription = Subscription(pattern=pattern, handler=handler, project_id=project_id)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def publish(self, event: Event) -> None:
        self._history.append(event)

        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            try:
                await subscription.handler(event)
            except Exception:
                logger.exception(f"Handler for {event.event_type} ({event.project_id}) failed")

    def get_history(
        self,
        event_type: str | None = None,
        project_id: str | None = None,
        limit: int = 100,
    ) -> list[Event]:
        """Most recent events, oldest first, optionally filtered."""
        events = [
            e for e in self._history
            if (event_type is None or fnmatch.fnmatch(e.event_type, event_type))
            and (project_id is None or e.project_id == project_id)
        ]
        return events[-limit:]

    def clear_history(self) -> None:
        self._history.clear()


_default_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """The process-wide bus used when a store is not given one."""
    global _default_bus
    if _default_bus is None:
        _default_bus = EventBus()
    return _default_bus


def reset_event_bus() -> None:
    global _default_bus
    _default_bus = None


def project_event(event_type: ProjectEventType, project_id: str, **payload: Any) -> Event:
    return Event(event_type=event_type.value, project_id=project_id, payload=payload)
