"""Event storage collaborator.

EventStore is the interface the engine needs from persistence; the
in-memory implementation backs the API and the tests.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from calendar_core.events import TEMPLATE_FIELDS, BaseEvent
from calendar_core.exceptions import EventNotFoundError
from calendar_core.series import StorageCall


logger = logging.getLogger(__name__)

# Group updates write the shared template fields; every row keeps its own
# date and repeat rule.
GROUP_UPDATE_FIELDS = TEMPLATE_FIELDS - {"date", "repeat"}


class EventStore(ABC):
    """Storage operations the calendar engine relies on."""

    @abstractmethod
    def list_events(self) -> list[BaseEvent]:
        """Return every stored event."""

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[BaseEvent]:
        """Return one event, or None if it does not exist."""

    @abstractmethod
    def create_event(self, event: BaseEvent) -> BaseEvent:
        """Store a new event.

        Raises:
            ValueError: If an event with the same id already exists.
        """

    @abstractmethod
    def update_event(self, event_id: str, event: BaseEvent) -> BaseEvent:
        """Replace one event, keeping its id.

        Raises:
            EventNotFoundError: If the event does not exist.
        """

    @abstractmethod
    def update_group(self, group_id: str, event: BaseEvent) -> list[BaseEvent]:
        """Write shared template fields to every event of a repeat group.

        Raises:
            EventNotFoundError: If no event belongs to the group.
        """

    @abstractmethod
    def delete_event(self, event_id: str) -> BaseEvent:
        """Delete one event.

        Raises:
            EventNotFoundError: If the event does not exist.
        """

    @abstractmethod
    def delete_group(self, group_id: str) -> list[BaseEvent]:
        """Delete every event of a repeat group.

        Raises:
            EventNotFoundError: If no event belongs to the group.
        """

    def apply(self, call: StorageCall) -> Any:
        """Execute a StorageCall produced by a series mutation.

        Args:
            call: The storage call.

        Returns:
            Whatever the dispatched operation returns.

        Raises:
            ValueError: If the call is missing its target or payload.
        """
        if call.operation == "create_event":
            if call.payload is None:
                raise ValueError("create_event requires a payload")
            return self.create_event(call.payload)

        if not call.target:
            raise ValueError(f"{call.operation} requires a target")

        if call.operation == "delete_event":
            return self.delete_event(call.target)
        if call.operation == "delete_group":
            return self.delete_group(call.target)

        if call.payload is None:
            raise ValueError(f"{call.operation} requires a payload")
        if call.operation == "update_event":
            return self.update_event(call.target, call.payload)
        return self.update_group(call.target, call.payload)


class InMemoryEventStore(EventStore):
    """Thread-safe dictionary-backed event store.

    Args:
        events: Optional initial events.
    """

    def __init__(self, events: Iterable[BaseEvent] = ()):
        self._events: dict[str, BaseEvent] = {}
        self._lock = threading.RLock()
        for event in events:
            self.create_event(event)

    def list_events(self) -> list[BaseEvent]:
        with self._lock:
            return [event.model_copy(deep=True) for event in self._events.values()]

    def get_event(self, event_id: str) -> Optional[BaseEvent]:
        with self._lock:
            event = self._events.get(event_id)
            return event.model_copy(deep=True) if event else None

    def create_event(self, event: BaseEvent) -> BaseEvent:
        with self._lock:
            if event.id in self._events:
                raise ValueError(f"Event {event.id} already exists")
            stored = event.model_copy(deep=True)
            self._events[event.id] = stored
        logger.info(f"Created event {event.id} ({event.title})")
        return stored.model_copy(deep=True)

    def update_event(self, event_id: str, event: BaseEvent) -> BaseEvent:
        with self._lock:
            if event_id not in self._events:
                raise EventNotFoundError(event_id)
            stored = event.model_copy(update={"id": event_id}, deep=True)
            self._events[event_id] = stored
        logger.info(f"Updated event {event_id}")
        return stored.model_copy(deep=True)

    def update_group(self, group_id: str, event: BaseEvent) -> list[BaseEvent]:
        shared = event.model_dump(include=GROUP_UPDATE_FIELDS)
        with self._lock:
            members = self._group_members(group_id)
            updated = []
            for member in members:
                stored = member.model_copy(update=shared, deep=True)
                self._events[member.id] = stored
                updated.append(stored.model_copy(deep=True))
        logger.info(f"Updated {len(updated)} event(s) in repeat group {group_id}")
        return updated

    def delete_event(self, event_id: str) -> BaseEvent:
        with self._lock:
            if event_id not in self._events:
                raise EventNotFoundError(event_id)
            removed = self._events.pop(event_id)
        logger.info(f"Deleted event {event_id}")
        return removed

    def delete_group(self, group_id: str) -> list[BaseEvent]:
        with self._lock:
            members = self._group_members(group_id)
            for member in members:
                del self._events[member.id]
        logger.info(f"Deleted {len(members)} event(s) in repeat group {group_id}")
        return members

    def clear(self) -> None:
        """Remove every stored event."""
        with self._lock:
            self._events.clear()

    def _group_members(self, group_id: str) -> list[BaseEvent]:
        members = [e for e in self._events.values() if e.repeat.id == group_id]
        if not members:
            raise EventNotFoundError(group_id, kind="group")
        return members
