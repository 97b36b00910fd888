"""Exceptions raised by the calendar store and service."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calendar_core.events import BaseEvent


class EventNotFoundError(ValueError):
    """Raised when an event, group or occurrence id does not resolve.

    Args:
        event_id: The id that could not be found.
        kind: What kind of id it was ("event", "group" or "occurrence").
    """

    def __init__(self, event_id: str, kind: str = "event"):
        self.event_id = event_id
        self.kind = kind
        super().__init__(f"{kind.capitalize()} {event_id} not found")


class EventOverlapError(ValueError):
    """Raised when a new event overlaps existing events on the same date.

    Args:
        overlapping: The existing events that overlap.
    """

    def __init__(self, overlapping: list["BaseEvent"]):
        self.overlapping = overlapping
        titles = ", ".join(event.title for event in overlapping)
        super().__init__(f"Event overlaps with: {titles}")
