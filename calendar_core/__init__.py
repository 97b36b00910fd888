"""Recurring calendar engine package.

This package contains the event data models, the recurrence generator and its
calendar math, occurrence expansion and identity, the per-series exception
registry, single/all series mutations, and the storage collaborator.
"""

from calendar_core.config import DEFAULT_EXPANSION_HORIZON, Settings, load_settings
from calendar_core.events import (
    BaseEvent,
    DisplayOccurrence,
    EventChanges,
    EventTemplate,
    RepeatRule,
)
from calendar_core.exceptions import EventNotFoundError, EventOverlapError
from calendar_core.expansion import (
    expand,
    find_original_event,
    occurrence_id,
    parse_occurrence_id,
    search,
    view_window,
)
from calendar_core.generator import generate
from calendar_core.overrides import RecurrenceExceptions
from calendar_core.service import CalendarService
from calendar_core.store import EventStore, InMemoryEventStore

__all__ = [
    "DEFAULT_EXPANSION_HORIZON",
    "Settings",
    "load_settings",
    "BaseEvent",
    "DisplayOccurrence",
    "EventChanges",
    "EventTemplate",
    "RepeatRule",
    "EventNotFoundError",
    "EventOverlapError",
    "expand",
    "find_original_event",
    "occurrence_id",
    "parse_occurrence_id",
    "search",
    "view_window",
    "generate",
    "RecurrenceExceptions",
    "CalendarService",
    "EventStore",
    "InMemoryEventStore",
]
