"""Shared request and response models for API endpoints."""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field

from calendar_core.events import BaseEvent, DisplayOccurrence, EventChanges


RecurrenceScope = Literal["this", "all"]


class EventListResponse(BaseModel):
    """Response model for stored event listings.

    Attributes:
        events: Stored events.
        count: Number of events returned.
    """

    events: list[BaseEvent]
    count: int


class GroupMutationResponse(BaseModel):
    """Response model for repeat group updates.

    Attributes:
        group_id: The repeat group that was changed.
        events: Events of the group after the change.
        count: Number of events changed.
    """

    group_id: str
    events: list[BaseEvent]
    count: int


class OccurrenceListResponse(BaseModel):
    """Response model for expanded occurrences of a window.

    Attributes:
        start: First date of the window.
        end: Last date of the window.
        occurrences: Display occurrences in the window.
        count: Number of occurrences.
    """

    start: dt.date
    end: dt.date
    occurrences: list[DisplayOccurrence]
    count: int


class OccurrenceLookupResponse(BaseModel):
    """Response model mapping an occurrence back to its stored event.

    Attributes:
        occurrence_id: The id that was looked up.
        date: The occurrence date.
        base_event: The stored event the occurrence belongs to.
        is_recurring: Whether the stored event is a series.
    """

    occurrence_id: str
    date: dt.date
    base_event: BaseEvent
    is_recurring: bool


class DeleteOccurrenceRequest(BaseModel):
    """Request to delete an occurrence.

    Args:
        scope: "this" hides one occurrence, "all" deletes the series.
    """

    scope: RecurrenceScope = Field(default="this", description="Delete scope")


class EditOccurrenceRequest(BaseModel):
    """Request to edit an occurrence.

    Args:
        scope: "this" detaches one occurrence, "all" edits the series.
        changes: Field changes to apply.
    """

    scope: RecurrenceScope = Field(default="this", description="Edit scope")
    changes: EventChanges = Field(description="Field changes")


class OccurrenceMutationResponse(BaseModel):
    """Response model for occurrence deletes and edits.

    Attributes:
        occurrence_id: The occurrence that was targeted.
        scope: The scope that was applied.
        message: Human-readable description of the result.
        event: The detached or updated event, for edits.
    """

    occurrence_id: str
    scope: RecurrenceScope
    message: str
    event: Optional[BaseEvent] = None
