"""Event data models.

Events are split into the repeat rule, the non-identity event template, stored
base events, and the display occurrences computed from them. Dates are plain
calendar dates (no time zone) and serialize as ``YYYY-MM-DD``.
"""

import datetime as dt
from typing import Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from calendar_core.calendar_math import clamp_interval


RepeatType = Literal["none", "daily", "weekly", "monthly", "yearly"]
REPEAT_TYPES: tuple[str, ...] = ("none", "daily", "weekly", "monthly", "yearly")

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# Fields shared by every event shape (everything except identity).
TEMPLATE_FIELDS = frozenset(
    {
        "title",
        "date",
        "start_time",
        "end_time",
        "description",
        "location",
        "category",
        "notification_time",
        "repeat",
    }
)

_UNIT_NAMES = {
    "daily": ("day", "Daily"),
    "weekly": ("week", "Weekly"),
    "monthly": ("month", "Monthly"),
    "yearly": ("year", "Yearly"),
}


def _check_time_range(start_time: str, end_time: str) -> None:
    # Zero-padded HH:MM strings order the same way as the times they hold.
    if end_time <= start_time:
        raise ValueError("end time must be after start time")


class RepeatRule(BaseModel):
    """Represents how an event repeats.

    Args:
        type: Repeat type (none, daily, weekly, monthly, yearly). Unknown
            values are kept but behave like "none".
        interval: Repeat every N units; clamped to 1 when invalid.
        end_date: Inclusive last date of the series.
        id: Group identifier shared by all stored rows of the series.
    """

    type: str = Field(default="none", description="Repeat type")
    interval: Union[int, float] = Field(default=1, description="Repeat every N units")
    end_date: Optional[dt.date] = Field(
        default=None, description="Inclusive end date (YYYY-MM-DD)"
    )
    id: Optional[str] = Field(default=None, description="Repeat group identifier")

    @property
    def kind(self) -> str:
        """Normalized repeat type, mapping unknown values to "none"."""
        return self.type if self.type in REPEAT_TYPES else "none"

    @property
    def effective_interval(self) -> int:
        """Interval after clamping to a positive integer."""
        return clamp_interval(self.interval)

    def is_recurring(self) -> bool:
        """Check if this rule expands into more than one occurrence.

        Returns:
            True for daily, weekly, monthly and yearly rules.
        """
        return self.kind != "none"

    @property
    def summary(self) -> str:
        """Short human-readable description of the rule.

        Returns:
            Text such as "Weekly" or "Every 3 days, until 2025-12-31".
        """
        if not self.is_recurring():
            return "Does not repeat"

        unit, head = _UNIT_NAMES[self.kind]
        interval = self.effective_interval
        if interval != 1:
            head = f"Every {interval} {unit}s"
        if self.end_date:
            head += f", until {self.end_date.isoformat()}"
        return head


class EventTemplate(BaseModel):
    """The non-identity fields of an event.

    Args:
        title: Event title.
        date: Event date; for a series this is the anchor (first occurrence).
        start_time: Start time as HH:MM.
        end_time: End time as HH:MM.
        description: Event description.
        location: Event location.
        category: Event category.
        notification_time: Minutes before start to notify.
        repeat: Repeat rule.
    """

    title: str = Field(description="Event title")
    date: dt.date = Field(description="Event date or series anchor")
    start_time: str = Field(pattern=TIME_PATTERN, description="Start time (HH:MM)")
    end_time: str = Field(pattern=TIME_PATTERN, description="End time (HH:MM)")
    description: str = Field(default="", description="Event description")
    location: str = Field(default="", description="Event location")
    category: str = Field(default="", description="Event category")
    notification_time: int = Field(
        default=10, ge=0, description="Notification lead time in minutes"
    )
    repeat: RepeatRule = Field(default_factory=RepeatRule, description="Repeat rule")

    @model_validator(mode="after")
    def validate_time_range(self) -> "EventTemplate":
        """Check that the event ends after it starts.

        Raises:
            ValueError: If end_time is not after start_time.
        """
        _check_time_range(self.start_time, self.end_time)
        return self

    def is_recurring(self) -> bool:
        """Check if this event represents a repeating series."""
        return self.repeat.is_recurring()

    def to_template(self) -> "EventTemplate":
        """Copy only the template fields into a plain EventTemplate.

        Returns:
            A new EventTemplate (identity fields dropped).
        """
        return EventTemplate(**self.model_dump(include=TEMPLATE_FIELDS))


class BaseEvent(EventTemplate):
    """A stored event: a template plus a stable identity.

    Args:
        id: Unique event identifier.
        parent_event_id: Series this event was detached from by a single edit.
        recurrence_id: Occurrence date this event replaces in its parent series.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()), description="Unique event identifier"
    )
    parent_event_id: Optional[str] = Field(
        default=None, description="Parent series if detached occurrence"
    )
    recurrence_id: Optional[dt.date] = Field(
        default=None, description="Replaced occurrence date if detached"
    )

    def is_detached_occurrence(self) -> bool:
        """Check if this event was materialized from a single-occurrence edit.

        Returns:
            True if the event records a parent series.
        """
        return self.parent_event_id is not None


class DisplayOccurrence(BaseEvent):
    """One dated occurrence ready for display.

    Generated occurrences carry a derived ``id`` and ``original_id`` pointing
    at their base event. Non-recurring events pass through with their own id
    and ``original_id=None``.

    Args:
        original_id: Base event id for generated occurrences.
    """

    original_id: Optional[str] = Field(
        default=None, description="Base event id for generated occurrences"
    )

    @property
    def base_id(self) -> str:
        """Id of the stored event this occurrence comes from."""
        return self.original_id or self.id


class EventChanges(BaseModel):
    """Partial update for an event; None means "leave unchanged".

    Args:
        title: New title.
        date: New date (ignored by full-series edits).
        start_time: New start time.
        end_time: New end time.
        description: New description.
        location: New location.
        category: New category.
        notification_time: New notification lead time.
    """

    title: Optional[str] = Field(default=None, description="Event title")
    date: Optional[dt.date] = Field(default=None, description="Event date")
    start_time: Optional[str] = Field(
        default=None, pattern=TIME_PATTERN, description="Start time (HH:MM)"
    )
    end_time: Optional[str] = Field(
        default=None, pattern=TIME_PATTERN, description="End time (HH:MM)"
    )
    description: Optional[str] = Field(default=None, description="Event description")
    location: Optional[str] = Field(default=None, description="Event location")
    category: Optional[str] = Field(default=None, description="Event category")
    notification_time: Optional[int] = Field(
        default=None, ge=0, description="Notification lead time in minutes"
    )

    @model_validator(mode="after")
    def validate_time_range(self) -> "EventChanges":
        """Check the time range when both ends are changed together."""
        if self.start_time is not None and self.end_time is not None:
            _check_time_range(self.start_time, self.end_time)
        return self

    def updates(self, exclude: frozenset[str] = frozenset()) -> dict[str, Any]:
        """Collect the fields that were set.

        Args:
            exclude: Field names to leave out.

        Returns:
            Mapping of field name to new value.
        """
        return {
            key: value
            for key, value in self.model_dump(exclude_none=True).items()
            if key not in exclude
        }
