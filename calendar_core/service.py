"""Calendar service.

Ties an EventStore, the exception registry and the settings together behind
occurrence-level operations: list the occurrences of a window, and delete or
edit one occurrence or its whole series.
"""

import logging
import threading
from datetime import date
from typing import Literal, Optional

from calendar_core.config import Settings
from calendar_core.events import (
    TEMPLATE_FIELDS,
    BaseEvent,
    DisplayOccurrence,
    EventChanges,
    EventTemplate,
)
from calendar_core.exceptions import EventNotFoundError, EventOverlapError
from calendar_core.expansion import expand, parse_occurrence_id
from calendar_core.generator import generate
from calendar_core.overlap import find_overlapping_events
from calendar_core.overrides import RecurrenceExceptions
from calendar_core.series import delete_all, delete_single, edit_all, edit_single
from calendar_core.store import EventStore, InMemoryEventStore


logger = logging.getLogger(__name__)

RecurrenceScope = Literal["this", "all"]


class CalendarService:
    """Occurrence-level operations over stored events.

    Args:
        store: Event storage (defaults to an empty in-memory store).
        settings: Engine settings (defaults to Settings()).
        exceptions: Exception registry (defaults to an empty one).
    """

    def __init__(
        self,
        store: Optional[EventStore] = None,
        settings: Optional[Settings] = None,
        exceptions: Optional[RecurrenceExceptions] = None,
    ):
        self.store = store if store is not None else InMemoryEventStore()
        self.settings = settings if settings is not None else Settings()
        self.exceptions = exceptions if exceptions is not None else RecurrenceExceptions()
        self._lock = threading.RLock()

    # Stored events

    def list_events(self) -> list[BaseEvent]:
        """Return every stored event."""
        return self.store.list_events()

    def get_event(self, event_id: str) -> BaseEvent:
        """Return one stored event.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        event = self.store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def create_event(
        self, template: EventTemplate, allow_overlap: bool = False
    ) -> BaseEvent:
        """Store a new event or series.

        Args:
            template: Event data (a BaseEvent keeps its id).
            allow_overlap: Save even if it overlaps events on the same date.

        Returns:
            The stored event.

        Raises:
            EventOverlapError: If the event overlaps and overlap is not allowed.
        """
        if isinstance(template, BaseEvent):
            event = template
        else:
            event = BaseEvent(**template.model_dump(include=TEMPLATE_FIELDS))

        with self._lock:
            if not allow_overlap:
                overlapping = find_overlapping_events(
                    event, self.occurrences(event.date, event.date)
                )
                if overlapping:
                    logger.info(
                        f"Rejected event {event.title!r}: overlaps {len(overlapping)} event(s)"
                    )
                    raise EventOverlapError(overlapping)
            return self.store.create_event(event)

    def update_event(self, event_id: str, template: EventTemplate) -> BaseEvent:
        """Overwrite the template fields of one stored event.

        Changing the date or repeat rule drops the event's exception dates.

        Raises:
            EventNotFoundError: If the event does not exist.
            ValidationError: If the merged event ends before it starts.
        """
        with self._lock:
            existing = self.get_event(event_id)
            updated = BaseEvent(
                **{
                    **existing.model_dump(),
                    **template.model_dump(include=TEMPLATE_FIELDS),
                }
            )
            stored = self.store.update_event(event_id, updated)
            # Exception dates belong to the old series.
            if existing.date != updated.date or existing.repeat != updated.repeat:
                self.exceptions.discard(event_id)
            return stored

    def delete_event(self, event_id: str) -> BaseEvent:
        """Delete one stored event and its exception dates.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        with self._lock:
            removed = self.store.delete_event(event_id)
            self.exceptions.discard(event_id)
            return removed

    def update_group(self, group_id: str, template: EventTemplate) -> list[BaseEvent]:
        """Write shared template fields to every event of a repeat group.

        Like a full-series edit, this clears the members' single-edit dates.

        Raises:
            EventNotFoundError: If the group has no events.
        """
        payload = BaseEvent(**template.model_dump(include=TEMPLATE_FIELDS))
        with self._lock:
            updated = self.store.update_group(group_id, payload)
            for event in updated:
                self.exceptions.clear_edited(event.id)
            return updated

    def delete_group(self, group_id: str) -> list[BaseEvent]:
        """Delete every event of a repeat group and their exception dates.

        Raises:
            EventNotFoundError: If the group has no events.
        """
        with self._lock:
            removed = self.store.delete_group(group_id)
            for event in removed:
                self.exceptions.discard(event.id)
            return removed

    # Occurrences

    def occurrences(self, window_start: date, window_end: date) -> list[DisplayOccurrence]:
        """Expand stored events into the occurrences of a window.

        Args:
            window_start: First visible date (inclusive).
            window_end: Last visible date (inclusive).

        Returns:
            Display occurrences sorted by date and start time.
        """
        return expand(
            self.store.list_events(),
            window_start,
            window_end,
            exceptions=self.exceptions,
            horizon=self.settings.expansion_horizon,
        )

    def resolve_occurrence(self, occurrence_id: str) -> tuple[BaseEvent, date]:
        """Map an occurrence id back to its stored event and date.

        Args:
            occurrence_id: Derived occurrence id or plain stored event id.

        Returns:
            ``(base_event, occurrence_date)``.

        Raises:
            EventNotFoundError: If the base event does not exist, the date is
                not an occurrence of its series, or the occurrence was already
                deleted or edited on its own.
        """
        parsed = parse_occurrence_id(occurrence_id)
        if parsed is None:
            event = self.get_event(occurrence_id)
            return event, event.date

        base_id, occurrence_date = parsed
        base = self.store.get_event(base_id)
        if base is None or not self._is_occurrence_date(base, occurrence_date):
            raise EventNotFoundError(occurrence_id, kind="occurrence")
        if self.exceptions.is_suppressed(base.id, occurrence_date):
            raise EventNotFoundError(occurrence_id, kind="occurrence")
        return base, occurrence_date

    def delete_occurrence(self, occurrence_id: str, scope: RecurrenceScope = "this") -> None:
        """Delete one occurrence or its whole series.

        Non-repeating events are deleted outright whatever the scope.

        Args:
            occurrence_id: Occurrence to delete.
            scope: "this" hides only this occurrence, "all" deletes the series.

        Raises:
            EventNotFoundError: If the occurrence does not resolve.
        """
        with self._lock:
            base, occurrence_date = self.resolve_occurrence(occurrence_id)
            if not base.is_recurring():
                self.delete_event(base.id)
                return

            if scope == "this":
                delete_single(self.exceptions, base, occurrence_date)
                return

            removed = self.store.apply(delete_all(self.exceptions, base))
            if isinstance(removed, list):
                for event in removed:
                    self.exceptions.discard(event.id)

    def edit_occurrence(
        self,
        occurrence_id: str,
        changes: EventChanges,
        scope: RecurrenceScope = "this",
    ) -> BaseEvent:
        """Edit one occurrence or its whole series.

        Args:
            occurrence_id: Occurrence to edit.
            changes: Field changes.
            scope: "this" detaches the occurrence as a standalone event, "all"
                updates the series while keeping its anchor date and rule.

        Returns:
            The detached event ("this") or the updated base event ("all").
            Non-repeating events are updated in place.

        Raises:
            EventNotFoundError: If the occurrence does not resolve.
            ValidationError: If the edited event ends before it starts.
        """
        with self._lock:
            base, occurrence_date = self.resolve_occurrence(occurrence_id)
            if not base.is_recurring():
                updated = BaseEvent.model_validate(
                    {**base.model_dump(), **changes.updates()}
                )
                return self.store.update_event(base.id, updated)

            if scope == "this":
                call = edit_single(self.exceptions, base, occurrence_date, changes)
                return self.store.apply(call)

            calls = edit_all(
                self.exceptions,
                base,
                changes,
                detached_events=self.store.list_events(),
                retract_detached=self.settings.retract_detached_on_full_edit,
            )
            for call in calls:
                self.store.apply(call)
            return self.get_event(base.id)

    def _is_occurrence_date(self, base: BaseEvent, occurrence_date: date) -> bool:
        if not base.is_recurring():
            return base.date == occurrence_date
        generated = generate(
            base.to_template(), occurrence_date, self.settings.expansion_horizon
        )
        return bool(generated) and generated[-1].date == occurrence_date
