"""Occurrence identity and expansion.

Maps stored base events to the dated occurrences shown for a date window and
maps a displayed occurrence back to the event it came from.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Literal, Optional, TypeVar, Union

from calendar_core.calendar_math import days_in_month, format_ymd, parse_ymd
from calendar_core.events import BaseEvent, DisplayOccurrence, EventTemplate
from calendar_core.generator import generate
from calendar_core.overrides import RecurrenceExceptions


logger = logging.getLogger(__name__)

# Separates base id, date and ordinal in derived occurrence ids. Generated
# event ids are uuid4 strings and never contain it.
OCCURRENCE_ID_SEPARATOR = "::"

CalendarView = Literal["week", "month"]

E = TypeVar("E", bound=EventTemplate)


def occurrence_id(base_id: str, occurrence_date: date, ordinal: int = 0) -> str:
    """Build the derived id of a generated occurrence.

    Args:
        base_id: Base event id.
        occurrence_date: Occurrence date.
        ordinal: Position among occurrences of the same base on that date.

    Returns:
        Id of the form ``{base_id}::{YYYY-MM-DD}::{ordinal}``.
    """
    sep = OCCURRENCE_ID_SEPARATOR
    return f"{base_id}{sep}{format_ymd(occurrence_date)}{sep}{ordinal}"


def parse_occurrence_id(value: str) -> Optional[tuple[str, date]]:
    """Split a derived occurrence id into base id and date.

    Args:
        value: Candidate occurrence id.

    Returns:
        ``(base_id, date)`` or None if the value is not a derived id (for
        example a plain stored event id).
    """
    parts = value.rsplit(OCCURRENCE_ID_SEPARATOR, 2)
    if len(parts) != 3:
        return None

    base_id, date_part, ordinal = parts
    if not base_id or not ordinal.isdigit():
        return None
    try:
        return base_id, parse_ymd(date_part)
    except ValueError:
        return None


def expand(
    base_events: Iterable[BaseEvent],
    window_start: date,
    window_end: date,
    exceptions: Optional[RecurrenceExceptions] = None,
    horizon: Optional[date] = None,
) -> list[DisplayOccurrence]:
    """Expand stored events into display occurrences for a window.

    Repeating events are generated up to ``min(rule.end_date, window_end)``
    (or the horizon for open-ended series), clipped to the window, filtered
    against single-delete and single-edit exceptions, and given derived ids
    with ``original_id`` set. Non-repeating events keep their id and go
    through the same window and exception filters.

    Args:
        base_events: Stored events.
        window_start: First visible date (inclusive).
        window_end: Last visible date (inclusive).
        exceptions: Per-series exception dates, if any.
        horizon: Cutoff for series without an end date.

    Returns:
        Occurrences sorted by date, then start time.
    """
    if window_end < window_start:
        return []

    results: list[DisplayOccurrence] = []
    for event in base_events:
        if event.is_recurring():
            results.extend(
                _expand_series(event, window_start, window_end, exceptions, horizon)
            )
            continue

        if not window_start <= event.date <= window_end:
            continue
        if exceptions is not None and exceptions.is_suppressed(event.id, event.date):
            continue
        results.append(DisplayOccurrence(**event.model_dump()))

    results.sort(key=lambda occurrence: (occurrence.date, occurrence.start_time))
    logger.debug(
        f"Expanded window {window_start}..{window_end} into {len(results)} occurrences"
    )
    return results


def _expand_series(
    event: BaseEvent,
    window_start: date,
    window_end: date,
    exceptions: Optional[RecurrenceExceptions],
    horizon: Optional[date],
) -> list[DisplayOccurrence]:
    ordinals: defaultdict[date, int] = defaultdict(int)
    occurrences = []

    for generated in generate(event.to_template(), window_end, horizon):
        if generated.date < window_start:
            continue
        if exceptions is not None and exceptions.is_suppressed(event.id, generated.date):
            continue

        ordinal = ordinals[generated.date]
        ordinals[generated.date] += 1

        data = event.model_dump()
        data.update(
            id=occurrence_id(event.id, generated.date, ordinal),
            date=generated.date,
            original_id=event.id,
        )
        occurrences.append(DisplayOccurrence(**data))

    return occurrences


def find_original_event(
    occurrence: Union[BaseEvent, DisplayOccurrence], base_events: Iterable[BaseEvent]
) -> BaseEvent:
    """Find the stored event an occurrence was produced from.

    Args:
        occurrence: A display occurrence or a stored event.
        base_events: Stored events to search.

    Returns:
        The matching base event, or the occurrence itself when nothing
        matches (a dangling reference is not an error).
    """
    target_id = getattr(occurrence, "original_id", None) or occurrence.id
    for event in base_events:
        if event.id == target_id:
            return event
    return occurrence


def search(occurrences: Iterable[E], term: Optional[str]) -> list[E]:
    """Filter events by a case-insensitive search term.

    The term is matched as a substring of the title, description and location.

    Args:
        occurrences: Events or display occurrences to filter.
        term: Search text; blank or None keeps everything.

    Returns:
        Matching events in their original order.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(occurrences)

    matches = []
    for occurrence in occurrences:
        searchable = (
            f"{occurrence.title} {occurrence.description} {occurrence.location}"
        ).lower()
        if needle in searchable:
            matches.append(occurrence)
    return matches


def view_window(anchor: date, view: CalendarView = "month") -> tuple[date, date]:
    """Return the visible date range of a calendar view.

    Args:
        anchor: Any date inside the view.
        view: "week" (Sunday through Saturday) or "month".

    Returns:
        ``(start, end)``, both inclusive.

    Raises:
        ValueError: If the view name is unknown.
    """
    if view == "week":
        start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
        return start, start + timedelta(days=6)
    if view == "month":
        start = anchor.replace(day=1)
        return start, anchor.replace(day=days_in_month(anchor.year, anchor.month))
    raise ValueError(f"Unknown calendar view: {view}")
