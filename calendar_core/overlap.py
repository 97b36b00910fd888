"""Overlap detection between events on the same date."""

from typing import Iterable, TypeVar

from calendar_core.events import EventTemplate


E = TypeVar("E", bound=EventTemplate)


def is_overlapping(first: EventTemplate, second: EventTemplate) -> bool:
    """Check if two events share a date and intersecting time ranges.

    Times are zero-padded HH:MM strings, so they compare correctly as text.
    Ranges are half-open: an event ending at 10:00 does not overlap one
    starting at 10:00.

    Args:
        first: First event.
        second: Second event.

    Returns:
        True if the events overlap.
    """
    if first.date != second.date:
        return False
    return first.start_time < second.end_time and second.start_time < first.end_time


def find_overlapping_events(candidate: EventTemplate, events: Iterable[E]) -> list[E]:
    """Find the events a candidate would overlap.

    Args:
        candidate: Event about to be saved.
        events: Existing events (typically the expanded occurrences on the
            candidate's date).

    Returns:
        Overlapping events, excluding the candidate itself and occurrences of
        the candidate's own series.
    """
    candidate_id = getattr(candidate, "id", None)
    overlapping = []
    for event in events:
        if candidate_id is not None:
            if getattr(event, "id", None) == candidate_id:
                continue
            if getattr(event, "original_id", None) == candidate_id:
                continue
        if is_overlapping(candidate, event):
            overlapping.append(event)
    return overlapping
