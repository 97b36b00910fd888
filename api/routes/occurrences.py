"""Occurrence endpoints.

Provides REST API for the expanded view of the calendar: listing the display
occurrences of a date window, and deleting or editing one occurrence or its
whole series.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from api.dependencies import CalendarServiceDep
from api.models import (
    DeleteOccurrenceRequest,
    EditOccurrenceRequest,
    OccurrenceListResponse,
    OccurrenceLookupResponse,
    OccurrenceMutationResponse,
)
from calendar_core.expansion import CalendarView, search, view_window

router = APIRouter(
    prefix="/api/occurrences",
    tags=["occurrences"],
)


@router.get("", response_model=OccurrenceListResponse)
async def list_occurrences(
    service: CalendarServiceDep,
    start: Optional[date] = Query(default=None, description="Window start"),
    end: Optional[date] = Query(default=None, description="Window end"),
    view: Optional[CalendarView] = Query(default=None, description="week or month"),
    anchor: Optional[date] = Query(
        default=None, alias="date", description="Date inside the view"
    ),
    q: Optional[str] = Query(
        default=None, description="Search title, description and location"
    ),
):
    """List the display occurrences of a window.

    The window is either given explicitly with ``start`` and ``end`` or
    derived from ``view`` and ``date``. The anchor date always comes from the
    caller, so results never depend on the server's clock or time zone.

    Args:
        service: Calendar service dependency.
        start: First date of an explicit window.
        end: Last date of an explicit window.
        view: Calendar view used to derive the window.
        anchor: Date the view window is built around.
        q: Optional search term; only matching occurrences are returned.

    Returns:
        Occurrences sorted by date and start time.

    Raises:
        ValueError: If neither a full window nor a view with its date is
            given.
    """
    if start is not None and end is not None:
        window_start, window_end = start, end
    elif view is not None and anchor is not None:
        window_start, window_end = view_window(anchor, view)
    else:
        raise ValueError("Provide both start and end, or a view and date")

    occurrences = search(service.occurrences(window_start, window_end), q)
    return OccurrenceListResponse(
        start=window_start,
        end=window_end,
        occurrences=occurrences,
        count=len(occurrences),
    )


@router.get("/{occurrence_id}", response_model=OccurrenceLookupResponse)
async def get_occurrence(occurrence_id: str, service: CalendarServiceDep):
    """Resolve an occurrence id to its stored event.

    Args:
        occurrence_id: Derived occurrence id or stored event id.
        service: Calendar service dependency.

    Raises:
        EventNotFoundError: If the id does not resolve.
    """
    base, occurrence_date = service.resolve_occurrence(occurrence_id)
    return OccurrenceLookupResponse(
        occurrence_id=occurrence_id,
        date=occurrence_date,
        base_event=base,
        is_recurring=base.is_recurring(),
    )


@router.post("/{occurrence_id}/delete", response_model=OccurrenceMutationResponse)
async def delete_occurrence(
    occurrence_id: str,
    request: DeleteOccurrenceRequest,
    service: CalendarServiceDep,
):
    """Delete one occurrence or its whole series.

    Args:
        occurrence_id: The occurrence to delete.
        request: Delete scope.
        service: Calendar service dependency.

    Raises:
        EventNotFoundError: If the occurrence does not resolve.
    """
    service.delete_occurrence(occurrence_id, scope=request.scope)
    message = (
        "Occurrence hidden" if request.scope == "this" else "Series deleted"
    )
    return OccurrenceMutationResponse(
        occurrence_id=occurrence_id, scope=request.scope, message=message
    )


@router.post("/{occurrence_id}/edit", response_model=OccurrenceMutationResponse)
async def edit_occurrence(
    occurrence_id: str,
    request: EditOccurrenceRequest,
    service: CalendarServiceDep,
):
    """Edit one occurrence or its whole series.

    With scope "this" the occurrence is detached into a standalone event; with
    scope "all" the series itself is updated.

    Args:
        occurrence_id: The occurrence to edit.
        request: Edit scope and field changes.
        service: Calendar service dependency.

    Returns:
        Action response carrying the detached or updated event.

    Raises:
        EventNotFoundError: If the occurrence does not resolve.
    """
    event = service.edit_occurrence(
        occurrence_id, request.changes, scope=request.scope
    )
    message = (
        "Occurrence detached" if request.scope == "this" else "Series updated"
    )
    return OccurrenceMutationResponse(
        occurrence_id=occurrence_id,
        scope=request.scope,
        message=message,
        event=event,
    )
