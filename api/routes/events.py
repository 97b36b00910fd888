"""Stored event endpoints.

Provides REST API for the stored events themselves: listing, creating,
updating and deleting single events, and updating or deleting every event of a
repeat group at once.
"""

from fastapi import APIRouter, Query, Response, status

from api.dependencies import CalendarServiceDep
from api.models import EventListResponse, GroupMutationResponse
from calendar_core.events import BaseEvent, EventTemplate

router = APIRouter(
    prefix="/api",
    tags=["events"],
)


@router.get("/events", response_model=EventListResponse)
async def list_events(service: CalendarServiceDep):
    """List every stored event.

    Recurring events are returned once, as their series template.

    Args:
        service: Calendar service dependency.

    Returns:
        All stored events with count.
    """
    events = service.list_events()
    return EventListResponse(events=events, count=len(events))


@router.post(
    "/events", response_model=BaseEvent, status_code=status.HTTP_201_CREATED
)
async def create_event(
    request: EventTemplate,
    service: CalendarServiceDep,
    allow_overlap: bool = Query(
        default=False, description="Save even if the event overlaps others"
    ),
):
    """Create a new event or series.

    Args:
        request: Event data including an optional repeat rule.
        service: Calendar service dependency.
        allow_overlap: Skip the overlap check.

    Returns:
        The stored event with its generated id.

    Raises:
        EventOverlapError: If the event overlaps and overlap is not allowed.
    """
    return service.create_event(request, allow_overlap=allow_overlap)


@router.get("/events/{event_id}", response_model=BaseEvent)
async def get_event(event_id: str, service: CalendarServiceDep):
    """Get one stored event.

    Args:
        event_id: The stored event id.
        service: Calendar service dependency.

    Raises:
        EventNotFoundError: If the event does not exist.
    """
    return service.get_event(event_id)


@router.put("/events/{event_id}", response_model=BaseEvent)
async def update_event(
    event_id: str, request: EventTemplate, service: CalendarServiceDep
):
    """Replace the fields of one stored event.

    Args:
        event_id: The stored event id.
        request: New event data.
        service: Calendar service dependency.

    Returns:
        The updated event.

    Raises:
        EventNotFoundError: If the event does not exist.
    """
    return service.update_event(event_id, request)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, service: CalendarServiceDep):
    """Delete one stored event.

    Raises:
        EventNotFoundError: If the event does not exist.
    """
    service.delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/recurring-events/{repeat_id}", response_model=GroupMutationResponse)
async def update_recurring_events(
    repeat_id: str, request: EventTemplate, service: CalendarServiceDep
):
    """Update every event of a repeat group.

    Each event keeps its own date and repeat rule; the other fields are taken
    from the request.

    Args:
        repeat_id: The repeat group id.
        request: Shared event data.
        service: Calendar service dependency.

    Returns:
        The updated group members.

    Raises:
        EventNotFoundError: If the group has no events.
    """
    events = service.update_group(repeat_id, request)
    return GroupMutationResponse(group_id=repeat_id, events=events, count=len(events))


@router.delete(
    "/recurring-events/{repeat_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_recurring_events(repeat_id: str, service: CalendarServiceDep):
    """Delete every event of a repeat group.

    Raises:
        EventNotFoundError: If the group has no events.
    """
    service.delete_group(repeat_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
