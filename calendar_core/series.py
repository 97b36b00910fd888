"""Single-occurrence and whole-series mutations of repeating events.

These functions only update the exception registry and describe the storage
change that has to follow as a StorageCall; executing it is left to an
EventStore.
"""

import logging
from datetime import date
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, Field

from calendar_core.events import BaseEvent, EventChanges, RepeatRule
from calendar_core.overrides import RecurrenceExceptions


logger = logging.getLogger(__name__)

StorageOperation = Literal[
    "create_event", "update_event", "update_group", "delete_event", "delete_group"
]

# A full-series edit keeps the series anchor; the repeat rule is not editable
# through EventChanges at all.
FULL_EDIT_EXCLUDED = frozenset({"date"})


class StorageCall(BaseModel):
    """A storage operation derived from a mutation.

    Args:
        operation: Which store operation to run.
        target: Event id or repeat group id the operation applies to.
        payload: Event data to create or write, if any.
    """

    operation: StorageOperation = Field(description="Store operation")
    target: Optional[str] = Field(default=None, description="Event or group id")
    payload: Optional[BaseEvent] = Field(default=None, description="Event data")


def delete_single(
    exceptions: RecurrenceExceptions, base: BaseEvent, occurrence_date: date
) -> None:
    """Hide one occurrence of a series.

    Only the exception registry changes; the stored series is untouched.

    Args:
        exceptions: Exception registry.
        base: Base event of the series.
        occurrence_date: Date of the occurrence to hide.
    """
    exceptions.mark_deleted(base.id, occurrence_date)


def delete_all(exceptions: RecurrenceExceptions, base: BaseEvent) -> StorageCall:
    """Delete a whole series.

    Args:
        exceptions: Exception registry; the series' exceptions are dropped.
        base: Base event of the series.

    Returns:
        ``delete_group`` on the repeat group id when the series has one,
        otherwise ``delete_event`` on the base id.
    """
    exceptions.discard(base.id)
    if base.repeat.id:
        logger.info(f"Deleting repeat group {base.repeat.id} (base {base.id})")
        return StorageCall(operation="delete_group", target=base.repeat.id)

    logger.info(f"Deleting series {base.id}")
    return StorageCall(operation="delete_event", target=base.id)


def edit_single(
    exceptions: RecurrenceExceptions,
    base: BaseEvent,
    occurrence_date: date,
    changes: EventChanges,
) -> StorageCall:
    """Detach one occurrence of a series as its own event.

    Args:
        exceptions: Exception registry; the date is marked as edited.
        base: Base event of the series.
        occurrence_date: Date of the occurrence being edited.
        changes: Field changes for the detached event.

    Returns:
        ``create_event`` with a new non-repeating event that carries the
        changes, dated on the occurrence unless the changes move it.

    Raises:
        ValidationError: If the merged event ends before it starts.
    """
    data = base.to_template().model_dump()
    data["date"] = occurrence_date
    data.update(changes.updates())
    data["repeat"] = RepeatRule()

    detached = BaseEvent(
        **data,
        parent_event_id=base.id,
        recurrence_id=occurrence_date,
    )
    exceptions.mark_edited(base.id, occurrence_date)

    logger.info(
        f"Detached occurrence {occurrence_date} of series {base.id} as {detached.id}"
    )
    return StorageCall(operation="create_event", target=detached.id, payload=detached)


def edit_all(
    exceptions: RecurrenceExceptions,
    base: BaseEvent,
    changes: EventChanges,
    detached_events: Iterable[BaseEvent] = (),
    retract_detached: bool = False,
) -> list[StorageCall]:
    """Edit every occurrence of a series through its base event.

    The anchor date and the repeat rule (including its group id) are kept.
    Single-edit exceptions of the series are cleared. Events detached by
    earlier single edits stay unless ``retract_detached`` is set.

    Args:
        exceptions: Exception registry.
        base: Base event of the series.
        changes: Field changes; ``changes.date`` is ignored.
        detached_events: Candidate events previously detached from a series.
        retract_detached: Also delete events detached from this series.

    Returns:
        The update call (``update_group`` or ``update_event``) followed by
        one ``delete_event`` per retracted detached event.

    Raises:
        ValidationError: If the merged event ends before it starts.
    """
    updated = BaseEvent.model_validate(
        {**base.model_dump(), **changes.updates(exclude=FULL_EDIT_EXCLUDED)}
    )
    exceptions.clear_edited(base.id)

    if base.repeat.id:
        calls = [
            StorageCall(operation="update_group", target=base.repeat.id, payload=updated)
        ]
    else:
        calls = [StorageCall(operation="update_event", target=base.id, payload=updated)]

    if retract_detached:
        for event in detached_events:
            if event.parent_event_id == base.id:
                calls.append(StorageCall(operation="delete_event", target=event.id))

    logger.info(f"Edited series {base.id}: {len(calls)} storage call(s)")
    return calls
