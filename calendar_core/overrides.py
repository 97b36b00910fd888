"""Per-series exception dates for single-occurrence deletes and edits."""

import logging
import threading
from datetime import date
from typing import Any, Union

from pydantic import BaseModel, Field, PrivateAttr

from calendar_core.calendar_math import format_ymd, parse_ymd


logger = logging.getLogger(__name__)

DateLike = Union[str, date]


def _key(value: DateLike) -> str:
    return format_ymd(parse_ymd(value))


class RecurrenceExceptions(BaseModel):
    """Tracks which occurrences of each series were deleted or edited alone.

    Both maps are keyed by base event id and hold ``YYYY-MM-DD`` strings.
    A date in ``edited_dates`` has been materialized as its own standalone
    event, so the series must no longer produce it.

    Args:
        deleted_dates: Dates removed by single deletes, per base event id.
        edited_dates: Dates replaced by single edits, per base event id.
    """

    deleted_dates: dict[str, set[str]] = Field(
        default_factory=dict, description="Single-deleted dates per base event"
    )
    edited_dates: dict[str, set[str]] = Field(
        default_factory=dict, description="Single-edited dates per base event"
    )

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    def mark_deleted(self, base_id: str, occurrence_date: DateLike) -> None:
        """Record a single-occurrence delete.

        Args:
            base_id: Base event id of the series.
            occurrence_date: Date of the deleted occurrence.
        """
        key = _key(occurrence_date)
        with self._lock:
            self.deleted_dates.setdefault(base_id, set()).add(key)
        logger.info(f"Marked {key} deleted in series {base_id}")

    def mark_edited(self, base_id: str, occurrence_date: DateLike) -> None:
        """Record a single-occurrence edit.

        Args:
            base_id: Base event id of the series.
            occurrence_date: Date of the edited occurrence.
        """
        key = _key(occurrence_date)
        with self._lock:
            self.edited_dates.setdefault(base_id, set()).add(key)
        logger.info(f"Marked {key} edited in series {base_id}")

    def clear_deleted(self, base_id: str) -> None:
        """Forget all single deletes for a series."""
        with self._lock:
            self.deleted_dates.pop(base_id, None)

    def clear_edited(self, base_id: str) -> None:
        """Forget all single edits for a series."""
        with self._lock:
            self.edited_dates.pop(base_id, None)

    def discard(self, base_id: str) -> None:
        """Drop every exception of a series whose base event is gone."""
        with self._lock:
            self.deleted_dates.pop(base_id, None)
            self.edited_dates.pop(base_id, None)

    def deleted_for(self, base_id: str) -> frozenset[str]:
        """Return the single-deleted dates of a series (empty if unknown)."""
        with self._lock:
            return frozenset(self.deleted_dates.get(base_id, ()))

    def edited_for(self, base_id: str) -> frozenset[str]:
        """Return the single-edited dates of a series (empty if unknown)."""
        with self._lock:
            return frozenset(self.edited_dates.get(base_id, ()))

    def is_suppressed(self, base_id: str, occurrence_date: DateLike) -> bool:
        """Check if an occurrence must be left out of the expanded series.

        Args:
            base_id: Base event id of the series.
            occurrence_date: Date of the generated occurrence.

        Returns:
            True if the date was deleted or edited on its own.
        """
        key = _key(occurrence_date)
        with self._lock:
            return key in self.deleted_dates.get(
                base_id, ()
            ) or key in self.edited_dates.get(base_id, ())

    def get_snapshot(self) -> dict[str, Any]:
        """Get a JSON-friendly copy of both maps.

        Returns:
            Dictionary with sorted date lists per base event id.
        """
        with self._lock:
            return {
                "deleted_dates": {
                    base_id: sorted(dates)
                    for base_id, dates in self.deleted_dates.items()
                },
                "edited_dates": {
                    base_id: sorted(dates)
                    for base_id, dates in self.edited_dates.items()
                },
            }
