"""Recurrence generator.

Turns one event template with a repeat rule into the ordered list of its dated
occurrences. Expansion is bounded by the rule's end date or, for open-ended
series, by the expansion horizon, so every call terminates.
"""

import logging
from datetime import date
from typing import Callable, Optional

from calendar_core.calendar_math import (
    add_days,
    add_exact_months,
    add_exact_years,
    add_weeks,
    month_start,
)
from calendar_core.config import DEFAULT_EXPANSION_HORIZON
from calendar_core.events import EventTemplate


logger = logging.getLogger(__name__)


def effective_end_bound(
    template: EventTemplate,
    request_end_bound: Optional[date] = None,
    horizon: Optional[date] = None,
) -> date:
    """Compute the last date a series may produce.

    Args:
        template: Series template.
        request_end_bound: Optional caller cap (e.g. end of the visible window).
        horizon: Cutoff for series without an end date.

    Returns:
        ``rule.end_date`` (or the horizon), capped by ``request_end_bound``.
    """
    bound = template.repeat.end_date or horizon or DEFAULT_EXPANSION_HORIZON
    if request_end_bound is not None and request_end_bound < bound:
        bound = request_end_bound
    return bound


def generate(
    template: EventTemplate,
    request_end_bound: Optional[date] = None,
    horizon: Optional[date] = None,
) -> list[EventTemplate]:
    """Generate every occurrence of a repeating event.

    The anchor ``template.date`` is always the first candidate. Monthly and
    yearly rules skip periods in which the anchor day does not exist (e.g. the
    31st in April, February 29th in a common year) without shifting later
    occurrences.

    Args:
        template: Event template carrying the repeat rule.
        request_end_bound: Optional inclusive cap below the rule's own bound.
        horizon: Cutoff for series without an end date (defaults to
            DEFAULT_EXPANSION_HORIZON).

    Returns:
        Copies of the template with resolved dates, strictly increasing.
        Empty for non-repeating or unknown rule types and when the rule's end
        date precedes the anchor.
    """
    rule = template.repeat
    if not rule.is_recurring():
        return []

    start = template.date
    if rule.end_date is not None and rule.end_date < start:
        logger.debug(
            f"Repeat end {rule.end_date} precedes start {start}; no occurrences"
        )
        return []

    bound = effective_end_bound(template, request_end_bound, horizon)
    if start > bound:
        return []

    interval = rule.effective_interval
    if rule.kind == "daily":
        dates = _fixed_step_dates(
            start, bound, interval, lambda d: add_days(d, interval)
        )
    elif rule.kind == "weekly":
        dates = _fixed_step_dates(
            start, bound, interval * 7, lambda d: add_weeks(d, interval)
        )
    elif rule.kind == "monthly":
        dates = _skipping_dates(start, bound, interval, _monthly_candidate)
    else:
        dates = _skipping_dates(start, bound, interval, _yearly_candidate)

    logger.debug(
        f"Generated {len(dates)} {rule.kind} occurrences from {start} "
        f"through {bound} (interval {interval})"
    )
    return [template.model_copy(update={"date": d}, deep=True) for d in dates]


def _fixed_step_dates(
    start: date, bound: date, step_days: int, advance: Callable[[date], date]
) -> list[date]:
    dates = [start]
    cursor = start
    # Comparing the remaining span first keeps the loop clear of date.max.
    while (bound - cursor).days >= step_days:
        cursor = advance(cursor)
        dates.append(cursor)
    return dates


def _monthly_candidate(start: date, offset: int) -> tuple[Optional[date], Optional[date]]:
    return add_exact_months(start, offset, start.day), month_start(start, offset)


def _yearly_candidate(start: date, offset: int) -> tuple[Optional[date], Optional[date]]:
    candidate = add_exact_years(start, offset, start.month, start.day)
    period_start = month_start(start, offset * 12)
    return candidate, period_start


def _skipping_dates(
    start: date,
    bound: date,
    interval: int,
    candidate_for: Callable[[date, int], tuple[Optional[date], Optional[date]]],
) -> list[date]:
    """Advance by whole periods from the anchor, skipping missing days.

    ``candidate_for`` returns the exact candidate for a period offset (None
    if the anchor day is missing there) and the first day of that period's
    month, which is used to stop when a skipped period is already
    past the bound.
    """
    dates = [start]
    offset = 0
    while True:
        offset += interval
        candidate, period_start = candidate_for(start, offset)
        if period_start is None or period_start > bound:
            break
        if candidate is None:
            continue
        if candidate > bound:
            break
        dates.append(candidate)
    return dates
