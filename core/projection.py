"""Pending-item projection for calendar events.

Every calendar event yields exactly one pending item describing whether its
current occurrence has been paid or is overdue as of ``today``.  The paid
rules are day/month/year component comparisons against the anchor date,
kept as the dashboard has always computed them; they do not project the
event onto the calendar.  An occurrence explicitly marked as paid (recorded
in ``CalendarEvent.paid_dates``) is paid regardless of the rules.
"""

import calendar
import logging
from datetime import date, timedelta
from functools import lru_cache
from typing import Iterable, Optional, Tuple

from core.domain import CalendarEvent, EventType, PendingItem, PendingType, Recurrence

logger = logging.getLogger(__name__)

PENDING_TYPES = {
    EventType.INCOME: PendingType.INCOME,
    EventType.EXPENSE: PendingType.BILL,
    EventType.INVOICE: PendingType.BILL,
    EventType.OTHER: PendingType.GOAL,
}


def js_weekday(day: date) -> int:
    """Weekday numbered from Sunday = 0."""
    return day.isoweekday() % 7


def heuristic_paid(event: CalendarEvent, today: date) -> bool:
    anchor = date.fromisoformat(event.date)
    if event.recurrence == Recurrence.MONTHLY:
        return (
            anchor.day < today.day
            and anchor.month <= today.month
            and anchor.year <= today.year
        )
    if event.recurrence == Recurrence.WEEKLY:
        elapsed = (today - anchor).days
        if elapsed < 0:
            return False
        return elapsed % 7 < js_weekday(today)
    return anchor < today


def current_occurrence(event: CalendarEvent, today: date) -> date:
    """Date of the event's occurrence in the cycle containing ``today``."""
    anchor = date.fromisoformat(event.date)
    if event.recurrence == Recurrence.ONCE or anchor > today:
        return anchor
    if event.recurrence == Recurrence.MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return date(today.year, today.month, min(anchor.day, last_day))
    weeks = (today - anchor).days // 7
    return anchor + timedelta(weeks=weeks)


def to_pending(event: CalendarEvent, today: date) -> PendingItem:
    anchor = date.fromisoformat(event.date)
    is_paid = (
        heuristic_paid(event, today)
        or current_occurrence(event, today).isoformat() in event.paid_dates
    )
    return PendingItem(
        id=event.id,
        title=event.title,
        amount=event.amount,
        due_date=event.date,
        type=PENDING_TYPES[event.type],
        is_paid=is_paid,
        is_overdue=anchor < today and not is_paid,
    )


@lru_cache(maxsize=32)
def _project(events: Tuple[CalendarEvent, ...], today: date) -> Tuple[PendingItem, ...]:
    logger.debug("Projecting %d calendar events as of %s", len(events), today)
    return tuple(to_pending(e, today) for e in events)


def project_pending(events: Iterable[CalendarEvent], today: Optional[date] = None) -> Tuple[PendingItem, ...]:
    return _project(tuple(events), today or date.today())


def sort_pending(items: Iterable[PendingItem]) -> Tuple[PendingItem, ...]:
    return tuple(sorted(items, key=lambda p: p.due_date))


def events_on(events: Iterable[CalendarEvent], day: date) -> Tuple[CalendarEvent, ...]:
    iso = day.isoformat()
    return tuple(e for e in events if e.date == iso)


def search_events(events: Iterable[CalendarEvent], query: str) -> Tuple[CalendarEvent, ...]:
    q = query.strip().lower()
    if not q:
        return tuple(events)

    def _matches(e: CalendarEvent) -> bool:
        return (
            q in e.title.lower()
            or q in e.description.lower()
            or q in f"{e.amount:g}"
            or q in e.type.value
        )

    return tuple(filter(_matches, events))
