"""
On-time / late-time classification of a completed issue.

The label compares the complete date against the due date in whole days:

    >>> classify_on_late_time(datetime(2024, 1, 15), datetime(2024, 1, 10))
    'Late Time (5 Day)'
    >>> classify_on_late_time(datetime(2024, 1, 10), datetime(2024, 1, 10))
    'On Time (0 Day)'

Partial days are truncated toward zero, so finishing 23 hours after the due
time is still "On Time (0 Day)". Both dates are compared in UTC; a naive
value counts as UTC, which is how the database hands stored dates back.
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from issuedesk.models.base import as_utc

logger = logging.getLogger(__name__)

DateLike = Union[datetime, date, str]

SECONDS_PER_DAY = 24 * 60 * 60


def to_datetime(value: Optional[DateLike]) -> Optional[datetime]:
    """
    Coerce a date-like value to an aware UTC datetime.

    Returns None for missing or unparseable values instead of raising.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            # "Z" suffix is accepted from Python 3.11; normalise for older runtimes
            return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            logger.debug("Unparseable date %r", value)
            return None
    return None


def whole_days_between(later: datetime, earlier: datetime) -> int:
    """(later - earlier) in whole days, truncated toward zero."""
    return int((later - earlier).total_seconds() / SECONDS_PER_DAY)


def classify_on_late_time(
    complete_date: Optional[DateLike],
    due_date: Optional[DateLike],
) -> str:
    """
    Return "On Time (<n> Day)" or "Late Time (<n> Day)".

    Returns "" when either date is missing or unparseable.
    """
    complete = to_datetime(complete_date)
    due = to_datetime(due_date)
    if complete is None or due is None:
        return ""

    diff = whole_days_between(complete, due)
    if diff <= 0:
        return f"On Time ({abs(diff)} Day)"
    return f"Late Time ({diff} Day)"


def is_late(on_late_time: Optional[str]) -> bool:
    return bool(on_late_time) and on_late_time.startswith("Late Time")
