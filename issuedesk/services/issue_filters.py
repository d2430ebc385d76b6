"""
Issue list filtering: keyword, exact-match fields and date ranges.

Each date field can be filtered with a DateFilter whose type is one of
thisMonth, thisYear, customMonth, customYear or customRange. Ranges are
inclusive and compared at day granularity. An issue without a value for a
filtered date field is excluded.
"""
import calendar
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel

from issuedesk.models.issue import Issue
from issuedesk.services.lateness import to_datetime

logger = logging.getLogger(__name__)

DateRange = Tuple[Optional[date], Optional[date]]

THIS_MONTH = "thisMonth"
THIS_YEAR = "thisYear"
CUSTOM_MONTH = "customMonth"
CUSTOM_YEAR = "customYear"
CUSTOM_RANGE = "customRange"


class DateFilter(BaseModel):
    type: str = ""
    # Any day of the month/year for customMonth/customYear, range start for customRange
    value: Optional[date] = None
    # Range end for customRange
    end: Optional[date] = None


class IssueFilters(BaseModel):
    keyword: Optional[str] = None
    status: Optional[str] = None
    developer: Optional[str] = None
    ba_test: Optional[str] = None
    issue_date: DateFilter = DateFilter()
    start_date: DateFilter = DateFilter()
    due_date: DateFilter = DateFilter()
    complete_date: DateFilter = DateFilter()


def _month_bounds(day: date) -> DateRange:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def _year_bounds(day: date) -> DateRange:
    return date(day.year, 1, 1), date(day.year, 12, 31)


def date_range(date_filter: Optional[DateFilter], today: Optional[date] = None) -> DateRange:
    """Resolve a filter to inclusive (start, end) days; (None, None) means no filtering."""
    if date_filter is None or not date_filter.type:
        return None, None

    today = today or date.today()
    kind = date_filter.type
    if kind == THIS_MONTH:
        return _month_bounds(today)
    if kind == THIS_YEAR:
        return _year_bounds(today)
    if kind == CUSTOM_MONTH and date_filter.value:
        return _month_bounds(date_filter.value)
    if kind == CUSTOM_YEAR and date_filter.value:
        return _year_bounds(date_filter.value)
    if kind == CUSTOM_RANGE:
        return date_filter.value, date_filter.end

    logger.debug("Ignoring date filter %r", date_filter)
    return None, None


def in_range(value: Optional[datetime], bounds: DateRange) -> bool:
    start, end = bounds
    if start is None and end is None:
        return True

    moment = to_datetime(value)
    if moment is None:
        return False
    day = moment.date()
    return (start is None or day >= start) and (end is None or day <= end)


def matches_keyword(issue: Issue, keyword: Optional[str]) -> bool:
    needle = (keyword or "").lower()
    return needle in (issue.issue_code or "").lower() or needle in (issue.title or "").lower()


def filter_issues(
    issues: Iterable[Issue],
    filters: IssueFilters,
    today: Optional[date] = None,
) -> List[Issue]:
    ranges = {
        field: date_range(getattr(filters, field), today)
        for field in ("issue_date", "start_date", "due_date", "complete_date")
    }

    def keep(issue: Issue) -> bool:
        if not matches_keyword(issue, filters.keyword):
            return False
        if filters.status and (issue.status or "") != filters.status:
            return False
        if filters.developer and (issue.developer or "") != filters.developer:
            return False
        if filters.ba_test and (issue.ba_test or "") != filters.ba_test:
            return False
        return all(in_range(getattr(issue, field), bounds) for field, bounds in ranges.items())

    return [issue for issue in issues if keep(issue)]
