"""
Write path for issue dates.

on_late_time is stored on the issue so lists can be filtered and counted by
it, which means it must change whenever due_date or complete_date does.
apply_issue_dates is the only place that assigns the date fields, and it
always rewrites on_late_time in the same call.
"""
import logging
from typing import Optional

from issuedesk.models.base import utc_now_iso, utc_values
from issuedesk.models.issue import Issue, IssueCreate, IssueUpdate, SubtaskCreate
from issuedesk.services.lateness import classify_on_late_time, to_datetime

logger = logging.getLogger(__name__)

DATE_FIELDS = ("start_date", "due_date", "complete_date")

# Marker for "leave this date unchanged"; None means "clear it"
UNCHANGED = object()


def apply_issue_dates(
    issue: Issue,
    start_date=UNCHANGED,
    due_date=UNCHANGED,
    complete_date=UNCHANGED,
) -> Issue:
    if start_date is not UNCHANGED:
        issue.start_date = to_datetime(start_date)
    if due_date is not UNCHANGED:
        issue.due_date = to_datetime(due_date)
    if complete_date is not UNCHANGED:
        issue.complete_date = to_datetime(complete_date)

    issue.on_late_time = classify_on_late_time(issue.complete_date, issue.due_date)
    return issue


def update_issue(issue: Issue, issue_in: IssueUpdate) -> Issue:
    """Apply a partial update; only fields present in the request are touched."""
    update_data = utc_values(issue_in.model_dump(exclude_unset=True))
    dates = {field: update_data.pop(field) for field in DATE_FIELDS if field in update_data}

    for field, value in update_data.items():
        setattr(issue, field, value)

    apply_issue_dates(issue, **dates)
    if dates:
        logger.debug("Issue %s dates changed (%s): %r", issue.issue_code, ", ".join(dates), issue.on_late_time)
    issue.updated_at = utc_now_iso()
    return issue


def issue_to_create(source: Issue, title: Optional[str] = None) -> IssueCreate:
    """
    Build the create payload for a copy of ``source``, subtasks included.

    The copy gets a fresh issue code and issue date when it is created.
    """
    return IssueCreate(
        issue_date=None,
        title=title or source.title,
        description=source.description,
        type=source.type,
        priority=source.priority,
        status=source.status,
        start_date=source.start_date,
        due_date=source.due_date,
        complete_date=source.complete_date,
        developer=source.developer,
        ba_test=source.ba_test,
        remark=source.remark,
        document=source.document,
        subtasks=[
            SubtaskCreate(
                details=sub.details,
                date=sub.date,
                complete_date=sub.complete_date,
                ba_test=sub.ba_test,
                status=sub.status,
                remark=sub.remark,
            )
            for sub in source.subtasks
        ],
    )
