"""
Sequence codes for issues, job documents and user accounts.

Issue codes look like ``{projectCode}-{MM}{YYYY}-{run}`` and job codes (client
service sheets, project change requests) like ``{projectCode}-{DD}{MM}{YYYY}-{run}``.
``run`` is a three digit counter scoped to the prefix. The next run is always
the highest existing run plus one: gaps left by deletions are never filled.
User codes (``LC-000001``) follow the same rule with a six digit run and a
fixed prefix.

The pure functions (``issue_code_prefix``, ``next_issue_code``,
``next_job_code``) work on a snapshot of existing codes. ``create_issue``
turns that into an allocate-and-reserve operation: the issue_code column is
unique, so when two requests compute the same code only one insert wins and
the loser re-reads and allocates again.
"""
import logging
import re
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from issuedesk.core.config import settings
from issuedesk.core.exceptions import (
    IssueCodeConflictError,
    IssueStoreUnavailableError,
    ProjectCodeMissingError,
    SequenceExhaustedError,
)
from issuedesk.models.base import as_utc, dump_for_table
from issuedesk.models.issue import Issue, IssueCreate, Subtask
from issuedesk.models.project import Project
from issuedesk.services.issues import apply_issue_dates

logger = logging.getLogger(__name__)

# Last "-" followed by exactly three ASCII digits at the very end
RUN_SUFFIX = re.compile(r"-([0-9]{3})\Z")
RUN_WIDTH = 3

USER_CODE_PREFIX = "LC-"
USER_CODE_WIDTH = 6


def issue_code_prefix(project_code: Optional[str], now: datetime) -> str:
    if not project_code:
        raise ProjectCodeMissingError()
    return f"{project_code}-{now:%m%Y}-"


def job_code_prefix(project_code: Optional[str], on_date: date) -> str:
    if not project_code:
        raise ProjectCodeMissingError()
    return f"{project_code}-{on_date:%d%m%Y}-"


def max_run(prefix: str, existing_codes: Iterable[Optional[str]], suffix: re.Pattern = RUN_SUFFIX) -> int:
    """
    Highest run number among the codes that start with ``prefix``.

    Codes without a well-formed ``suffix`` (``-NNN`` by default) are logged
    and ignored. Returns 0 when nothing matches.
    """
    highest = 0
    for code in existing_codes:
        if not code or not code.startswith(prefix):
            continue
        match = suffix.search(code)
        if match is None:
            logger.warning("Skipping malformed code %r while allocating under %r", code, prefix)
            continue
        highest = max(highest, int(match.group(1)))
    return highest


def next_code(prefix: str, existing_codes: Iterable[Optional[str]], width: int = RUN_WIDTH) -> str:
    suffix = RUN_SUFFIX if width == RUN_WIDTH else re.compile(rf"-([0-9]{{{width}}})\Z")
    run = max_run(prefix, existing_codes, suffix) + 1
    if run > 10 ** width - 1:
        raise SequenceExhaustedError(prefix)
    return f"{prefix}{run:0{width}d}"


def next_user_code(existing_user_codes: Iterable[Optional[str]]) -> str:
    """
    Next staff code, ``LC-`` plus six digits.

    >>> next_user_code(["LC-000001", "LC-000007", ""])
    'LC-000008'
    """
    return next_code(USER_CODE_PREFIX, existing_user_codes, USER_CODE_WIDTH)


def next_issue_code(
    project_code: Optional[str],
    existing_issue_codes: Sequence[Optional[str]],
    now: datetime,
) -> str:
    """
    Next unused issue code for the month of ``now``.

    >>> next_issue_code("PRJ", ["PRJ-062025-001", "PRJ-062025-003", "PRJ-052025-999"],
    ...                 datetime(2025, 6, 2))
    'PRJ-062025-004'
    """
    return next_code(issue_code_prefix(project_code, now), existing_issue_codes)


def next_job_code(
    project_code: Optional[str],
    existing_job_codes: Sequence[Optional[str]],
    on_date: date,
) -> str:
    """Next unused job code for the day ``on_date``."""
    return next_code(job_code_prefix(project_code, on_date), existing_job_codes)


def list_issue_codes_for_project(db: Session, project_id: int) -> List[str]:
    """
    Issue codes of every issue in the project, newest first.

    A project without issues gives an empty list. A failed read is retried
    ISSUE_STORE_READ_RETRIES times and then raised as
    IssueStoreUnavailableError; it never degrades to an empty list.
    """
    statement = (
        select(Issue.issue_code)
        .where(Issue.project_id == project_id)
        .order_by(Issue.created_at.desc())
    )

    attempts = settings.ISSUE_STORE_READ_RETRIES + 1
    for attempt in range(1, attempts + 1):
        try:
            return list(db.exec(statement).all())
        except OperationalError as e:
            db.rollback()
            logger.warning(
                "Reading issue codes for project %s failed (attempt %d/%d): %s",
                project_id, attempt, attempts, e,
            )
            if attempt == attempts:
                raise IssueStoreUnavailableError(project_id, reason=str(e.orig)) from e
    # Unreachable: the loop either returns or raises
    raise IssueStoreUnavailableError(project_id)


def preview_issue_code(db: Session, project: Project, now: Optional[datetime] = None) -> str:
    """The code the next created issue would get, without reserving it."""
    if not project.project_code:
        raise ProjectCodeMissingError(project.id)
    codes = list_issue_codes_for_project(db, project.id)
    return next_issue_code(project.project_code, codes, now or datetime.now(timezone.utc))


def is_issue_code_conflict(error: IntegrityError) -> bool:
    """
    Whether ``error`` is a violation of the unique issue_code index.

    SQLite names the column ("issues.issue_code"), MySQL the index
    ("ix_issues_issue_code"); both mention issue_code.
    """
    return "issue_code" in str(error.orig)


def create_issue(
    db: Session,
    project: Project,
    issue_in: IssueCreate,
    now: Optional[datetime] = None,
) -> Issue:
    """
    Allocate an issue code and insert the issue (with its subtasks) in one go.

    On a unique-constraint conflict the transaction is rolled back and the
    allocation re-runs against a fresh read, up to ISSUE_CODE_MAX_ATTEMPTS.
    """
    if not project.project_code:
        raise ProjectCodeMissingError(project.id)

    now = now or datetime.now(timezone.utc)
    data = dump_for_table(issue_in, (), exclude={"subtasks", "start_date", "due_date", "complete_date"})

    issue_code = ""
    max_attempts = settings.ISSUE_CODE_MAX_ATTEMPTS
    for attempt in range(1, max_attempts + 1):
        codes = list_issue_codes_for_project(db, project.id)
        issue_code = next_issue_code(project.project_code, codes, now)

        issue = Issue(**data, project_id=project.id, issue_code=issue_code)
        if issue.issue_date is None:
            issue.issue_date = as_utc(now)
        apply_issue_dates(
            issue,
            start_date=issue_in.start_date,
            due_date=issue_in.due_date,
            complete_date=issue_in.complete_date,
        )
        issue.subtasks = [Subtask(**dump_for_table(sub, ())) for sub in issue_in.subtasks]

        db.add(issue)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not is_issue_code_conflict(e):
                raise
            logger.warning(
                "Issue code %s already taken (attempt %d/%d), re-allocating",
                issue_code, attempt, max_attempts,
            )
            continue

        db.refresh(issue)
        logger.info("Created issue %s in project %s", issue.issue_code, project.project_code)
        return issue

    raise IssueCodeConflictError(issue_code, max_attempts)


def preview_job_code(db: Session, table, project: Project, on_date: Optional[date] = None) -> str:
    """
    Next job code of ``project`` in ``table`` (ClientServiceSheet or
    ProjectChangeRequest) for the day ``on_date``, today by default.
    """
    if not project.project_code:
        raise ProjectCodeMissingError(project.id)
    codes = db.exec(select(table.job_code).where(table.project_id == project.id)).all()
    return next_job_code(project.project_code, codes, on_date or date.today())
