"""
Dashboard Endpoints Module

Cross-project views of issues for the landing page: every issue with the
name of its project, and headline counts.
"""
from collections import Counter
from typing import Any, Dict, List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.issue import Issue, IssueReadWithProject, IssueStatus
from issuedesk.models.project import Project
from issuedesk.models.user import User
from issuedesk.api import deps
from issuedesk.services.lateness import is_late

router = APIRouter()

UNKNOWN_PROJECT = "Unknown Project"


@router.get("/issues", response_model=List[IssueReadWithProject])
def list_dashboard_issues(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    All issues, newest first, each with the name of its project.

    Issues whose project no longer exists are reported under "Unknown Project".
    """
    statement = (
        select(Issue, Project.project_name)
        .join(Project, Issue.project_id == Project.id, isouter=True)
        .order_by(Issue.created_at.desc())
    )
    return [
        IssueReadWithProject.model_validate(issue, update={"project_name": project_name or UNKNOWN_PROJECT})
        for issue, project_name in db.exec(statement).all()
    ]


@router.get("/summary")
def dashboard_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
) -> Dict[str, Any]:
    """
    Issue counts for the dashboard cards.

    Returns:
        total: number of issues
        by_status: count per issue status (every status is present)
        on_time / late: counts among issues that have an on_late_time label
    """
    rows = db.exec(select(Issue.status, Issue.on_late_time)).all()

    by_status = Counter(status for status, _ in rows)
    labelled = [label for _, label in rows if label]
    late = sum(1 for label in labelled if is_late(label))

    return {
        "total": len(rows),
        "by_status": {s.value: by_status.get(s.value, 0) for s in IssueStatus},
        "on_time": len(labelled) - late,
        "late": late,
    }
