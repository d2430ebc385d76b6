"""
Issue Endpoints Module

This module provides read, update, delete and duplicate endpoints for a single
issue, plus CRUD for its subtasks. Issues are created through
/projects/{project_id}/issues so that the code allocation always has a project.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.base import dump_for_table
from issuedesk.models.issue import (
    Issue, IssueReadWithSubtasks, IssueUpdate,
    Subtask, SubtaskCreate, SubtaskRead, SubtaskUpdate,
)
from issuedesk.models.project import Project
from issuedesk.models.user import User
from issuedesk.api import deps
from issuedesk.services import issue_codes
from issuedesk.services.issues import issue_to_create, update_issue as apply_issue_update

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_issue_or_404(db: Session, issue_id: int) -> Issue:
    issue = db.get(Issue, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue


def _get_subtask_or_404(db: Session, issue_id: int, subtask_id: int) -> Subtask:
    subtask = db.get(Subtask, subtask_id)
    if not subtask or subtask.issue_id != issue_id:
        raise HTTPException(status_code=404, detail="Subtask not found")
    return subtask


@router.get("/{issue_id}", response_model=IssueReadWithSubtasks)
def read_issue(
    issue_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Get a specific issue with its subtasks.
    """
    return _get_issue_or_404(db, issue_id)


@router.patch("/{issue_id}", response_model=IssueReadWithSubtasks)
def update_issue(
    issue_id: int,
    issue_in: IssueUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Update an existing issue.

    The issue code cannot be changed. on_late_time is recomputed from the
    resulting due and complete dates on every update.
    """
    issue = _get_issue_or_404(db, issue_id)
    apply_issue_update(issue, issue_in)

    db.add(issue)
    db.commit()
    db.refresh(issue)
    return issue


@router.delete("/{issue_id}")
def delete_issue(
    issue_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Delete an issue together with its subtasks.

    The issue code is not handed out again unless it was the highest run
    of its month.
    """
    issue = _get_issue_or_404(db, issue_id)
    issue_code = issue.issue_code
    db.delete(issue)
    db.commit()
    logger.info("Issue %s deleted by %s", issue_code, current_user.email)
    return {"status": "success", "detail": "Issue deleted"}


@router.post("/{issue_id}/duplicate", response_model=IssueReadWithSubtasks, status_code=status.HTTP_201_CREATED)
def duplicate_issue(
    issue_id: int,
    title: Optional[str] = Body(default=None, embed=True),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Copy an issue and its subtasks into a new issue of the same project.

    The copy gets its own issue code and today's issue date.
    """
    source = _get_issue_or_404(db, issue_id)
    project = db.get(Project, source.project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return issue_codes.create_issue(db, project, issue_to_create(source, title=title))


# ======================
# Subtasks
# ======================

@router.get("/{issue_id}/subtasks", response_model=List[SubtaskRead])
def list_subtasks(
    issue_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    _get_issue_or_404(db, issue_id)
    statement = select(Subtask).where(Subtask.issue_id == issue_id).order_by(Subtask.id)
    return db.exec(statement).all()


@router.post("/{issue_id}/subtasks", response_model=SubtaskRead, status_code=status.HTTP_201_CREATED)
def create_subtask(
    issue_id: int,
    subtask_in: SubtaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Add a subtask to an issue.
    """
    _get_issue_or_404(db, issue_id)
    subtask = Subtask(**dump_for_table(subtask_in, ()), issue_id=issue_id)
    db.add(subtask)
    db.commit()
    db.refresh(subtask)
    return subtask


@router.patch("/{issue_id}/subtasks/{subtask_id}", response_model=SubtaskRead)
def update_subtask(
    issue_id: int,
    subtask_id: int,
    subtask_in: SubtaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    subtask = _get_subtask_or_404(db, issue_id, subtask_id)
    for key, value in dump_for_table(subtask_in, (), exclude_unset=True).items():
        setattr(subtask, key, value)

    db.add(subtask)
    db.commit()
    db.refresh(subtask)
    return subtask


@router.delete("/{issue_id}/subtasks/{subtask_id}")
def delete_subtask(
    issue_id: int,
    subtask_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    subtask = _get_subtask_or_404(db, issue_id, subtask_id)
    db.delete(subtask)
    db.commit()
    return {"status": "success", "detail": "Subtask deleted"}
