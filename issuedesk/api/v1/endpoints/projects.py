"""
Project Endpoints Module

This module provides CRUD endpoints for project records and the
project-scoped issue endpoints (listing, next code preview, creation).
Every active user can read projects; only administrators can change them.
"""
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.base import utc_now_iso
from issuedesk.models.issue import Issue, IssueCreate, IssueRead, IssueReadWithSubtasks
from issuedesk.models.project import Project, ProjectCreate, ProjectRead, ProjectUpdate
from issuedesk.models.user import User
from issuedesk.api import deps
from issuedesk.services import issue_codes
from issuedesk.services.issue_filters import DateFilter, IssueFilters, filter_issues

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_code_free(db: Session, project_code: str) -> None:
    if db.exec(select(Project).where(Project.project_code == project_code)).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Project code {project_code} already exists",
        )


@router.get("", response_model=List[ProjectRead])
def list_projects(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of projects, newest first.
    """
    statement = select(Project).order_by(Project.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{project_id}", response_model=ProjectRead)
def read_project(
    project: Project = Depends(deps.get_project_or_404),
    current_user: User = Depends(deps.get_current_active_user),
):
    return project


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Create a new project.

    Raises:
        HTTPException 409: If the project code is already used
    """
    _ensure_code_free(db, project_in.project_code)

    project = Project.model_validate(project_in, update={
        "created_by": current_user.user_name,
        "modified_by": current_user.user_name,
    })
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("Project %s created by %s", project.project_code, current_user.email)
    return project


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_in: ProjectUpdate,
    project: Project = Depends(deps.get_project_or_404),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Update an existing project.

    Changing the project code only affects codes allocated afterwards.
    """
    update_data = project_in.model_dump(exclude_unset=True)
    new_code = update_data.get("project_code")
    if new_code and new_code != project.project_code:
        _ensure_code_free(db, new_code)

    for key, value in update_data.items():
        setattr(project, key, value)
    project.modified_by = current_user.user_name
    project.updated_at = utc_now_iso()

    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.delete("/{project_id}")
def delete_project(
    project: Project = Depends(deps.get_project_or_404),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Delete a project that has no issues left.

    Raises:
        HTTPException 409: If the project still has issues
    """
    has_issues = db.exec(select(Issue.id).where(Issue.project_id == project.id)).first()
    if has_issues is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Delete the project's issues first",
        )

    project_code = project.project_code
    db.delete(project)
    db.commit()
    logger.info("Project %s deleted by %s", project_code, current_user.email)
    return {"status": "success", "detail": "Project deleted"}


# ======================
# Project issues
# ======================

@router.get("/{project_id}/issues", response_model=List[IssueRead])
def list_project_issues(
    keyword: Optional[str] = None,
    issue_status: Optional[str] = Query(default=None, alias="status"),
    developer: Optional[str] = None,
    ba_test: Optional[str] = None,
    issue_date_filter: str = "",
    issue_date_from: Optional[date] = None,
    issue_date_to: Optional[date] = None,
    start_date_filter: str = "",
    start_date_from: Optional[date] = None,
    start_date_to: Optional[date] = None,
    due_date_filter: str = "",
    due_date_from: Optional[date] = None,
    due_date_to: Optional[date] = None,
    complete_date_filter: str = "",
    complete_date_from: Optional[date] = None,
    complete_date_to: Optional[date] = None,
    project: Project = Depends(deps.get_project_or_404),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Issues of the project, newest first.

    Each date field takes a filter type (thisMonth, thisYear, customMonth,
    customYear, customRange) plus a ``_from`` day (the month/year for the
    custom types, the range start for customRange) and a ``_to`` day.
    """
    filters = IssueFilters(
        keyword=keyword,
        status=issue_status,
        developer=developer,
        ba_test=ba_test,
        issue_date=DateFilter(type=issue_date_filter, value=issue_date_from, end=issue_date_to),
        start_date=DateFilter(type=start_date_filter, value=start_date_from, end=start_date_to),
        due_date=DateFilter(type=due_date_filter, value=due_date_from, end=due_date_to),
        complete_date=DateFilter(type=complete_date_filter, value=complete_date_from, end=complete_date_to),
    )
    statement = select(Issue).where(Issue.project_id == project.id).order_by(Issue.created_at.desc())
    return filter_issues(db.exec(statement).all(), filters)


@router.get("/{project_id}/issue-codes/next")
def preview_next_issue_code(
    project: Project = Depends(deps.get_project_or_404),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    The code the next issue of this project would get right now.

    Informational only: the code is allocated again when the issue is saved.
    """
    return {"issue_code": issue_codes.preview_issue_code(db, project)}


@router.post("/{project_id}/issues", response_model=IssueReadWithSubtasks, status_code=status.HTTP_201_CREATED)
def create_project_issue(
    issue_in: IssueCreate,
    project: Project = Depends(deps.get_project_or_404),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create an issue (and optional subtasks) with a newly allocated issue code.
    """
    return issue_codes.create_issue(db, project, issue_in)
