"""
Project Change Request Endpoints Module

CRUD for project change requests. A request created for a project without a job
code gets the next {projectCode}-{DDMMYYYY}-{run} code of its date.
"""
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.base import dump_for_table, utc_now_iso, utc_values
from issuedesk.models.service_sheet import (
    ProjectChangeRequest, ChangeRequestCreate, ChangeRequestRead, ChangeRequestUpdate,
)
from issuedesk.models.user import User
from issuedesk.api import deps
from issuedesk.services import issue_codes

logger = logging.getLogger(__name__)

router = APIRouter()

JSON_FIELDS = ("tasks", "customer_info", "service_by_info", "charge_types")
# List columns are never null
LIST_FIELDS = ("tasks", "charge_types")


def _get_request_or_404(db: Session, request_id: int) -> ProjectChangeRequest:
    change_request = db.get(ProjectChangeRequest, request_id)
    if not change_request:
        raise HTTPException(status_code=404, detail="Change request not found")
    return change_request


@router.get("", response_model=List[ChangeRequestRead])
def list_change_requests(
    skip: int = 0,
    limit: int = 100,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of change requests, newest first.
    """
    statement = select(ProjectChangeRequest)
    if project_id:
        statement = statement.where(ProjectChangeRequest.project_id == project_id)
    statement = statement.order_by(ProjectChangeRequest.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/job-codes/next")
def preview_next_job_code(
    project_id: int,
    on_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    The job code a new change request of the project dated ``on_date`` (today by
    default) would get.
    """
    project = deps.get_project_or_404(project_id, db)
    return {"job_code": issue_codes.preview_job_code(db, ProjectChangeRequest, project, on_date)}


@router.get("/{request_id}", response_model=ChangeRequestRead)
def read_change_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    return _get_request_or_404(db, request_id)


@router.post("", response_model=ChangeRequestRead, status_code=status.HTTP_201_CREATED)
def create_change_request(
    request_in: ChangeRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a change request.

    When ``job_code`` is omitted and ``project_id`` is set, the next job code
    of the project for the request date is allocated.
    """
    change_request = ProjectChangeRequest(**dump_for_table(request_in, JSON_FIELDS))

    if change_request.project_id:
        project = deps.get_project_or_404(change_request.project_id, db)
        if not change_request.project_name:
            change_request.project_name = project.project_name
        if not change_request.job_code:
            on_date = change_request.date.date() if change_request.date else date.today()
            change_request.job_code = issue_codes.preview_job_code(db, ProjectChangeRequest, project, on_date)

    db.add(change_request)
    db.commit()
    db.refresh(change_request)
    logger.info("Change request %s created by %s", change_request.job_code, current_user.email)
    return change_request


@router.patch("/{request_id}", response_model=ChangeRequestRead)
def update_change_request(
    request_id: int,
    request_in: ChangeRequestUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    change_request = _get_request_or_404(db, request_id)
    for key, value in dump_for_table(request_in, JSON_FIELDS, exclude_unset=True).items():
        if key in LIST_FIELDS and value is None:
            value = []
        setattr(change_request, key, value)
    change_request.updated_at = utc_now_iso()

    db.add(change_request)
    db.commit()
    db.refresh(change_request)
    return change_request


@router.post("/{request_id}/duplicate", response_model=ChangeRequestRead, status_code=status.HTTP_201_CREATED)
def duplicate_change_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Copy a change request. The copy keeps the original job code.
    """
    source = _get_request_or_404(db, request_id)
    data = utc_values(source.model_dump(exclude={"id", "created_at", "updated_at"}))
    request_copy = ProjectChangeRequest(**data)

    db.add(request_copy)
    db.commit()
    db.refresh(request_copy)
    return request_copy


@router.delete("/{request_id}")
def delete_change_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    change_request = _get_request_or_404(db, request_id)
    db.delete(change_request)
    db.commit()
    return {"status": "success", "detail": "Change request deleted"}
