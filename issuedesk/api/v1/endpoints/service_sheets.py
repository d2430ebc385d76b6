"""
Client Service Sheet Endpoints Module

CRUD for client service sheets. A sheet created for a project without a job
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
    ClientServiceSheet, ServiceSheetCreate, ServiceSheetRead, ServiceSheetUpdate,
)
from issuedesk.models.user import User
from issuedesk.api import deps
from issuedesk.services import issue_codes

logger = logging.getLogger(__name__)

router = APIRouter()

JSON_FIELDS = ("tasks", "customer_info", "service_by_info", "charge_types")
# List columns are never null
LIST_FIELDS = ("tasks", "charge_types")


def _get_sheet_or_404(db: Session, sheet_id: int) -> ClientServiceSheet:
    sheet = db.get(ClientServiceSheet, sheet_id)
    if not sheet:
        raise HTTPException(status_code=404, detail="Service sheet not found")
    return sheet


@router.get("", response_model=List[ServiceSheetRead])
def list_service_sheets(
    skip: int = 0,
    limit: int = 100,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of service sheets, newest first.
    """
    statement = select(ClientServiceSheet)
    if project_id:
        statement = statement.where(ClientServiceSheet.project_id == project_id)
    statement = statement.order_by(ClientServiceSheet.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/job-codes/next")
def preview_next_job_code(
    project_id: int,
    on_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    The job code a new sheet of the project dated ``on_date`` (today by
    default) would get.
    """
    project = deps.get_project_or_404(project_id, db)
    return {"job_code": issue_codes.preview_job_code(db, ClientServiceSheet, project, on_date)}


@router.get("/{sheet_id}", response_model=ServiceSheetRead)
def read_service_sheet(
    sheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    return _get_sheet_or_404(db, sheet_id)


@router.post("", response_model=ServiceSheetRead, status_code=status.HTTP_201_CREATED)
def create_service_sheet(
    sheet_in: ServiceSheetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a service sheet.

    When ``job_code`` is omitted and ``project_id`` is set, the next job code
    of the project for the sheet's date is allocated.
    """
    sheet = ClientServiceSheet(**dump_for_table(sheet_in, JSON_FIELDS))

    if sheet.project_id:
        project = deps.get_project_or_404(sheet.project_id, db)
        if not sheet.project_name:
            sheet.project_name = project.project_name
        if not sheet.job_code:
            on_date = sheet.date.date() if sheet.date else date.today()
            sheet.job_code = issue_codes.preview_job_code(db, ClientServiceSheet, project, on_date)

    db.add(sheet)
    db.commit()
    db.refresh(sheet)
    logger.info("Service sheet %s created by %s", sheet.job_code, current_user.email)
    return sheet


@router.patch("/{sheet_id}", response_model=ServiceSheetRead)
def update_service_sheet(
    sheet_id: int,
    sheet_in: ServiceSheetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    sheet = _get_sheet_or_404(db, sheet_id)
    for key, value in dump_for_table(sheet_in, JSON_FIELDS, exclude_unset=True).items():
        if key in LIST_FIELDS and value is None:
            value = []
        setattr(sheet, key, value)
    sheet.updated_at = utc_now_iso()

    db.add(sheet)
    db.commit()
    db.refresh(sheet)
    return sheet


@router.post("/{sheet_id}/duplicate", response_model=ServiceSheetRead, status_code=status.HTTP_201_CREATED)
def duplicate_service_sheet(
    sheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Copy a service sheet. The copy's job code is the original's plus "-COPY".
    """
    source = _get_sheet_or_404(db, sheet_id)
    data = utc_values(source.model_dump(exclude={"id", "created_at", "updated_at"}))
    sheet_copy = ClientServiceSheet(**data)
    sheet_copy.job_code = f"{source.job_code or ''}-COPY"

    db.add(sheet_copy)
    db.commit()
    db.refresh(sheet_copy)
    return sheet_copy


@router.delete("/{sheet_id}")
def delete_service_sheet(
    sheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    sheet = _get_sheet_or_404(db, sheet_id)
    db.delete(sheet)
    db.commit()
    return {"status": "success", "detail": "Service sheet deleted"}
