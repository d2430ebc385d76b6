"""
Scope of Work Endpoints Module

CRUD for scope-of-work papers. Lists are newest first and can be narrowed to
one project.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.base import dump_for_table, utc_now_iso
from issuedesk.models.scope_of_work import (
    ScopeOfWork, ScopeOfWorkCreate, ScopeOfWorkRead, ScopeOfWorkUpdate,
)
from issuedesk.models.user import User
from issuedesk.api import deps

logger = logging.getLogger(__name__)

router = APIRouter()

JSON_FIELDS = ("files",)


def _get_scope_or_404(db: Session, scope_id: int) -> ScopeOfWork:
    scope = db.get(ScopeOfWork, scope_id)
    if not scope:
        raise HTTPException(status_code=404, detail="Scope of work not found")
    return scope


@router.get("", response_model=List[ScopeOfWorkRead])
def list_scopes(
    skip: int = 0,
    limit: int = 100,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    statement = select(ScopeOfWork)
    if project_id:
        statement = statement.where(ScopeOfWork.project_id == project_id)
    statement = statement.order_by(ScopeOfWork.created_at.desc(), ScopeOfWork.id.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{scope_id}", response_model=ScopeOfWorkRead)
def read_scope(
    scope_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    return _get_scope_or_404(db, scope_id)


@router.post("", response_model=ScopeOfWorkRead, status_code=status.HTTP_201_CREATED)
def create_scope(
    scope_in: ScopeOfWorkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a scope of work. When it is linked to a project and carries no
    project name, the project's name is filled in.
    """
    scope = ScopeOfWork(**dump_for_table(scope_in, JSON_FIELDS))
    if scope.project_id and not scope.project:
        scope.project = deps.get_project_or_404(scope.project_id, db).project_name

    db.add(scope)
    db.commit()
    db.refresh(scope)
    logger.info("Scope of work %s created by %s", scope.doc_no, current_user.email)
    return scope


@router.patch("/{scope_id}", response_model=ScopeOfWorkRead)
def update_scope(
    scope_id: int,
    scope_in: ScopeOfWorkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    scope = _get_scope_or_404(db, scope_id)
    for key, value in dump_for_table(scope_in, JSON_FIELDS, exclude_unset=True).items():
        if key == "files" and value is None:
            value = []
        setattr(scope, key, value)
    scope.updated_at = utc_now_iso()

    db.add(scope)
    db.commit()
    db.refresh(scope)
    return scope


@router.delete("/{scope_id}")
def delete_scope(
    scope_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    scope = _get_scope_or_404(db, scope_id)
    doc_no = scope.doc_no
    db.delete(scope)
    db.commit()
    logger.info("Scope of work %s deleted by %s", doc_no, current_user.email)
    return {"status": "success", "detail": "Scope of work deleted"}
