"""
Other Document Endpoints Module

CRUD for free-form project documents. Authorship is taken from the
authenticated user: created_by on create, updated_by on every write.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.base import dump_for_table, utc_now_iso
from issuedesk.models.other_document import (
    OtherDocument, OtherDocumentCreate, OtherDocumentRead, OtherDocumentUpdate,
)
from issuedesk.models.user import User
from issuedesk.api import deps

logger = logging.getLogger(__name__)

router = APIRouter()

JSON_FIELDS = ("files",)


def _get_document_or_404(db: Session, document_id: int) -> OtherDocument:
    document = db.get(OtherDocument, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("", response_model=List[OtherDocumentRead])
def list_documents(
    skip: int = 0,
    limit: int = 100,
    doc_type: Optional[str] = None,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of documents, newest first.

    Can be narrowed to one document type and/or one project.
    """
    statement = select(OtherDocument)
    if doc_type:
        statement = statement.where(OtherDocument.doc_type == doc_type)
    if project_id:
        statement = statement.where(OtherDocument.project_id == project_id)
    statement = statement.order_by(OtherDocument.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/types", response_model=List[str])
def list_document_types(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    statement = select(OtherDocument.doc_type).distinct()
    return sorted({t for t in db.exec(statement).all() if t})


@router.get("/{document_id}", response_model=OtherDocumentRead)
def read_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    return _get_document_or_404(db, document_id)


@router.post("", response_model=OtherDocumentRead, status_code=status.HTTP_201_CREATED)
def create_document(
    document_in: OtherDocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a document owned by the current user.
    """
    document = OtherDocument(
        **dump_for_table(document_in, JSON_FIELDS),
        created_by=current_user.user_name,
        updated_by=current_user.user_name,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    logger.info("Document %s created by %s", document.doc_no, current_user.email)
    return document


@router.patch("/{document_id}", response_model=OtherDocumentRead)
def update_document(
    document_id: int,
    document_in: OtherDocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    document = _get_document_or_404(db, document_id)
    for key, value in dump_for_table(document_in, JSON_FIELDS, exclude_unset=True).items():
        if key == "files" and value is None:
            value = []
        setattr(document, key, value)
    document.updated_by = current_user.user_name
    document.updated_at = utc_now_iso()

    db.add(document)
    db.commit()
    db.refresh(document)
    return document


@router.delete("/{document_id}")
def delete_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    document = _get_document_or_404(db, document_id)
    doc_no = document.doc_no
    db.delete(document)
    db.commit()
    logger.info("Document %s deleted by %s", doc_no, current_user.email)
    return {"status": "success", "detail": "Document deleted"}
