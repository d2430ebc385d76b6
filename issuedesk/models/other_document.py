"""
Other Document Model Module

Free-form project documents (quotations, contracts, handover papers...) with
their attached files. created_by / updated_by are stamped by the API from the
authenticated user, never taken from the request body.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field, JSON

from issuedesk.models.base import FileRef, utc_now_iso, reject_null


class OtherDocumentBase(SQLModel):
    doc_no: str = Field(nullable=False)
    doc_date: Optional[datetime] = None
    doc_type: str = Field(default="", index=True)
    project: Optional[str] = None  # Project name as shown on the document
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id")
    customer: Optional[str] = None
    description: Optional[str] = None
    remark: Optional[str] = None


class OtherDocument(OtherDocumentBase, table=True):
    __tablename__ = "other_documents"

    id: Optional[int] = Field(default=None, primary_key=True)
    files: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)


class OtherDocumentCreate(OtherDocumentBase):
    files: List[FileRef] = []


class OtherDocumentUpdate(SQLModel):
    doc_no: Optional[str] = None
    doc_date: Optional[datetime] = None
    doc_type: Optional[str] = None
    project: Optional[str] = None
    project_id: Optional[int] = None
    customer: Optional[str] = None
    description: Optional[str] = None
    remark: Optional[str] = None
    files: Optional[List[FileRef]] = None

    @field_validator("doc_no", "doc_type")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class OtherDocumentRead(OtherDocumentBase):
    id: int
    files: List[FileRef] = []
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
