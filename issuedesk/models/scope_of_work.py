"""
Scope of Work Model Module

Scope-of-work papers agreed with a customer for a project, with their
attached files.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field, JSON

from issuedesk.models.base import FileRef, utc_now_iso, reject_null


class ScopeOfWorkBase(SQLModel):
    doc_no: str = Field(nullable=False)
    doc_date: Optional[datetime] = None
    doc_type: str = ""
    project: Optional[str] = None
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id", index=True)
    customer: Optional[str] = None
    description: Optional[str] = None
    remark: Optional[str] = None


class ScopeOfWork(ScopeOfWorkBase, table=True):
    __tablename__ = "scopes_of_work"

    id: Optional[int] = Field(default=None, primary_key=True)
    files: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    created_at: Optional[str] = Field(default_factory=utc_now_iso, index=True)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)


class ScopeOfWorkCreate(ScopeOfWorkBase):
    files: List[FileRef] = []


class ScopeOfWorkUpdate(SQLModel):
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


class ScopeOfWorkRead(ScopeOfWorkBase):
    id: int
    files: List[FileRef] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
