"""
Project Model Module

This module defines the Project model. A project's short code prefixes every
issue code and job code allocated for it.
"""
from typing import Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field

from issuedesk.models.base import utc_now_iso, reject_null


class ProjectBase(SQLModel):
    # Short alphanumeric code, e.g. "LC" -> issue codes "LC-072024-001"
    project_code: str = Field(unique=True, index=True, nullable=False, min_length=1)
    project_name: str = Field(nullable=False)

    # URL of the uploaded logo, if any
    logo: Optional[str] = None


class Project(ProjectBase, table=True):
    """
    Project record.

    Attributes:
        id: Auto-incrementing primary key
        project_code: Unique short code used in issue and job codes
        project_name: Display name
        logo: Logo URL (null when no logo was uploaded)
        created_by: Name of the user who created the project
        modified_by: Name of the user who last changed it
        created_at: ISO timestamp when the project was created
        updated_at: ISO timestamp when the project was last modified
    """
    __tablename__ = "projects"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    created_by: Optional[str] = None
    modified_by: Optional[str] = None

    # Audit timestamps - automatically managed
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(SQLModel):
    project_code: Optional[str] = Field(default=None, min_length=1)
    project_name: Optional[str] = None
    logo: Optional[str] = None

    @field_validator("project_code", "project_name")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class ProjectRead(ProjectBase):
    id: int
    created_by: Optional[str] = None
    modified_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
