"""
Issue and Subtask Models Module

Issues belong to a project and are identified by an issue code of the form
{projectCode}-{MM}{YYYY}-{run}. Subtasks are child rows of an issue and are
deleted together with it.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field, Relationship, AutoString

from issuedesk.models.base import utc_now_iso, reject_null


class IssueStatus(str, Enum):
    awaiting = "Awaiting"
    inprogress = "Inprogress"
    complete = "Complete"
    cancel = "Cancel"


class IssueType(str, Enum):
    task = "Task"
    bug = "Bug"
    performance = "Performance"
    enquiry = "Enquiry"


class IssuePriority(str, Enum):
    highest = "Highest"
    high = "High"
    medium = "Medium"
    low = "Low"
    lowest = "Lowest"


class SubtaskBase(SQLModel):
    details: str = Field(nullable=False)
    date: Optional[datetime] = None
    complete_date: Optional[datetime] = None
    ba_test: Optional[str] = None
    status: Optional[str] = None
    remark: Optional[str] = None


class Subtask(SubtaskBase, table=True):
    __tablename__ = "subtasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    issue_id: int = Field(foreign_key="issues.id", index=True, nullable=False)
    created_at: Optional[str] = Field(default_factory=utc_now_iso)

    issue: Optional["Issue"] = Relationship(back_populates="subtasks")


class SubtaskCreate(SubtaskBase):
    pass


class SubtaskUpdate(SQLModel):
    details: Optional[str] = None
    date: Optional[datetime] = None
    complete_date: Optional[datetime] = None
    ba_test: Optional[str] = None
    status: Optional[str] = None
    remark: Optional[str] = None

    @field_validator("details")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class SubtaskRead(SubtaskBase):
    id: int
    issue_id: int
    created_at: Optional[str] = None


class IssueBase(SQLModel):
    """
    Free-text and classification fields of an issue.

    Date fields are not part of the base: they can only be
    written through services.issues.apply_issue_dates, which keeps
    on_late_time in step with them.
    """
    issue_date: Optional[datetime] = None
    title: str = Field(nullable=False)
    description: Optional[str] = None

    type: Optional[IssueType] = Field(default=IssueType.task, sa_type=AutoString)
    priority: Optional[IssuePriority] = Field(default=IssuePriority.medium, sa_type=AutoString)
    status: Optional[IssueStatus] = Field(default=IssueStatus.awaiting, sa_type=AutoString)

    # Assignees are stored by display name
    developer: Optional[str] = None
    ba_test: Optional[str] = None

    remark: Optional[str] = None
    document: Optional[str] = None


class Issue(IssueBase, table=True):
    """
    Issue table model.

    Attributes:
        issue_code: Unique identifier allocated by services.issue_codes
        on_late_time: "On Time (<n> Day)" / "Late Time (<n> Day)" or "" when
            the issue has no due or complete date
    """
    __tablename__ = "issues"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, nullable=False)

    # The unique constraint is what makes concurrent allocation safe
    issue_code: str = Field(unique=True, index=True, nullable=False)

    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    complete_date: Optional[datetime] = None
    on_late_time: str = ""

    created_at: Optional[str] = Field(default_factory=utc_now_iso, index=True)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)

    subtasks: List[Subtask] = Relationship(
        back_populates="issue",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Subtask.id"},
    )


class IssueCreate(IssueBase):
    """Schema for creating an issue. The issue code is always allocated server side."""
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    complete_date: Optional[datetime] = None
    subtasks: List[SubtaskCreate] = []


class IssueUpdate(SQLModel):
    """Schema for updating an issue. on_late_time is derived and cannot be sent."""
    issue_date: Optional[datetime] = None
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[IssueType] = None
    priority: Optional[IssuePriority] = None
    status: Optional[IssueStatus] = None
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    complete_date: Optional[datetime] = None
    developer: Optional[str] = None
    ba_test: Optional[str] = None
    remark: Optional[str] = None
    document: Optional[str] = None

    @field_validator("title")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class IssueRead(IssueBase):
    id: int
    project_id: int
    issue_code: str
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    complete_date: Optional[datetime] = None
    on_late_time: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class IssueReadWithSubtasks(IssueRead):
    subtasks: List[SubtaskRead] = []


class IssueReadWithProject(IssueRead):
    project_name: str
