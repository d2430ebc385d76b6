from .user import User, UserRole, UserStatus
from .project import Project
from .issue import Issue, Subtask, IssueStatus, IssueType, IssuePriority
from .service_sheet import ClientServiceSheet, ProjectChangeRequest
from .meeting_summary import MeetingSummary
from .other_document import OtherDocument
from .scope_of_work import ScopeOfWork

__all__ = [
    "User", "UserRole", "UserStatus",
    "Project",
    "Issue", "Subtask", "IssueStatus", "IssueType", "IssuePriority",
    "ClientServiceSheet", "ProjectChangeRequest",
    "MeetingSummary",
    "OtherDocument",
    "ScopeOfWork",
]
