"""
Domain Exceptions
=================

Raised by the service layer and translated to HTTP responses by the
handler registered in issuedesk.main.

Usage:
    from issuedesk.core.exceptions import IssueCodeConflictError

    try:
        issue = create_issue(db, project, issue_in)
    except IssueCodeConflictError as e:
        logger.error(f"Issue code allocation failed: {e}")
        raise
"""
from typing import Any, Dict, Optional


class IssueDeskError(Exception):
    """Base exception for all IssueDesk errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class ProjectCodeMissingError(IssueDeskError):
    """A sequence code was requested for a project without a short code"""

    status_code = 422

    def __init__(self, project_id: Optional[int] = None):
        super().__init__(
            "Project has no project code; cannot allocate a sequence code",
            code="PROJECT_CODE_MISSING",
            details={"project_id": project_id} if project_id is not None else None
        )


class IssueStoreUnavailableError(IssueDeskError):
    """Existing issue codes could not be read"""

    status_code = 503

    def __init__(self, project_id: int, reason: str = ""):
        super().__init__(
            "Could not read existing issues for this project",
            code="ISSUE_STORE_UNAVAILABLE",
            details={"project_id": project_id, "reason": reason}
        )


class IssueCodeConflictError(IssueDeskError):
    """Every allocation attempt collided with a concurrently reserved code"""

    status_code = 409

    def __init__(self, issue_code: str, attempts: int):
        super().__init__(
            f"Issue code {issue_code} was taken by a concurrent request",
            code="ISSUE_CODE_CONFLICT",
            details={"issue_code": issue_code, "attempts": attempts}
        )


class SequenceExhaustedError(IssueDeskError):
    """Every three digit run of a prefix is used"""

    status_code = 409

    def __init__(self, prefix: str):
        super().__init__(
            f"No run number left under {prefix}",
            code="SEQUENCE_EXHAUSTED",
            details={"prefix": prefix}
        )
