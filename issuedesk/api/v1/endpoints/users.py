"""
User Read Endpoints Module

Listing and lookup of accounts. Every mutation of another account lives in
user_admin.py.
"""
from typing import Any, List, Literal
from fastapi import APIRouter, Depends
from sqlmodel import Session, select
from issuedesk.api import deps
from issuedesk.db.session import get_db
from issuedesk.models.user import User, UserStatus
from issuedesk.schemas.user import UserOption, UserRead

router = APIRouter()

# Which job positions may be picked for each assignee field of an issue
OPTION_POSITIONS = {
    "developer": ("Developer",),
    "ba-test": ("Business Analyst", "Tester"),
}

@router.get("", response_model=List[UserRead])
def read_users(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(deps.get_current_active_superuser),
) -> Any:
    """
    Retrieve a paginated list of all users.

    Only administrators can access this endpoint.
    """
    return db.exec(select(User).order_by(User.created_at).offset(skip).limit(limit)).all()

@router.get("/me", response_model=UserRead)
def read_user_me(
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    """
    Get the current authenticated user's profile.
    """
    return current_user

@router.get("/options/{kind}", response_model=List[UserOption])
def read_user_options(
    kind: Literal["developer", "ba-test"],
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    """
    Active users selectable as developer or BA/tester of an issue.

    Issues store assignees by name, so value and label are both the user name.
    """
    statement = select(User).where(
        User.job_position.in_(OPTION_POSITIONS[kind]),
        User.status == UserStatus.ACTIVE,
    ).order_by(User.user_name)
    return [UserOption(value=u.user_name, label=u.user_name) for u in db.exec(statement).all()]
