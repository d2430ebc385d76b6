"""
Privileged User Handlers

Account creation, deletion and credential changes. Every handler is
restricted to administrators and accepts exactly one request schema.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from issuedesk.api import deps
from issuedesk.db.session import get_db
from issuedesk.models.base import utc_now_iso
from issuedesk.models.user import User
from issuedesk.schemas.user import (
    UserCreate, UserCreated, UserDisplayNameUpdate, UserEmailUpdate,
    UserPasswordUpdate, UserProfileUpdate, UserRead, UserStatusUpdate,
)
from issuedesk.core.security import get_password_hash
from issuedesk.services.issue_codes import next_user_code

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_or_404(db: Session, user_id: str) -> User:
    db_user = db.get(User, user_id)
    if not db_user:
        raise HTTPException(
            status_code=404,
            detail="The user with this id does not exist in the system",
        )
    return db_user


def _ensure_email_free(db: Session, email: str) -> None:
    if db.exec(select(User).where(User.email == email)).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already in use",
        )


def _save(db: Session, db_user: User) -> User:
    db_user.updated_at = utc_now_iso()
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


@router.post("/users", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def create_user_admin(
    *,
    db: Session = Depends(get_db),
    user_in: UserCreate,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Create a new account. Role defaults to Staff and status to Active.

    The user code is allocated here: LC- plus the highest existing number + 1.
    """
    _ensure_email_free(db, user_in.email)

    db_user = User(
        email=user_in.email,
        password=get_password_hash(user_in.password),
        user_name=user_in.user_name,
        user_code=next_user_code(db.exec(select(User.user_code)).all()),
        job_position=user_in.job_position,
        role=user_in.role,
        status=user_in.status,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Admin %s created user %s (%s)", current_user.email, db_user.id, db_user.email)
    return UserCreated(uid=db_user.id)


@router.patch("/users/{user_id}/profile", response_model=UserRead)
def update_user_profile(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    profile_in: UserProfileUpdate,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Update profile fields of a user. Only the fields sent are changed.
    """
    db_user = _get_user_or_404(db, user_id)
    for field, value in profile_in.model_dump(exclude_unset=True).items():
        setattr(db_user, field, value)
    return _save(db, db_user)


@router.patch("/users/{user_id}/email", response_model=UserRead)
def update_user_email(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    email_in: UserEmailUpdate,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    db_user = _get_user_or_404(db, user_id)
    if email_in.email != db_user.email:
        _ensure_email_free(db, email_in.email)
    db_user.email = email_in.email
    return _save(db, db_user)


@router.patch("/users/{user_id}/password", response_model=UserRead)
def reset_user_password(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    password_in: UserPasswordUpdate,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Set a new password for a user on their behalf.
    """
    db_user = _get_user_or_404(db, user_id)
    db_user.password = get_password_hash(password_in.new_password)
    logger.info("Admin %s reset the password of user %s", current_user.email, user_id)
    return _save(db, db_user)


@router.patch("/users/{user_id}/display-name", response_model=UserRead)
def update_user_display_name(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    name_in: UserDisplayNameUpdate,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    db_user = _get_user_or_404(db, user_id)
    db_user.user_name = name_in.user_name
    return _save(db, db_user)


@router.patch("/users/{user_id}/status", response_model=UserRead)
def update_user_status(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    status_in: UserStatusUpdate,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Activate or deactivate an account. Inactive users cannot sign in.
    """
    db_user = _get_user_or_404(db, user_id)
    db_user.status = status_in.status
    logger.info("Admin %s set user %s to %s", current_user.email, user_id, status_in.status.value)
    return _save(db, db_user)


@router.delete("/users/{user_id}")
def delete_user(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(deps.get_current_active_superuser),
):
    """
    Delete an account.

    Raises:
        HTTPException 404: If the user doesn't exist
        HTTPException 400: If trying to delete yourself
    """
    db_user = _get_user_or_404(db, user_id)

    # Prevent self-deletion
    if db_user.id == current_user.id:
        raise HTTPException(
            status_code=400, detail="Users cannot delete themselves"
        )

    db.delete(db_user)
    db.commit()
    logger.info("Admin %s deleted user %s", current_user.email, user_id)
    return {"success": True}
