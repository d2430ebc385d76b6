"""
Authentication Endpoints Module

Issues JWT bearer tokens to existing accounts. Accounts are created by
administrators through /user-admin; there is no self-registration.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select
from datetime import timedelta
from issuedesk.db.session import get_db
from issuedesk.models.user import User
from issuedesk.core.security import verify_password, create_access_token
from issuedesk.core.config import settings
from issuedesk.schemas.auth import Token

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/login", response_model=Token)
def login(db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Authenticate a user and issue an access token.

    Note: OAuth2PasswordRequestForm uses 'username' field, but we treat it as email.

    Returns:
        Token: Object containing the access_token and token_type

    Raises:
        HTTPException 401: If credentials are invalid
        HTTPException 403: If the account is inactive
    """
    # Look up user by email (form_data.username contains the email)
    user = db.exec(select(User).where(User.email == form_data.username)).first()

    # Verify user exists and password is correct
    if not user or not verify_password(form_data.password, user.password):
        logger.warning("Failed login for %s", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")

    access_token = create_access_token(
        subject=user.email,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info("User %s logged in", user.email)
    return {"access_token": access_token, "token_type": "bearer"}
