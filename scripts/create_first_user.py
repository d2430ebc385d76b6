"""
Bootstrap the first administrator account.

Accounts are otherwise only created by administrators through
/user-admin/users, so a fresh database needs one admin to start with.
Credentials come from FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD /
FIRST_ADMIN_NAME (environment or .env).

    python -m scripts.create_first_user
"""
import sys
import os
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from issuedesk.core.config import settings
from issuedesk.core.logging_config import setup_logging
from issuedesk.core.security import get_password_hash
from issuedesk.db.session import engine, init_db
from issuedesk.models.user import User, UserRole, UserStatus
from issuedesk.services.issue_codes import next_user_code


def create_initial_user():
    print("--- Initial Admin Creation ---")
    init_db()

    email = settings.FIRST_ADMIN_EMAIL

    with Session(engine) as session:
        # Check if user already exists
        statement = select(User).where(User.email == email)
        user = session.exec(statement).first()

        if user:
            print(f"User with email {email} already exists.")
            return

        print(f"Creating admin {email}...")
        db_user = User(
            email=email,
            password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
            user_name=settings.FIRST_ADMIN_NAME,
            user_code=next_user_code(session.exec(select(User.user_code)).all()),
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        session.add(db_user)
        session.commit()
        print("Initial admin created successfully!")
        print(f"Email: {email}")
        print(f"Role: {UserRole.ADMIN.value}")


if __name__ == "__main__":
    setup_logging()
    create_initial_user()
