"""
User Model Module

This module defines the User model together with the UserRole and UserStatus
enumerations used for authentication and authorization throughout the API.
"""
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field, AutoString
import uuid

from issuedesk.models.base import utc_now_iso


class UserRole(str, Enum):
    """
    Permission levels in the back office.

    - STAFF: Internal staff member, can work on projects and issues (default)
    - ADMIN: Administrator, can additionally manage users and project records
    """
    STAFF = "Staff"
    ADMIN = "Admin"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class User(SQLModel, table=True):
    """
    User model representing an account of the internal team.

    Users are identified by UUID and authenticated via email/password. Accounts
    are only created by administrators; there is no self-registration.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each user
        email: Login email address (required, unique, indexed)
        password: Hashed password (bcrypt)
        user_name: Display name
        user_code: Human readable staff code shown in the UI (e.g. "LC-000001")
        job_position: Job title, e.g. "Developer", "Business Analyst", "Tester"
        role: UserRole value deciding the permission level
        status: Inactive accounts cannot sign in
        created_at: ISO timestamp when the account was created
        updated_at: ISO timestamp of the last modification
    """
    __tablename__ = "users"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None  # Hashed password (bcrypt)

    # Profile information
    user_name: str = Field(nullable=False)
    user_code: str = ""
    job_position: str = ""

    # Authorization
    role: UserRole = Field(default=UserRole.STAFF, sa_type=AutoString)
    status: UserStatus = Field(default=UserStatus.ACTIVE, sa_type=AutoString)

    # Audit timestamps
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)

    @property
    def is_privileged(self) -> bool:
        """Helper to check if user has admin-level role."""
        return self.role == UserRole.ADMIN

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
