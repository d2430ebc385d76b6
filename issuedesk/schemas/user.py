from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from issuedesk.models.base import reject_null
from issuedesk.models.user import UserRole, UserStatus

# Shared properties
class UserBase(BaseModel):
    email: Optional[EmailStr] = None
    user_name: Optional[str] = None
    user_code: Optional[str] = None
    job_position: Optional[str] = None
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None

# Properties to receive via API on creation
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    user_name: str = Field(min_length=1)
    job_position: str = ""
    role: UserRole = UserRole.STAFF
    status: UserStatus = UserStatus.ACTIVE

# Profile fields an administrator may change in one go
class UserProfileUpdate(BaseModel):
    user_name: Optional[str] = Field(default=None, min_length=1)
    user_code: Optional[str] = None
    job_position: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("user_name", "role")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)

class UserEmailUpdate(BaseModel):
    email: EmailStr

class UserPasswordUpdate(BaseModel):
    new_password: str = Field(min_length=6)

class UserDisplayNameUpdate(BaseModel):
    user_name: str = Field(min_length=1)

class UserStatusUpdate(BaseModel):
    status: UserStatus

# Properties to return to client
class UserRead(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    user_name: str
    role: UserRole
    status: UserStatus
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class UserOption(BaseModel):
    value: str
    label: str

class UserCreated(BaseModel):
    success: bool = True
    uid: str
