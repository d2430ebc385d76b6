"""
Client Service Sheet and Project Change Request Models Module

Both documents record work agreed with a client and share the signature
blocks and charge section. Nested structures are stored as JSON columns and
validated through the typed Create/Read schemas.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import SQLModel, Field, JSON

from issuedesk.models.base import utc_now_iso


class ChargeType(str, Enum):
    included = "included"
    free = "free"
    extra = "extra"


class PartyInfo(SQLModel):
    """Signature block of the customer or of the service provider."""
    company: Optional[str] = None
    name: Optional[str] = None
    date: Optional[datetime] = None
    signature: Optional[str] = None


class ServiceTask(SQLModel):
    id: str
    description: str = ""
    type: str = ""
    status: str = ""
    service_by: str = ""


class ChangeRequestTask(SQLModel):
    id: str
    sequence: Optional[str] = None
    description: Optional[str] = None
    requested_by: Optional[str] = None
    approved: Optional[str] = None


# ======================
# Client Service Sheet
# ======================

class ServiceSheetBase(SQLModel):
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id")
    project_name: Optional[str] = None
    job_code: Optional[str] = Field(default=None, index=True)
    date: Optional[datetime] = None
    user: Optional[str] = None
    total_hours: Optional[float] = None
    service_location: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    remark: Optional[str] = None
    extra_charge_description: Optional[str] = None


class ClientServiceSheet(ServiceSheetBase, table=True):
    __tablename__ = "client_service_sheets"

    id: Optional[int] = Field(default=None, primary_key=True)
    tasks: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    customer_info: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    service_by_info: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    charge_types: List[str] = Field(default_factory=list, sa_type=JSON)
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)


class ServiceSheetCreate(ServiceSheetBase):
    tasks: List[ServiceTask] = []
    customer_info: Optional[PartyInfo] = None
    service_by_info: Optional[PartyInfo] = None
    charge_types: List[ChargeType] = []


class ServiceSheetUpdate(SQLModel):
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    job_code: Optional[str] = None
    date: Optional[datetime] = None
    user: Optional[str] = None
    total_hours: Optional[float] = None
    service_location: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    tasks: Optional[List[ServiceTask]] = None
    remark: Optional[str] = None
    customer_info: Optional[PartyInfo] = None
    service_by_info: Optional[PartyInfo] = None
    charge_types: Optional[List[ChargeType]] = None
    extra_charge_description: Optional[str] = None


class ServiceSheetRead(ServiceSheetBase):
    id: int
    tasks: List[ServiceTask] = []
    customer_info: Optional[PartyInfo] = None
    service_by_info: Optional[PartyInfo] = None
    charge_types: List[ChargeType] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ======================
# Project Change Request
# ======================

class ChangeRequestBase(SQLModel):
    project_id: Optional[int] = Field(default=None, foreign_key="projects.id")
    project_name: Optional[str] = None
    project_stage: Optional[str] = None
    job_code: Optional[str] = Field(default=None, index=True)
    date: Optional[datetime] = None
    remark: Optional[str] = None
    extra_charge_description: Optional[str] = None


class ProjectChangeRequest(ChangeRequestBase, table=True):
    __tablename__ = "project_change_requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    tasks: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    customer_info: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    service_by_info: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    charge_types: List[str] = Field(default_factory=list, sa_type=JSON)
    created_at: Optional[str] = Field(default_factory=utc_now_iso)
    updated_at: Optional[str] = Field(default_factory=utc_now_iso)


class ChangeRequestCreate(ChangeRequestBase):
    tasks: List[ChangeRequestTask] = []
    customer_info: Optional[PartyInfo] = None
    service_by_info: Optional[PartyInfo] = None
    charge_types: List[ChargeType] = []


class ChangeRequestUpdate(SQLModel):
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    project_stage: Optional[str] = None
    job_code: Optional[str] = None
    date: Optional[datetime] = None
    tasks: Optional[List[ChangeRequestTask]] = None
    remark: Optional[str] = None
    customer_info: Optional[PartyInfo] = None
    service_by_info: Optional[PartyInfo] = None
    charge_types: Optional[List[ChargeType]] = None
    extra_charge_description: Optional[str] = None


class ChangeRequestRead(ChangeRequestBase):
    id: int
    tasks: List[ChangeRequestTask] = []
    customer_info: Optional[PartyInfo] = None
    service_by_info: Optional[PartyInfo] = None
    charge_types: List[ChargeType] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
