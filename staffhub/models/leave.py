from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveRequestCreate(BaseModel):
    # Unknown fields (e.g. a client-computed total) are dropped, never trusted.
    model_config = ConfigDict(extra="ignore")

    requested_from: date
    requested_to: date
    reason: str = Field(default="", max_length=500)


class LeaveRecordCreate(LeaveRequestCreate):
    employee_id: str


class LeaveDateUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    requested_from: date
    requested_to: date


class LeaveDecisionRequest(BaseModel):
    approve: bool
    comments: Optional[str] = Field(default=None, max_length=300)


class LeaveRequestRecord(BaseModel):
    request_id: str
    employee_id: str
    requested_from: date
    requested_to: date
    total_days: int
    reason: str
    status: LeaveStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    comments: Optional[str] = None
    created_at: datetime
    updated_at: datetime
