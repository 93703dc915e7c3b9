from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from staffhub.models.personnel import LeaveBalance


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class ActorPublic(BaseModel):
    actor_id: str
    username: str
    full_name: str
    position_id: Optional[str] = None
    store_id: Optional[str] = None
    active: bool = True
    leave_balance: LeaveBalance


class AccessSummary(BaseModel):
    actor: ActorPublic
    roles: list[str]
    permissions: list[str]
    highest_role: str
