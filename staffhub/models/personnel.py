from typing import Optional

from pydantic import BaseModel, Field


class LeaveBalance(BaseModel):
    default_days: int = 22
    rollover_days: int = 0
    used_days: int = 0
    pending_days: int = 0

    @property
    def remaining(self) -> int:
        return self.default_days + self.rollover_days - self.used_days

    @property
    def available(self) -> int:
        return self.remaining - self.pending_days


class Actor(BaseModel):
    actor_id: str
    username: str
    full_name: str
    roles: list[str] = Field(default_factory=list)
    position_id: Optional[str] = None
    store_id: Optional[str] = None
    active: bool = True
    leave_balance: LeaveBalance = Field(default_factory=LeaveBalance)


class ActorRecord(Actor):
    hashed_password: str


class Position(BaseModel):
    position_id: str
    name: str
    roles: list[str] = Field(default_factory=list)
    # Functional permission keys granted by holding the position.
    permissions: list[str] = Field(default_factory=list)
    active: bool = True


class Store(BaseModel):
    store_id: str
    name: str
    managers: list[str] = Field(default_factory=list)
    sub_managers: list[str] = Field(default_factory=list)
    active: bool = True


class Department(BaseModel):
    department_id: str
    name: str
    department_heads: list[str] = Field(default_factory=list)
    sub_heads: list[str] = Field(default_factory=list)
    active: bool = True


class StoreDepartment(BaseModel):
    store_department_id: str
    store_id: str
    department_id: str
    heads: list[str] = Field(default_factory=list)
    sub_heads: list[str] = Field(default_factory=list)
    active: bool = True
