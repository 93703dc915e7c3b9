from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuditEntry(BaseModel):
    entry_id: str
    actor_id: str
    action: str
    target_model: str
    store_id: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
