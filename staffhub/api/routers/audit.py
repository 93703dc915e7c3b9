from typing import Optional

from fastapi import APIRouter, Depends, Query

from staffhub.api.deps import get_access_context
from staffhub.models.audit import AuditEntry
from staffhub.services.access_service import AccessContext
from staffhub.services.container import audit_service


router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=list[AuditEntry])
def list_audit_entries(
    action: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=500),
    context: AccessContext = Depends(get_access_context),
) -> list[AuditEntry]:
    return audit_service.list_entries(context, action=action, limit=limit)
