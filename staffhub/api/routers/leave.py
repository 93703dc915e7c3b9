from typing import Optional

from fastapi import APIRouter, Depends

from staffhub.api.deps import get_access_context
from staffhub.models.leave import (
    LeaveDateUpdate,
    LeaveDecisionRequest,
    LeaveRecordCreate,
    LeaveRequestCreate,
    LeaveRequestRecord,
    LeaveStatus,
)
from staffhub.services.access_service import AccessContext
from staffhub.services.container import leave_service


router = APIRouter(prefix="/leave", tags=["Leave"])


@router.post("", response_model=LeaveRequestRecord)
def create_leave_request(
    payload: LeaveRequestCreate,
    context: AccessContext = Depends(get_access_context),
) -> LeaveRequestRecord:
    return leave_service.create_leave_request(context, payload)


@router.get("", response_model=list[LeaveRequestRecord])
def list_leave_requests(
    status: Optional[LeaveStatus] = None,
    context: AccessContext = Depends(get_access_context),
) -> list[LeaveRequestRecord]:
    return leave_service.list_leave_requests(context, status)


@router.post("/record", response_model=LeaveRequestRecord)
def record_leave(
    payload: LeaveRecordCreate,
    context: AccessContext = Depends(get_access_context),
) -> LeaveRequestRecord:
    return leave_service.record_leave(context, payload)


@router.patch("/{request_id}", response_model=LeaveRequestRecord)
def update_leave_dates(
    request_id: str,
    payload: LeaveDateUpdate,
    context: AccessContext = Depends(get_access_context),
) -> LeaveRequestRecord:
    return leave_service.update_leave_dates(context, request_id, payload)


@router.post("/{request_id}/decision", response_model=LeaveRequestRecord)
def decide_leave_request(
    request_id: str,
    payload: LeaveDecisionRequest,
    context: AccessContext = Depends(get_access_context),
) -> LeaveRequestRecord:
    return leave_service.decide_leave_request(context, request_id, payload)


@router.post("/{request_id}/cancel", response_model=LeaveRequestRecord)
def cancel_leave_request(
    request_id: str,
    context: AccessContext = Depends(get_access_context),
) -> LeaveRequestRecord:
    return leave_service.cancel_leave_request(context, request_id)
