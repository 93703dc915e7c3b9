from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional
from uuid import uuid4

from staffhub.core.config import settings
from staffhub.core.exceptions import AuthorizationDenied, InvalidRange, LeaveRuleViolation, NotFound
from staffhub.core.holidays import check_span, count_working_days, to_date
from staffhub.models.leave import (
    LeaveDateUpdate,
    LeaveDecisionRequest,
    LeaveRecordCreate,
    LeaveRequestCreate,
    LeaveRequestRecord,
    LeaveStatus,
)
from staffhub.models.personnel import LeaveBalance
from staffhub.repositories.data_store import DataStore
from staffhub.services.access_service import AccessContext
from staffhub.services.audit_service import AuditService
from staffhub.services.directory_service import DirectoryService
from staffhub.services.scope import (
    ADMINISTRATIVE_ROLES,
    ResourceKind,
    build_visibility_predicate,
    ensure_visible,
)


logger = logging.getLogger(__name__)


def _range_of(request: Any) -> tuple[date, date]:
    if isinstance(request, Mapping):
        return to_date(request["requested_from"]), to_date(request["requested_to"])
    return to_date(request.requested_from), to_date(request.requested_to)


def compute_consumed_days(request: Any, jurisdiction: str | None = None) -> int:
    """Working days consumed by a leave request's inclusive date range.

    Only the dates are read; any day count carried by the request is ignored.
    """
    requested_from, requested_to = _range_of(request)
    return count_working_days(requested_from, requested_to, jurisdiction)


def validate_range(requested_from: date, requested_to: date) -> None:
    if requested_to < requested_from:
        raise InvalidRange(
            f"requested_to ({requested_to.isoformat()}) is before requested_from ({requested_from.isoformat()})"
        )
    check_span(requested_from, requested_to)


class LeaveService:
    def __init__(
        self,
        store: DataStore,
        directory_service: DirectoryService,
        audit_service: AuditService,
        clock: Callable[[], date] = date.today,
        jurisdiction: str | None = None,
    ) -> None:
        self.store = store
        self.directory_service = directory_service
        self.audit_service = audit_service
        self.clock = clock
        self.jurisdiction = jurisdiction

    @staticmethod
    def _iso_now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _is_administrative(context: AccessContext) -> bool:
        return bool(context.roles & ADMINISTRATIVE_ROLES)

    def _balance(self, employee_id: str) -> dict[str, Any]:
        return self.directory_service.require_actor(employee_id)["leave_balance"]

    def _check_notice(self, requested_from: date) -> None:
        min_start = self.clock() + timedelta(days=settings.leave_notice_days)
        if requested_from < min_start:
            raise LeaveRuleViolation(
                f"Leave must be requested at least {settings.leave_notice_days} days in advance"
            )

    def create_leave_request(self, context: AccessContext, payload: LeaveRequestCreate) -> LeaveRequestRecord:
        validate_range(payload.requested_from, payload.requested_to)
        self._check_notice(payload.requested_from)

        total_days = compute_consumed_days(payload, self.jurisdiction)
        if total_days == 0:
            raise LeaveRuleViolation("No working days in selected range")

        employee_id = context.scope.actor_id
        now = self._iso_now()
        with self.store.lock:
            balance = self._balance(employee_id)
            available = LeaveBalance(**balance).available
            if total_days > available:
                raise LeaveRuleViolation(
                    f"Insufficient leave days. Requested: {total_days}, Available: {available}"
                )

            request_id = f"leave-{uuid4().hex[:10]}"
            row = {
                "request_id": request_id,
                "employee_id": employee_id,
                "requested_from": payload.requested_from.isoformat(),
                "requested_to": payload.requested_to.isoformat(),
                "total_days": total_days,
                "reason": payload.reason,
                "status": LeaveStatus.PENDING,
                "reviewed_by": None,
                "reviewed_at": None,
                "comments": None,
                "created_at": now,
                "updated_at": now,
            }
            self.store.leave_requests[request_id] = row
            balance["pending_days"] = balance.get("pending_days", 0) + total_days

        self.audit_service.record(
            actor_id=employee_id,
            action="VACATION_REQUEST",
            target_model="VacationRequest",
            store_id=context.scope.store_id,
            details={"request_id": request_id, "total_days": total_days},
        )
        logger.info("Leave request %s created for %s (%d days)", request_id, employee_id, total_days)

        return self._to_leave_model(row)

    def record_leave(self, context: AccessContext, payload: LeaveRecordCreate) -> LeaveRequestRecord:
        """Administrative entry of leave already agreed; skips notice and balance checks."""
        if not self._is_administrative(context):
            raise AuthorizationDenied("Only administrative roles can record leave directly")

        validate_range(payload.requested_from, payload.requested_to)
        employee = self.directory_service.require_actor(payload.employee_id)
        total_days = compute_consumed_days(payload, self.jurisdiction)

        now = self._iso_now()
        request_id = f"leave-{uuid4().hex[:10]}"
        row = {
            "request_id": request_id,
            "employee_id": payload.employee_id,
            "requested_from": payload.requested_from.isoformat(),
            "requested_to": payload.requested_to.isoformat(),
            "total_days": total_days,
            "reason": payload.reason,
            "status": LeaveStatus.APPROVED,
            "reviewed_by": context.scope.actor_id,
            "reviewed_at": now,
            "comments": None,
            "created_at": now,
            "updated_at": now,
        }
        with self.store.lock:
            self.store.leave_requests[request_id] = row
            balance = employee["leave_balance"]
            balance["used_days"] = balance.get("used_days", 0) + total_days

        self.audit_service.record(
            actor_id=context.scope.actor_id,
            action="VACATION_APPROVED",
            target_model="VacationRequest",
            store_id=employee.get("store_id"),
            details={"request_id": request_id, "employee_id": payload.employee_id, "recorded": True},
        )

        return self._to_leave_model(row)

    def _pending_row(self, request_id: str) -> dict[str, Any]:
        row = self.store.leave_requests.get(request_id)
        if not row:
            raise NotFound("Leave request not found")
        if row["status"] != LeaveStatus.PENDING:
            raise LeaveRuleViolation("Leave request is not pending")
        return row

    def _can_review(self, context: AccessContext, employee_id: str) -> bool:
        if self._is_administrative(context):
            return True
        if employee_id == context.scope.actor_id:
            return False
        employee = self.directory_service.require_actor(employee_id)
        return context.scope.actor_id in self.directory_service.store_managers(employee.get("store_id"))

    def decide_leave_request(
        self,
        context: AccessContext,
        request_id: str,
        payload: LeaveDecisionRequest,
    ) -> LeaveRequestRecord:
        with self.store.lock:
            row = self._pending_row(request_id)
            employee_id = row["employee_id"]
            if not self._can_review(context, employee_id):
                raise AuthorizationDenied("Not allowed to review this leave request")

            balance = self._balance(employee_id)
            balance["pending_days"] = balance.get("pending_days", 0) - row["total_days"]
            if payload.approve:
                balance["used_days"] = balance.get("used_days", 0) + row["total_days"]

            now = self._iso_now()
            row["status"] = LeaveStatus.APPROVED if payload.approve else LeaveStatus.REJECTED
            row["reviewed_by"] = context.scope.actor_id
            row["reviewed_at"] = now
            if payload.comments:
                row["comments"] = payload.comments
            row["updated_at"] = now

        self.audit_service.record(
            actor_id=context.scope.actor_id,
            action="VACATION_APPROVED" if payload.approve else "VACATION_REJECTED",
            target_model="VacationRequest",
            store_id=context.scope.store_id,
            details={"request_id": request_id, "employee_id": employee_id},
        )

        return self._to_leave_model(row)

    def cancel_leave_request(self, context: AccessContext, request_id: str) -> LeaveRequestRecord:
        with self.store.lock:
            row = self._pending_row(request_id)
            if row["employee_id"] != context.scope.actor_id and not self._is_administrative(context):
                raise AuthorizationDenied("Only the requester can cancel this leave request")

            balance = self._balance(row["employee_id"])
            balance["pending_days"] = balance.get("pending_days", 0) - row["total_days"]
            row["status"] = LeaveStatus.CANCELLED
            row["updated_at"] = self._iso_now()

        self.audit_service.record(
            actor_id=context.scope.actor_id,
            action="VACATION_CANCELLED",
            target_model="VacationRequest",
            store_id=context.scope.store_id,
            details={"request_id": request_id},
        )

        return self._to_leave_model(row)

    def update_leave_dates(
        self,
        context: AccessContext,
        request_id: str,
        payload: LeaveDateUpdate,
    ) -> LeaveRequestRecord:
        """Move a pending request; the stored total is recomputed from the new dates."""
        validate_range(payload.requested_from, payload.requested_to)
        self._check_notice(payload.requested_from)

        with self.store.lock:
            row = self._pending_row(request_id)
            if row["employee_id"] != context.scope.actor_id and not self._is_administrative(context):
                raise AuthorizationDenied("Only the requester can change this leave request")

            total_days = compute_consumed_days(payload, self.jurisdiction)
            if total_days == 0:
                raise LeaveRuleViolation("No working days in selected range")

            balance = self._balance(row["employee_id"])
            delta = total_days - row["total_days"]
            available = LeaveBalance(**balance).available
            if delta > available:
                raise LeaveRuleViolation(
                    f"Insufficient leave days. Requested: {total_days}, Available: {available + row['total_days']}"
                )

            previous_days = row["total_days"]
            balance["pending_days"] = balance.get("pending_days", 0) + delta
            row["requested_from"] = payload.requested_from.isoformat()
            row["requested_to"] = payload.requested_to.isoformat()
            row["total_days"] = total_days
            row["updated_at"] = self._iso_now()

        self.audit_service.record(
            actor_id=context.scope.actor_id,
            action="VACATION_REQUEST",
            target_model="VacationRequest",
            store_id=context.scope.store_id,
            details={
                "request_id": request_id,
                "updated": True,
                "previous_total_days": previous_days,
                "total_days": total_days,
            },
        )

        return self._to_leave_model(row)

    def list_leave_requests(
        self,
        context: AccessContext,
        status: Optional[LeaveStatus] = None,
    ) -> list[LeaveRequestRecord]:
        predicate = ensure_visible(
            build_visibility_predicate(context.roles, context.scope, ResourceKind.LEAVE_REQUEST)
        )
        with self.store.lock:
            rows = list(self.store.leave_requests.values())

        rows = predicate.filter(rows)
        if status:
            rows = [r for r in rows if r["status"] == status]
        return [self._to_leave_model(r) for r in rows]

    @staticmethod
    def _to_leave_model(row: dict[str, Any]) -> LeaveRequestRecord:
        reviewed_at = row.get("reviewed_at")
        return LeaveRequestRecord(
            request_id=row["request_id"],
            employee_id=row["employee_id"],
            requested_from=date.fromisoformat(row["requested_from"]),
            requested_to=date.fromisoformat(row["requested_to"]),
            total_days=row["total_days"],
            reason=row["reason"],
            status=row["status"],
            reviewed_by=row.get("reviewed_by"),
            reviewed_at=datetime.fromisoformat(reviewed_at) if reviewed_at else None,
            comments=row.get("comments"),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
