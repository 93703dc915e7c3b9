from __future__ import annotations

from datetime import date

import pytest

from staffhub.core.exceptions import AuthorizationDenied, InputError, InvalidRange, LeaveRuleViolation, NotFound
from staffhub.models.leave import (
    LeaveDateUpdate,
    LeaveDecisionRequest,
    LeaveRecordCreate,
    LeaveRequestCreate,
    LeaveStatus,
)
from staffhub.services.leave_service import compute_consumed_days


def _payload(start: date, end: date, **extra) -> LeaveRequestCreate:
    return LeaveRequestCreate.model_validate(
        {"requested_from": start.isoformat(), "requested_to": end.isoformat(), "reason": "family trip", **extra}
    )


def _balance(directory, actor_id):
    return directory.require_actor(actor_id)["leave_balance"]


def test_compute_consumed_days_ignores_supplied_totals():
    request = {"requested_from": "2026-01-01", "requested_to": "2026-01-05", "total_days": 40}
    assert compute_consumed_days(request) == 2


def test_create_request_derives_total_and_reserves_days(directory, leave_service, audit_service):
    context = directory.access_context("u-emp-002")

    record = leave_service.create_leave_request(context, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    assert record.total_days == 5
    assert record.status == LeaveStatus.PENDING
    assert record.employee_id == "u-emp-002"
    assert _balance(directory, "u-emp-002")["pending_days"] == 5
    hr = directory.access_context("u-hr-001")
    assert [e.action for e in audit_service.list_entries(hr)] == ["VACATION_REQUEST"]


def test_forged_day_count_has_no_effect(directory, leave_service):
    context = directory.access_context("u-emp-002")

    record = leave_service.create_leave_request(
        context, _payload(date(2026, 2, 2), date(2026, 2, 6), total_days=1, totalDays=99)
    )

    assert record.total_days == 5


def test_inverted_range_is_rejected_before_counting(directory, leave_service, store):
    context = directory.access_context("u-emp-002")

    with pytest.raises(InvalidRange):
        leave_service.create_leave_request(context, _payload(date(2026, 2, 6), date(2026, 2, 2)))
    assert store.leave_requests == {}


def test_notice_period_is_enforced(directory, leave_service):
    context = directory.access_context("u-emp-002")

    with pytest.raises(LeaveRuleViolation):
        leave_service.create_leave_request(context, _payload(date(2026, 1, 12), date(2026, 1, 14)))


def test_range_without_working_days_is_rejected(directory, leave_service):
    context = directory.access_context("u-emp-002")

    with pytest.raises(LeaveRuleViolation):
        leave_service.create_leave_request(context, _payload(date(2026, 2, 7), date(2026, 2, 8)))


def test_request_beyond_balance_is_rejected(directory, leave_service):
    context = directory.access_context("u-emp-002")

    # 20 working days in February and 22 in March against a 22-day allowance.
    with pytest.raises(LeaveRuleViolation):
        leave_service.create_leave_request(context, _payload(date(2026, 2, 2), date(2026, 3, 31)))


def test_pending_days_count_against_the_balance(directory, leave_service):
    context = directory.access_context("u-emp-002")
    leave_service.create_leave_request(context, _payload(date(2026, 2, 2), date(2026, 2, 27)))

    with pytest.raises(LeaveRuleViolation):
        leave_service.create_leave_request(context, _payload(date(2026, 3, 2), date(2026, 3, 6)))


def test_hr_approval_moves_days_to_used(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    hr = directory.access_context("u-hr-001")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    decided = leave_service.decide_leave_request(hr, record.request_id, LeaveDecisionRequest(approve=True))

    assert decided.status == LeaveStatus.APPROVED
    assert decided.reviewed_by == "u-hr-001"
    assert decided.reviewed_at is not None
    balance = _balance(directory, "u-emp-002")
    assert balance["pending_days"] == 0
    assert balance["used_days"] == 5


def test_store_manager_can_review_own_store_only(directory, leave_service):
    requester = directory.access_context("u-emp-001")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 3)))

    with pytest.raises(AuthorizationDenied):
        leave_service.decide_leave_request(
            directory.access_context("u-mgr-002"), record.request_id, LeaveDecisionRequest(approve=True)
        )

    decided = leave_service.decide_leave_request(
        directory.access_context("u-mgr-001"), record.request_id, LeaveDecisionRequest(approve=True)
    )
    assert decided.status == LeaveStatus.APPROVED


def test_employee_cannot_review_own_request(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 3)))

    with pytest.raises(AuthorizationDenied):
        leave_service.decide_leave_request(requester, record.request_id, LeaveDecisionRequest(approve=True))


def test_rejection_releases_pending_days(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    decided = leave_service.decide_leave_request(
        directory.access_context("u-own-001"),
        record.request_id,
        LeaveDecisionRequest(approve=False, comments="peak season"),
    )

    assert decided.status == LeaveStatus.REJECTED
    assert decided.comments == "peak season"
    balance = _balance(directory, "u-emp-002")
    assert balance["pending_days"] == 0
    assert balance["used_days"] == 0


def test_only_pending_requests_can_be_decided(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    hr = directory.access_context("u-hr-001")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))
    leave_service.decide_leave_request(hr, record.request_id, LeaveDecisionRequest(approve=True))

    with pytest.raises(LeaveRuleViolation):
        leave_service.decide_leave_request(hr, record.request_id, LeaveDecisionRequest(approve=False))


def test_unknown_request_is_not_found(directory, leave_service):
    with pytest.raises(NotFound):
        leave_service.decide_leave_request(
            directory.access_context("u-hr-001"), "leave-missing", LeaveDecisionRequest(approve=True)
        )


def test_requester_can_cancel_pending_request(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    with pytest.raises(AuthorizationDenied):
        leave_service.cancel_leave_request(directory.access_context("u-emp-001"), record.request_id)

    cancelled = leave_service.cancel_leave_request(requester, record.request_id)

    assert cancelled.status == LeaveStatus.CANCELLED
    assert _balance(directory, "u-emp-002")["pending_days"] == 0


def test_editing_dates_recomputes_the_stored_total(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    updated = leave_service.update_leave_dates(
        requester,
        record.request_id,
        LeaveDateUpdate.model_validate(
            {"requested_from": "2026-02-02", "requested_to": "2026-02-13", "total_days": 5}
        ),
    )

    assert updated.total_days == 10
    assert _balance(directory, "u-emp-002")["pending_days"] == 10


def test_decided_requests_are_immutable(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))
    leave_service.decide_leave_request(
        directory.access_context("u-hr-001"), record.request_id, LeaveDecisionRequest(approve=True)
    )

    with pytest.raises(LeaveRuleViolation):
        leave_service.update_leave_dates(
            requester,
            record.request_id,
            LeaveDateUpdate(requested_from=date(2026, 2, 2), requested_to=date(2026, 2, 3)),
        )


def test_edit_with_inverted_range_is_rejected(directory, leave_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    with pytest.raises(InvalidRange):
        leave_service.update_leave_dates(
            requester,
            record.request_id,
            LeaveDateUpdate(requested_from=date(2026, 2, 6), requested_to=date(2026, 2, 2)),
        )


def test_hr_can_record_approved_leave(directory, leave_service):
    hr = directory.access_context("u-hr-001")
    payload = LeaveRecordCreate(
        employee_id="u-emp-001",
        requested_from=date(2026, 1, 2),
        requested_to=date(2026, 1, 9),
        reason="recorded after the fact",
    )

    record = leave_service.record_leave(hr, payload)

    # Past dates are allowed; Jan 2 and Jan 5-9 are working days.
    assert record.total_days == 6
    assert record.status == LeaveStatus.APPROVED
    assert record.reviewed_by == "u-hr-001"
    assert _balance(directory, "u-emp-001")["used_days"] == 6


def test_employee_cannot_record_leave(directory, leave_service):
    payload = LeaveRecordCreate(employee_id="u-emp-002", requested_from=date(2026, 2, 2), requested_to=date(2026, 2, 6))

    with pytest.raises(AuthorizationDenied):
        leave_service.record_leave(directory.access_context("u-emp-002"), payload)


def test_listing_is_scoped(directory, leave_service):
    sofia = directory.access_context("u-emp-002")
    tiago = directory.access_context("u-emp-001")
    leave_service.create_leave_request(sofia, _payload(date(2026, 2, 2), date(2026, 2, 6)))
    leave_service.create_leave_request(tiago, _payload(date(2026, 3, 2), date(2026, 3, 6)))

    assert {r.employee_id for r in leave_service.list_leave_requests(sofia)} == {"u-emp-002"}
    assert {r.employee_id for r in leave_service.list_leave_requests(tiago)} == {"u-emp-001"}
    everyone = leave_service.list_leave_requests(directory.access_context("u-hr-001"))
    assert {r.employee_id for r in everyone} == {"u-emp-001", "u-emp-002"}
    assert leave_service.list_leave_requests(sofia, status=LeaveStatus.APPROVED) == []


def test_edit_cannot_move_start_inside_notice_window(directory, leave_service, store):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    with pytest.raises(LeaveRuleViolation):
        leave_service.update_leave_dates(
            requester,
            record.request_id,
            LeaveDateUpdate(requested_from=date(2026, 1, 2), requested_to=date(2026, 1, 2)),
        )

    row = store.leave_requests[record.request_id]
    assert row["requested_from"] == "2026-02-02"
    assert row["total_days"] == 5
    assert _balance(directory, "u-emp-002")["pending_days"] == 5


def test_editing_dates_is_audited(directory, leave_service, audit_service):
    requester = directory.access_context("u-emp-002")
    record = leave_service.create_leave_request(requester, _payload(date(2026, 2, 2), date(2026, 2, 6)))

    leave_service.update_leave_dates(
        requester,
        record.request_id,
        LeaveDateUpdate(requested_from=date(2026, 2, 2), requested_to=date(2026, 2, 3)),
    )

    entries = audit_service.list_entries(directory.access_context("u-tech-001"), action="VACATION_REQUEST")
    assert len(entries) == 2
    latest = next(e for e in entries if e.details.get("updated"))
    assert latest.details["request_id"] == record.request_id
    assert latest.details["previous_total_days"] == 5
    assert latest.details["total_days"] == 2


def test_oversized_range_is_rejected_before_counting(directory, leave_service, store):
    context = directory.access_context("u-emp-002")

    with pytest.raises(InputError):
        leave_service.create_leave_request(context, _payload(date(2026, 2, 2), date(2099, 12, 31)))
    assert store.leave_requests == {}
