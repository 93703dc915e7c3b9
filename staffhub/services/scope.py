"""Per-resource visibility policies.

``build_visibility_predicate`` is a total function over (roles, resource kind):
every pair either matches an explicit rule or falls through to ``DenyAll``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from staffhub.core.exceptions import AuthorizationDenied, InputError
from staffhub.core.rbac import Role, normalize_role


logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    AUDIT_ENTRY = "audit_entry"
    LEAVE_REQUEST = "leave_request"
    ABSENCE_REQUEST = "absence_request"


@dataclass(frozen=True)
class ActorScope:
    actor_id: str
    store_id: Optional[str] = None


@dataclass(frozen=True)
class VisibilityPredicate:
    resource_kind: str
    description: str
    test: Callable[[Any], bool]
    unrestricted: bool = False

    def __call__(self, record: Any) -> bool:
        return self.test(record)

    def filter(self, records: Iterable[Any]) -> list[Any]:
        return [r for r in records if self.test(r)]


@dataclass(frozen=True)
class DenyAll:
    resource_kind: str
    reason: str


ADMINISTRATIVE_ROLES: frozenset[str] = frozenset(
    {Role.SUPER_USER.value, Role.TECH.value, Role.OWNER.value, Role.ADMIN.value, Role.HR.value}
)
AUDIT_FULL_ROLES: frozenset[str] = frozenset({Role.TECH.value, Role.SUPER_USER.value})
AUDIT_RESTRICTED_ROLES: frozenset[str] = frozenset({Role.OWNER.value, Role.HR.value, Role.ADMIN.value})

# Chat traffic never shows up in the restricted audit view.
PRIVATE_TARGET_MODELS: frozenset[str] = frozenset({"Message"})

MANAGEMENT_ACTIONS: frozenset[str] = frozenset(
    {
        "CREATE_EMPLOYEE", "UPDATE_EMPLOYEE", "ARCHIVE_EMPLOYEE", "ASSIGN_EMPLOYEES_TO_STORE",
        "ASSIGN_MANAGER", "ASSIGN_SUB_MANAGER", "REMOVE_STORE_MANAGER",
        "CREATE_STORE", "UPDATE_STORE", "ARCHIVE_STORE",
        "CREATE_GLOBAL_DEPT", "UPDATE_GLOBAL_DEPT", "ARCHIVE_GLOBAL_DEPT",
        "ASSIGN_GLOBAL_DEPT_HEAD", "ASSIGN_GLOBAL_DEPT_SUBHEAD",
        "REMOVE_GLOBAL_DEPT_HEAD", "REMOVE_GLOBAL_DEPT_SUBHEAD",
        "CREATE_STORE_DEPARTMENT", "DELETE_STORE_DEPARTMENT",
        "ASSIGN_EMPLOYEES_TO_DEPT", "REMOVE_DEPT_EMPLOYEE",
        "ASSIGN_DEPT_HEAD", "REMOVE_DEPT_HEAD", "ASSIGN_DEPT_SUBHEAD", "REMOVE_DEPT_SUBHEAD",
        "CREATE_RECIPE", "UPDATE_RECIPE", "ARCHIVE_RECIPE", "DELETE_RECIPE", "RESTORE_RECIPE",
        "CREATE_POSITION", "UPDATE_POSITION", "REMOVE_FROM_POSITION",
    }
)

OPERATIONAL_ACTIONS: frozenset[str] = MANAGEMENT_ACTIONS | {
    "VACATION_REQUEST", "VACATION_APPROVED", "VACATION_REJECTED", "VACATION_CANCELLED",
    "ABSENCE_REQUEST", "ABSENCE_APPROVED", "ABSENCE_REJECTED",
    "SHIFT_SWAP_REQUEST", "SHIFT_SWAP_APPROVED", "SHIFT_SWAP_REJECTED",
    "CREATE_SCHEDULE", "UPDATE_SCHEDULE", "SEND_FOR_APPROVAL",
    "REJECT_SCHEDULE", "APPROVE_SCHEDULE", "PUBLISH_SCHEDULE",
    "NOTICE_CREATED", "NOTICE_UPDATED", "NOTICE_COMMENT",
    "REPORT_PROBLEM", "PROBLEM_COMMENT", "SOLVE_PROBLEM",
    "COMMENT_TASK",
}

TASK_ACTIONS: frozenset[str] = frozenset({"CREATE_TASK", "UPDATE_TASK", "COMPLETE_TASK", "SUBMIT_TASK_FILE"})


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _unrestricted(kind: ResourceKind) -> Callable[[ActorScope], VisibilityPredicate]:
    def build(scope: ActorScope) -> VisibilityPredicate:
        return VisibilityPredicate(kind.value, "all records", lambda record: True, unrestricted=True)

    return build


def _restricted_audit(scope: ActorScope) -> VisibilityPredicate:
    def test(entry: Any) -> bool:
        if _field(entry, "target_model") in PRIVATE_TARGET_MODELS:
            return False
        action = _field(entry, "action")
        if action in OPERATIONAL_ACTIONS:
            return True
        if action in TASK_ACTIONS:
            details = _field(entry, "details") or {}
            return bool(
                details.get("is_global")
                or _field(entry, "actor_id") == scope.actor_id
                or (scope.store_id is not None and details.get("store_id") == scope.store_id)
                or _field(entry, "store_id")
            )
        return False

    return VisibilityPredicate(
        ResourceKind.AUDIT_ENTRY.value,
        "operational actions, excluding messaging",
        test,
    )


def _own_requests(kind: ResourceKind) -> Callable[[ActorScope], VisibilityPredicate]:
    def build(scope: ActorScope) -> VisibilityPredicate:
        return VisibilityPredicate(
            kind.value,
            f"requests of {scope.actor_id}",
            lambda record: _field(record, "employee_id") == scope.actor_id,
        )

    return build


@dataclass(frozen=True)
class _Rule:
    # None matches any authenticated actor.
    roles: Optional[frozenset[str]]
    build: Callable[[ActorScope], VisibilityPredicate]


_POLICIES: dict[ResourceKind, tuple[_Rule, ...]] = {
    ResourceKind.AUDIT_ENTRY: (
        _Rule(AUDIT_FULL_ROLES, _unrestricted(ResourceKind.AUDIT_ENTRY)),
        _Rule(AUDIT_RESTRICTED_ROLES, _restricted_audit),
    ),
    ResourceKind.LEAVE_REQUEST: (
        _Rule(ADMINISTRATIVE_ROLES, _unrestricted(ResourceKind.LEAVE_REQUEST)),
        _Rule(None, _own_requests(ResourceKind.LEAVE_REQUEST)),
    ),
    ResourceKind.ABSENCE_REQUEST: (
        _Rule(ADMINISTRATIVE_ROLES, _unrestricted(ResourceKind.ABSENCE_REQUEST)),
        _Rule(None, _own_requests(ResourceKind.ABSENCE_REQUEST)),
    ),
}


def build_visibility_predicate(
    effective_roles: Iterable[str | Role],
    actor_scope: ActorScope,
    resource_kind: ResourceKind | str,
) -> VisibilityPredicate | DenyAll:
    if actor_scope is None or not actor_scope.actor_id:
        raise InputError("A visibility predicate needs an actor scope")

    try:
        kind = ResourceKind(resource_kind)
    except ValueError:
        logger.warning("No visibility policy configured for resource kind %r", resource_kind)
        return DenyAll(str(resource_kind), "no visibility policy for this resource kind")

    roles = {normalize_role(tag) for tag in effective_roles or ()}
    for rule in _POLICIES.get(kind, ()):
        if rule.roles is None or roles & rule.roles:
            return rule.build(actor_scope)

    return DenyAll(kind.value, "no visibility policy grants access to these roles")


def ensure_visible(result: VisibilityPredicate | DenyAll) -> VisibilityPredicate:
    """Turn a ``DenyAll`` into an ``AuthorizationDenied`` for the caller."""
    if isinstance(result, DenyAll):
        raise AuthorizationDenied(f"Access denied to {result.resource_kind}: {result.reason}")
    return result
