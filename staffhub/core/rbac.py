from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from staffhub.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class Role(str, Enum):
    TECH = "tech"
    SUPER_USER = "super_user"
    OWNER = "owner"
    ADMIN = "admin"
    HR = "hr"
    STORE_MANAGER = "store_manager"
    DEPARTMENT_HEAD = "department_head"
    STORE_DEPARTMENT_HEAD = "store_department_head"
    EMPLOYEE = "employee"


class RoleScope(str, Enum):
    GLOBAL = "global"
    STORE = "store"
    DEPARTMENT = "department"


class Permission(str, Enum):
    # Stores
    CREATE_STORE = "create_store"
    EDIT_STORE = "edit_store"
    DELETE_STORE = "delete_store"
    MANAGE_STORE = "manage_store"
    # Global departments
    CREATE_DEPARTMENT = "create_department"
    EDIT_DEPARTMENT = "edit_department"
    DELETE_DEPARTMENT = "delete_department"
    MANAGE_DEPARTMENT = "manage_department"
    # Store departments
    CREATE_STORE_DEPARTMENT = "create_storeDepartment"
    EDIT_STORE_DEPARTMENT = "edit_storeDepartment"
    DELETE_STORE_DEPARTMENT = "delete_storeDepartment"
    MANAGE_STORE_DEPARTMENT = "manage_storeDepartment"
    MANAGE_STORE_DEPARTMENT_EMPLOYEE = "manage_storeDepartmentEmployee"
    # Employees
    CREATE_EMPLOYEE = "create_employee"
    EDIT_EMPLOYEE = "edit_employee"
    DELETE_EMPLOYEE = "delete_employee"
    ASSIGN_EMPLOYEE_TO_STORE = "assign_employee_to_store"
    ASSIGN_EMPLOYEE_TO_STORE_DEPARTMENT = "assign_employee_to_storeDepartment"
    ASSIGN_DEPARTMENT_TO_STORE = "assign_department_to_store"
    # Schedules
    CREATE_SCHEDULE = "create_schedule"
    REVIEW_SCHEDULE = "review_schedule"
    # System
    VIEW_LOGS = "view_logs"
    MANAGE_SYSTEM = "manage_system"


ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)

ROLE_SCOPES: dict[Role, RoleScope] = {
    Role.TECH: RoleScope.GLOBAL,
    Role.SUPER_USER: RoleScope.GLOBAL,
    Role.OWNER: RoleScope.GLOBAL,
    Role.ADMIN: RoleScope.GLOBAL,
    Role.HR: RoleScope.GLOBAL,
    Role.STORE_MANAGER: RoleScope.STORE,
    Role.DEPARTMENT_HEAD: RoleScope.DEPARTMENT,
    Role.STORE_DEPARTMENT_HEAD: RoleScope.DEPARTMENT,
    Role.EMPLOYEE: RoleScope.GLOBAL,
}

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.TECH: ALL_PERMISSIONS,
    Role.SUPER_USER: ALL_PERMISSIONS,
    Role.OWNER: ALL_PERMISSIONS,
    Role.ADMIN: ALL_PERMISSIONS - {Permission.VIEW_LOGS},
    Role.HR: frozenset(
        {
            Permission.EDIT_STORE,
            Permission.EDIT_DEPARTMENT,
            Permission.EDIT_STORE_DEPARTMENT,
            Permission.CREATE_EMPLOYEE,
            Permission.EDIT_EMPLOYEE,
            Permission.ASSIGN_EMPLOYEE_TO_STORE,
            Permission.ASSIGN_EMPLOYEE_TO_STORE_DEPARTMENT,
            Permission.ASSIGN_DEPARTMENT_TO_STORE,
            Permission.CREATE_SCHEDULE,
            Permission.REVIEW_SCHEDULE,
            Permission.MANAGE_STORE_DEPARTMENT_EMPLOYEE,
            Permission.MANAGE_DEPARTMENT,
            Permission.MANAGE_STORE,
        }
    ),
    Role.STORE_MANAGER: frozenset(
        {
            Permission.MANAGE_STORE,
            Permission.MANAGE_STORE_DEPARTMENT,
            Permission.MANAGE_STORE_DEPARTMENT_EMPLOYEE,
            Permission.CREATE_SCHEDULE,
            Permission.REVIEW_SCHEDULE,
            Permission.EDIT_STORE_DEPARTMENT,
        }
    ),
    Role.DEPARTMENT_HEAD: frozenset(
        {
            Permission.MANAGE_DEPARTMENT,
            Permission.MANAGE_STORE_DEPARTMENT,
            Permission.CREATE_SCHEDULE,
        }
    ),
    Role.STORE_DEPARTMENT_HEAD: frozenset(
        {
            Permission.MANAGE_STORE_DEPARTMENT,
            Permission.MANAGE_STORE_DEPARTMENT_EMPLOYEE,
            Permission.CREATE_SCHEDULE,
        }
    ),
    # Baseline access comes from being authenticated, not from permission keys.
    Role.EMPLOYEE: frozenset(),
}

_missing = set(Role) - set(ROLE_PERMISSIONS)
if _missing:
    raise RuntimeError(f"Permission table has no entry for: {sorted(r.value for r in _missing)}")

# Lower index means more access; used to pick a dashboard view.
ROLE_PRIORITY: tuple[Role, ...] = (
    Role.TECH,
    Role.SUPER_USER,
    Role.OWNER,
    Role.HR,
    Role.ADMIN,
    Role.DEPARTMENT_HEAD,
    Role.STORE_MANAGER,
    Role.STORE_DEPARTMENT_HEAD,
    Role.EMPLOYEE,
)


def normalize_role(tag: str | Role) -> str:
    """Canonical form of a role tag: ``"Store Manager"`` -> ``"store_manager"``."""
    if isinstance(tag, Enum):
        tag = tag.value
    return "_".join(str(tag).strip().lower().replace("-", " ").split())


def as_role(tag: str | Role) -> Role | None:
    try:
        return Role(normalize_role(tag))
    except ValueError:
        return None


def resolve_permissions(effective_roles: Iterable[str | Role]) -> frozenset[Permission]:
    """Union of the permission sets of every known role.

    Unknown roles are a configuration problem, not the caller's: they are
    logged and contribute nothing.
    """
    granted: set[Permission] = set()
    for tag in effective_roles or ():
        role = as_role(tag)
        if role is None:
            logger.warning("%s", ConfigurationError(f"role {tag!r} has no permission table entry"))
            continue
        granted |= ROLE_PERMISSIONS[role]
    return frozenset(granted)


def has_permission(effective_roles: Iterable[str | Role], permission: Permission | str) -> bool:
    try:
        key = Permission(permission)
    except ValueError:
        return False
    return key in resolve_permissions(effective_roles)


def highest_access_role(effective_roles: Iterable[str | Role]) -> Role:
    known = {as_role(tag) for tag in effective_roles or ()}
    for role in ROLE_PRIORITY:
        if role in known:
            return role
    return Role.EMPLOYEE
