"""Effective-role aggregation.

Role facts for one actor are scattered across several record types: the
actor's own tags, the assigned position, and the manager/head lists kept on
stores and departments. They are unioned here; no source overrides another.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from staffhub.core.exceptions import InputError
from staffhub.core.rbac import Permission, Role, normalize_role, resolve_permissions
from staffhub.services.scope import ActorScope


logger = logging.getLogger(__name__)


def _field(record: Any, name: str, default: Any = None) -> Any:
    if record is None:
        return default
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _ids(record: Any, name: str) -> set[str]:
    values = _field(record, name)
    if not values or isinstance(values, (str, bytes)):
        return set()
    return {str(v) for v in values if v is not None}


def _tags(record: Any, name: str) -> list[str]:
    """Role tags held under ``name``; a bare string is one tag, never a sequence of letters."""
    values = _field(record, name)
    if not values:
        return []
    if isinstance(values, (str, Mapping)):
        values = [values]
    elif isinstance(values, bytes) or not isinstance(values, Iterable):
        return []
    tags = []
    for value in values:
        # Linked role documents carry the tag under "name".
        tag = _field(value, "name") if isinstance(value, Mapping) else value
        if isinstance(tag, (str, Role)):
            tags.append(tag)
    return tags


def _active(records: Optional[Iterable[Any]]) -> list[Any]:
    if not records or isinstance(records, (str, bytes, Mapping)):
        return []
    return [r for r in records if r is not None and _field(r, "active", True)]


def resolve_effective_roles(
    actor: Any,
    stores: Optional[Iterable[Any]] = (),
    departments: Optional[Iterable[Any]] = (),
    position: Any = None,
    store_departments: Optional[Iterable[Any]] = (),
) -> frozenset[str]:
    if actor is None:
        raise InputError("Cannot resolve roles for a missing actor")
    actor_id = _field(actor, "actor_id")
    if not actor_id:
        raise InputError("Actor record has no id")
    actor_id = str(actor_id)

    signals: list[str] = _tags(actor, "roles") + _tags(actor, "role")

    if position is not None and _field(position, "active", True):
        signals.extend(_tags(position, "roles"))

    # Sub-heads deputise for the head and carry the same role.
    if any(actor_id in _ids(d, "department_heads") | _ids(d, "sub_heads") for d in _active(departments)):
        signals.append(Role.DEPARTMENT_HEAD.value)

    for store in _active(stores):
        if actor_id in _ids(store, "managers") | _ids(store, "sub_managers"):
            signals.append(Role.STORE_MANAGER.value)
            break

    if any(actor_id in _ids(sd, "heads") | _ids(sd, "sub_heads") for sd in _active(store_departments)):
        signals.append(Role.STORE_DEPARTMENT_HEAD.value)

    roles = {normalize_role(tag) for tag in signals if tag and str(tag).strip()}
    roles.add(Role.EMPLOYEE.value)
    return frozenset(roles)


@dataclass(frozen=True)
class AccessContext:
    """One actor's freshly resolved access, built per request and never cached."""

    actor: Any
    roles: frozenset[str]
    permissions: frozenset[Permission]
    scope: ActorScope

    def has_role(self, *roles: Role | str) -> bool:
        return any(normalize_role(r) in self.roles for r in roles)

    def can(self, permission: Permission | str) -> bool:
        try:
            return Permission(permission) in self.permissions
        except ValueError:
            return False


def build_access_context(
    actor: Any,
    stores: Optional[Iterable[Any]] = (),
    departments: Optional[Iterable[Any]] = (),
    position: Any = None,
    store_departments: Optional[Iterable[Any]] = (),
) -> AccessContext:
    roles = resolve_effective_roles(actor, stores, departments, position, store_departments)
    permissions = set(resolve_permissions(roles))

    if position is not None and _field(position, "active", True):
        for key in _tags(position, "permissions"):
            try:
                permissions.add(Permission(key))
            except ValueError:
                logger.warning("Position %s lists unknown permission key %r", _field(position, "position_id"), key)

    scope = ActorScope(actor_id=str(_field(actor, "actor_id")), store_id=_field(actor, "store_id"))
    return AccessContext(actor=actor, roles=roles, permissions=frozenset(permissions), scope=scope)
