from __future__ import annotations

from datetime import timedelta
from typing import Any

from staffhub.core.config import settings
from staffhub.core.exceptions import NotFound
from staffhub.core.rbac import highest_access_role
from staffhub.core.security import create_access_token, hash_password, verify_password
from staffhub.models.auth import AccessSummary, ActorPublic, Token
from staffhub.models.personnel import ActorRecord, Department, Position, Store, StoreDepartment
from staffhub.repositories.data_store import DataStore
from staffhub.services.access_service import AccessContext, build_access_context


class DirectoryService:
    def __init__(self, store: DataStore, seed: bool = True) -> None:
        self.store = store
        if seed:
            self._seed()

    def _seed(self) -> None:
        positions = [
            {"position_id": "pos-owner", "name": "Owner", "roles": ["Owner"]},
            {"position_id": "pos-hr", "name": "HR Officer", "roles": ["HR"]},
            {"position_id": "pos-manager", "name": "Store Manager", "roles": ["Store Manager"]},
            {"position_id": "pos-waiter", "name": "Waiter", "roles": []},
        ]
        stores = [
            {"store_id": "st-lisbon", "name": "Lisboa Centro", "managers": ["u-mgr-001"], "sub_managers": []},
            {"store_id": "st-porto", "name": "Porto Ribeira", "managers": [], "sub_managers": ["u-mgr-002"]},
        ]
        departments = [
            {"department_id": "dep-kitchen", "name": "Kitchen", "department_heads": ["u-head-001"]},
        ]
        store_departments = [
            {
                "store_department_id": "sd-lisbon-kitchen",
                "store_id": "st-lisbon",
                "department_id": "dep-kitchen",
                "heads": ["u-emp-001"],
            },
        ]
        actors = [
            ("u-tech-001", "tech_ops", "Rui Santos", ["tech"], None, None, "tech123"),
            ("u-own-001", "owner_ana", "Ana Costa", [], "pos-owner", None, "owner123"),
            ("u-hr-001", "hr_marta", "Marta Silva", [], "pos-hr", None, "hr123"),
            ("u-mgr-001", "mgr_joao", "Joao Pereira", [], "pos-waiter", "st-lisbon", "manager123"),
            ("u-mgr-002", "mgr_carla", "Carla Mendes", [], "pos-manager", "st-porto", "manager456"),
            ("u-head-001", "head_ines", "Ines Ferreira", [], None, "st-lisbon", "head123"),
            ("u-emp-001", "emp_tiago", "Tiago Almeida", [], "pos-waiter", "st-lisbon", "employee123"),
            ("u-emp-002", "emp_sofia", "Sofia Rocha", ["Employee"], "pos-waiter", "st-porto", "employee456"),
        ]

        with self.store.lock:
            if self.store.actors:
                return
            for row in positions:
                self.store.positions[row["position_id"]] = Position(**row).model_dump()
            for row in stores:
                self.store.stores[row["store_id"]] = Store(**row).model_dump()
            for row in departments:
                self.store.departments[row["department_id"]] = Department(**row).model_dump()
            for row in store_departments:
                self.store.store_departments[row["store_department_id"]] = StoreDepartment(**row).model_dump()
            for actor_id, username, full_name, roles, position_id, store_id, password in actors:
                record = ActorRecord(
                    actor_id=actor_id,
                    username=username,
                    full_name=full_name,
                    roles=roles,
                    position_id=position_id,
                    store_id=store_id,
                    hashed_password=hash_password(password),
                )
                record.leave_balance.default_days = settings.default_leave_days
                self.store.actors[actor_id] = record.model_dump()

    def authenticate(self, username: str, password: str) -> dict[str, Any] | None:
        with self.store.lock:
            actors = list(self.store.actors.values())
        actor = next((a for a in actors if a["username"] == username), None)
        if not actor or not actor.get("active", True):
            return None
        if not verify_password(password, actor["hashed_password"]):
            return None
        return actor

    def issue_token(self, actor: dict[str, Any]) -> Token:
        token, expires_at = create_access_token(
            subject=actor["actor_id"],
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )
        return Token(access_token=token, expires_at=expires_at)

    def require_actor(self, actor_id: str) -> dict[str, Any]:
        with self.store.lock:
            actor = self.store.actors.get(actor_id)
        if not actor:
            raise NotFound(f"Actor {actor_id} not found")
        return actor

    def access_context(self, actor_id: str) -> AccessContext:
        """Resolve roles and permissions from the records as they are right now."""
        with self.store.lock:
            actor = self.store.actors.get(actor_id)
            if not actor:
                raise NotFound(f"Actor {actor_id} not found")
            actor = dict(actor)
            position = self.store.positions.get(actor.get("position_id") or "")
            stores = list(self.store.stores.values())
            departments = list(self.store.departments.values())
            store_departments = list(self.store.store_departments.values())

        return build_access_context(
            actor,
            stores=stores,
            departments=departments,
            position=position,
            store_departments=store_departments,
        )

    def as_public(self, actor: dict[str, Any]) -> ActorPublic:
        return ActorPublic(
            actor_id=actor["actor_id"],
            username=actor["username"],
            full_name=actor["full_name"],
            position_id=actor.get("position_id"),
            store_id=actor.get("store_id"),
            active=bool(actor.get("active", True)),
            leave_balance=actor["leave_balance"],
        )

    def summarize_access(self, context: AccessContext) -> AccessSummary:
        return AccessSummary(
            actor=self.as_public(context.actor),
            roles=sorted(context.roles),
            permissions=sorted(p.value for p in context.permissions),
            highest_role=highest_access_role(context.roles).value,
        )

    def store_managers(self, store_id: str | None) -> set[str]:
        with self.store.lock:
            store = self.store.stores.get(store_id or "")
        if not store or not store.get("active", True):
            return set()
        return set(store.get("managers") or []) | set(store.get("sub_managers") or [])

    def list_actors(self) -> list[ActorPublic]:
        with self.store.lock:
            actors = list(self.store.actors.values())
        return [self.as_public(a) for a in actors]
