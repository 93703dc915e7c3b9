from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Optional
from uuid import uuid4

from staffhub.core.config import settings
from staffhub.models.audit import AuditEntry
from staffhub.services.access_service import AccessContext
from staffhub.services.scope import ResourceKind, build_visibility_predicate, ensure_visible


logger = logging.getLogger(__name__)


class AuditLog:
    """Append-only JSONL action log."""

    def __init__(self, log_path: Path | None = None) -> None:
        self.log_path = log_path or Path(settings.data_dir) / "audit.jsonl"
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = RLock()

    def append(self, entry: AuditEntry) -> None:
        line = entry.model_dump_json()
        with self.lock:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")

    def read_entries(self) -> list[AuditEntry]:
        if not self.log_path.exists():
            return []

        with self.lock:
            lines = self.log_path.read_text(encoding="utf-8").splitlines()

        entries: list[AuditEntry] = []
        for raw in lines:
            if not raw.strip():
                continue
            try:
                entries.append(AuditEntry.model_validate(json.loads(raw)))
            except (json.JSONDecodeError, ValueError):
                logger.warning("Skipping malformed audit line in %s", self.log_path)
                continue
        return entries


class AuditService:
    def __init__(self, audit_log: AuditLog) -> None:
        self.audit_log = audit_log

    def record(
        self,
        actor_id: str,
        action: str,
        target_model: str,
        store_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> AuditEntry:
        entry = AuditEntry(
            entry_id=f"log-{uuid4().hex[:10]}",
            actor_id=actor_id,
            action=action,
            target_model=target_model,
            store_id=store_id,
            details=details or {},
            created_at=datetime.now(timezone.utc),
        )
        self.audit_log.append(entry)
        return entry

    def list_entries(
        self,
        context: AccessContext,
        action: Optional[str] = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        """Newest-first entries visible to ``context``.

        Raises ``AuthorizationDenied`` when no policy covers the actor, so an
        empty list always means "authorized, nothing matched".
        """
        predicate = ensure_visible(
            build_visibility_predicate(context.roles, context.scope, ResourceKind.AUDIT_ENTRY)
        )
        entries = predicate.filter(self.audit_log.read_entries())
        if action:
            entries = [e for e in entries if e.action == action]
        entries.sort(key=lambda e: e.created_at, reverse=True)
        return entries[:limit]
