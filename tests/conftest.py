from __future__ import annotations

import os
import tempfile
from datetime import date

# Keep logs and the audit file out of the working tree; must run before staffhub imports settings.
os.environ.setdefault("STAFFHUB_DATA_DIR", tempfile.mkdtemp(prefix="staffhub-tests-"))

import pytest

from staffhub.repositories.data_store import DataStore
from staffhub.services.audit_service import AuditLog, AuditService
from staffhub.services.directory_service import DirectoryService
from staffhub.services.leave_service import LeaveService


@pytest.fixture
def store() -> DataStore:
    return DataStore()


@pytest.fixture
def directory(store: DataStore) -> DirectoryService:
    return DirectoryService(store=store)


@pytest.fixture
def audit_service(tmp_path) -> AuditService:
    return AuditService(audit_log=AuditLog(tmp_path / "audit.jsonl"))


@pytest.fixture
def leave_service(store: DataStore, directory: DirectoryService, audit_service: AuditService) -> LeaveService:
    # 2026-01-01 is a Thursday; with 15 days notice the earliest start is 2026-01-16.
    return LeaveService(
        store=store,
        directory_service=directory,
        audit_service=audit_service,
        clock=lambda: date(2026, 1, 1),
        jurisdiction="PT",
    )
