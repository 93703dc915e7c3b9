from __future__ import annotations

from threading import RLock
from typing import Any


class DataStore:
    """Simple in-memory repository for personnel, organization and leave records."""

    def __init__(self) -> None:
        self.lock = RLock()
        self.actors: dict[str, dict[str, Any]] = {}
        self.positions: dict[str, dict[str, Any]] = {}
        self.stores: dict[str, dict[str, Any]] = {}
        self.departments: dict[str, dict[str, Any]] = {}
        self.store_departments: dict[str, dict[str, Any]] = {}
        self.leave_requests: dict[str, dict[str, Any]] = {}
