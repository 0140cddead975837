# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Store: process-local professionals, passwords and drill state.
Nothing survives a restart; the default commander account is seeded on first use.
"""

import copy
import threading
from typing import Any, Dict, List, Optional

from commander.core.logging import get_logger
from commander.metrics import STORE_INITIALIZATIONS
from commander.stores.base import (
    InitOnce, ProfessionalStore, coalesce_updates, normalize_email, utc_now_iso,
)
from commander.stores.seed import commander_record, hash_password

logger = get_logger(__name__)

SEED_PROFESSIONAL_ID = "PRO-memory-commander-1"


class MemoryProfessionalStore(ProfessionalStore):
    """In-memory storage keyed by normalised email."""

    backend = "memory"

    def __init__(self, seed_email: str = "commander@test.com",
                 seed_password: str = "commander123", bcrypt_rounds: int = 10) -> None:
        self._professionals: dict[str, dict[str, Any]] = {}
        self._passwords: dict[str, str] = {}
        self._resource_requests: list[dict[str, Any]] = []
        self._active_drill: Optional[dict[str, Any]] = None
        self._lock = threading.RLock()
        self._seed_email = seed_email
        self._seed_password = seed_password
        self._bcrypt_rounds = bcrypt_rounds
        self._init = InitOnce(self._seed)

    # ── Lifecycle ──

    def _seed(self) -> None:
        password_hash = hash_password(self._seed_password, self._bcrypt_rounds)
        record = commander_record(SEED_PROFESSIONAL_ID, "Commander (Local)", self._seed_email)
        with self._lock:
            self._professionals[normalize_email(self._seed_email)] = record
            self._passwords[SEED_PROFESSIONAL_ID] = password_hash
        STORE_INITIALIZATIONS.labels(backend=self.backend).inc()
        logger.info("Seeded default commander id=%s", SEED_PROFESSIONAL_ID)

    def ensure_seeded(self) -> None:
        self._init.ensure()

    # ── Professionals ──

    def find_professional_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        self.ensure_seeded()
        with self._lock:
            row = self._professionals.get(normalize_email(email))
            if row is None:
                return None
            return {**row, "password_hash": self._passwords.get(row["professional_id"])}

    def find_professional_by_id(self, professional_id: str) -> Optional[Dict[str, Any]]:
        self.ensure_seeded()
        with self._lock:
            row = self._find_by_id(professional_id)
            return dict(row) if row is not None else None

    def list_professionals(self) -> List[Dict[str, Any]]:
        self.ensure_seeded()
        with self._lock:
            return [dict(row) for row in self._professionals.values()]

    def update_professional(self, professional_id: str,
                            updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.ensure_seeded()
        changes = coalesce_updates(updates)
        with self._lock:
            row = self._find_by_id(professional_id)
            if row is None:
                return None
            row.update(changes)
            row["updated_at"] = utc_now_iso()
            return dict(row)

    # ── Drill / casualties / resources ──

    def get_active_drill(self) -> Optional[Dict[str, Any]]:
        self.ensure_seeded()
        with self._lock:
            return copy.deepcopy(self._active_drill)

    def set_active_drill(self, drill: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            self._active_drill = copy.deepcopy(drill)
        return drill

    def get_resource_requests(self) -> List[Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._resource_requests)

    # ── Private ──

    def _find_by_id(self, professional_id: str) -> Optional[dict[str, Any]]:
        for row in self._professionals.values():
            if row.get("professional_id") == professional_id:
                return row
        return None
