# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Persistence contract shared by the relational, DynamoDB and in-memory stores.

Every backend returns plain dicts. ``password_hash`` only ever appears on the
result of :meth:`ProfessionalStore.find_professional_by_email`, which is the
lookup used for authentication.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

TRIAGE_COLORS = ("red", "yellow", "green", "black")

PROFESSIONAL_FIELDS = (
    "professional_id", "name", "email", "phone_number", "role", "group_id",
    "current_event_id", "current_camp_id", "created_at", "updated_at",
)

UPDATABLE_FIELDS = (
    "name", "phone_number", "role", "group_id", "current_camp_id", "current_event_id",
)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def strip_password(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if k != "password_hash"}


def coalesce_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only updatable fields that carry a value; ``None`` means unchanged."""
    return {k: updates[k] for k in UPDATABLE_FIELDS if updates.get(k) is not None}


def empty_casualty_statistics() -> Dict[str, Dict[str, Any]]:
    return {
        color: {"color": color, "in_treatment": 0, "transported": 0, "total": 0}
        for color in TRIAGE_COLORS
    }


class InitOnce:
    """Run an initialiser exactly once, however many threads race to it.

    Callers arriving while the initialiser runs block until it finishes. If it
    raises, the gate stays closed and the next caller tries again.
    """

    def __init__(self, initializer: Callable[[], None]):
        self._initializer = initializer
        self._lock = threading.Lock()
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def ensure(self) -> None:
        if self._done:
            return
        with self._lock:
            if self._done:
                return
            self._initializer()
            self._done = True


class ProfessionalStore(ABC):
    """Data-access contract used by the service layer."""

    backend: str = "abstract"

    @abstractmethod
    def find_professional_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Case-insensitive lookup, including ``password_hash``."""

    @abstractmethod
    def find_professional_by_id(self, professional_id: str) -> Optional[Dict[str, Any]]:
        """Lookup by id, without ``password_hash``."""

    @abstractmethod
    def list_professionals(self) -> List[Dict[str, Any]]:
        """All professionals, without ``password_hash``. Order is backend-defined."""

    @abstractmethod
    def update_professional(self, professional_id: str,
                            updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge non-null updatable fields and refresh ``updated_at``.

        Returns the updated record, or ``None`` when no record has that id.
        """

    @abstractmethod
    def get_active_drill(self) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def set_active_drill(self, drill: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def get_casualty_statistics(self) -> Dict[str, Dict[str, Any]]:
        return empty_casualty_statistics()

    @abstractmethod
    def get_resource_requests(self) -> List[Dict[str, Any]]:
        ...

    def get_task_summary(self, professional_id: str) -> Optional[Dict[str, Any]]:
        """Per-professional task aggregate; only the relational store has one."""
        return None

    def verify_connection(self) -> None:
        pass

    def close(self) -> None:
        pass
