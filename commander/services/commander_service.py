# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Commander dashboard logic: own profile, active drill, casualty and resource views."""
from typing import Any, Dict, List, Optional

from commander.core.errors import NotFoundError
from commander.core.ids import generate_drill_id
from commander.core.logging import get_logger
from commander.core.security import Actor
from commander.metrics import DRILLS_STARTED
from commander.stores.base import ProfessionalStore, utc_now_iso

logger = get_logger(__name__)


class CommanderService:
    def __init__(self, store: ProfessionalStore):
        self._store = store

    def me(self, actor: Actor) -> Dict[str, Any]:
        row = self._store.find_professional_by_id(actor.professional_id)
        if not row:
            raise NotFoundError("Professional not found")
        return row

    def get_active_drill(self) -> Dict[str, Any]:
        drill = self._store.get_active_drill()
        if not drill:
            raise NotFoundError("No active drill found")
        return drill

    def start_drill(self, actor: Actor, drill_name: str, drill_date: str,
                    location: Optional[str] = None,
                    role_assignments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        now = utc_now_iso()
        drill = {
            "id": generate_drill_id(),
            "drill_name": drill_name,
            "location": location or "",
            "drill_date": drill_date,
            "role_assignments": role_assignments or {},
            "is_active": True,
            "created_by": actor.professional_id,
            "created_at": now,
            "updated_at": now,
        }
        self._store.set_active_drill(drill)
        DRILLS_STARTED.inc()
        logger.info("Drill started id=%s name=%s by=%s", drill["id"], drill_name,
                    actor.professional_id)
        return drill

    def get_casualty_statistics(self) -> Dict[str, Dict[str, Any]]:
        return self._store.get_casualty_statistics()

    def get_resource_requests(self) -> List[Dict[str, Any]]:
        return self._store.get_resource_requests() or []
