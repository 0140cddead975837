# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for reading and updating professionals."""
from typing import Any, Dict, List

from commander.core.errors import ForbiddenError, NotFoundError
from commander.core.logging import get_logger
from commander.core.security import Actor
from commander.metrics import PROFESSIONAL_UPDATES
from commander.stores.base import ProfessionalStore, strip_password

logger = get_logger(__name__)


class ProfessionalService:
    def __init__(self, store: ProfessionalStore):
        self._store = store

    def list_professionals(self) -> List[Dict[str, Any]]:
        rows = self._store.list_professionals()
        return sorted((strip_password(r) for r in rows), key=lambda r: r.get("name") or "")

    def get_professional(self, professional_id: str) -> Dict[str, Any]:
        row = self._store.find_professional_by_id(professional_id)
        if not row:
            raise NotFoundError("Professional not found")
        return row

    def get_task_summary(self, professional_id: str) -> Dict[str, Any]:
        summary = self._store.get_task_summary(professional_id)
        if not summary:
            raise NotFoundError("Professional not found")
        return summary

    def update_professional(self, actor: Actor, professional_id: str,
                            updates: Dict[str, Any]) -> Dict[str, Any]:
        if actor.professional_id != professional_id and not actor.is_commander:
            PROFESSIONAL_UPDATES.labels(outcome="forbidden").inc()
            logger.warning("Update of %s refused for actor=%s role=%s",
                           professional_id, actor.professional_id, actor.role)
            raise ForbiddenError("Only commanders can update other professionals")

        updated = self._store.update_professional(professional_id, updates)
        if not updated:
            PROFESSIONAL_UPDATES.labels(outcome="not_found").inc()
            raise NotFoundError("Professional not found")

        PROFESSIONAL_UPDATES.labels(outcome="updated").inc()
        logger.info("Professional updated id=%s by=%s fields=%s", professional_id,
                    actor.professional_id, sorted(k for k, v in updates.items() if v is not None))
        return updated
