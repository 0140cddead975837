# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: the store is chosen once per process and
shared by every service.
"""
import threading
from typing import Optional

from fastapi import Depends

from commander.core.config import settings
from commander.services.commander_service import CommanderService
from commander.services.professional_service import ProfessionalService
from commander.stores import ProfessionalStore, create_store

_store: Optional[ProfessionalStore] = None
_store_lock = threading.Lock()


def get_store() -> ProfessionalStore:
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = create_store(settings)
    return _store


def close_store() -> None:
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None


def get_professional_service(
    store: ProfessionalStore = Depends(get_store),
) -> ProfessionalService:
    return ProfessionalService(store)


def get_commander_service(
    store: ProfessionalStore = Depends(get_store),
) -> CommanderService:
    return CommanderService(store)
