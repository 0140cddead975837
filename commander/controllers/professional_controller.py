# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: professional list, read, task summary and update."""
from fastapi import APIRouter, Depends

from commander.core.dependencies import get_professional_service
from commander.core.errors import CommanderError, failure, internal_failure
from commander.core.security import Actor, get_current_actor
from commander.schemas import (
    ProfessionalList, ProfessionalResponse, ProfessionalUpdate, ProfessionalUpdated,
    TaskSummaryResponse,
)
from commander.services.professional_service import ProfessionalService

router = APIRouter(prefix="/professionals", tags=["Professionals"])


@router.get("", response_model=ProfessionalList)
def list_professionals(actor: Actor = Depends(get_current_actor),
                       service: ProfessionalService = Depends(get_professional_service)):
    try:
        return {"success": True, "professionals": service.list_professionals()}
    except Exception as exc:
        return internal_failure("Failed to retrieve professionals", exc)


# Registered before /{professional_id} so "tasks" is never read as an id.
@router.get("/{professional_id}/tasks", response_model=TaskSummaryResponse)
def get_professional_tasks(professional_id: str,
                           actor: Actor = Depends(get_current_actor),
                           service: ProfessionalService = Depends(get_professional_service)):
    try:
        return {"success": True, "taskSummary": service.get_task_summary(professional_id)}
    except CommanderError as exc:
        return failure(exc.status_code, exc.message)
    except Exception as exc:
        return internal_failure("Failed to retrieve professional task summary", exc)


@router.get("/{professional_id}", response_model=ProfessionalResponse)
def get_professional(professional_id: str,
                     actor: Actor = Depends(get_current_actor),
                     service: ProfessionalService = Depends(get_professional_service)):
    try:
        return {"success": True, "professional": service.get_professional(professional_id)}
    except CommanderError as exc:
        return failure(exc.status_code, exc.message)
    except Exception as exc:
        return internal_failure("Failed to retrieve professional", exc)


@router.put("/{professional_id}", response_model=ProfessionalUpdated)
def update_professional(professional_id: str, body: ProfessionalUpdate,
                        actor: Actor = Depends(get_current_actor),
                        service: ProfessionalService = Depends(get_professional_service)):
    try:
        updated = service.update_professional(actor, professional_id, body.to_updates())
    except CommanderError as exc:
        return failure(exc.status_code, exc.message)
    except Exception as exc:
        return internal_failure("Failed to update professional", exc)
    return {
        "success": True,
        "message": "Professional updated successfully",
        "professional": updated,
    }
