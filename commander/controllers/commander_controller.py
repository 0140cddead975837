# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: commander dashboard views (own profile, drills, casualties, resources)."""
from fastapi import APIRouter, Depends

from commander.core.dependencies import get_commander_service
from commander.core.errors import CommanderError, failure, internal_failure
from commander.core.security import Actor, get_current_actor
from commander.schemas import (
    CasualtyStatisticsResponse, DrillCreate, ProfessionalResponse, ResourceRequestsResponse,
)
from commander.services.commander_service import CommanderService

router = APIRouter(tags=["Commander"])


@router.get("/auth/me", response_model=ProfessionalResponse)
def me(actor: Actor = Depends(get_current_actor),
       service: CommanderService = Depends(get_commander_service)):
    try:
        return {"success": True, "professional": service.me(actor)}
    except CommanderError as exc:
        return failure(exc.status_code, exc.message)
    except Exception as exc:
        return internal_failure("Failed to retrieve professional", exc)


@router.get("/drills/active")
def get_active_drill(actor: Actor = Depends(get_current_actor),
                     service: CommanderService = Depends(get_commander_service)):
    try:
        return service.get_active_drill()
    except CommanderError as exc:
        return failure(exc.status_code, exc.message)
    except Exception as exc:
        return internal_failure("Failed to retrieve active drill", exc)


@router.post("/drills", status_code=201)
def start_drill(body: DrillCreate,
                actor: Actor = Depends(get_current_actor),
                service: CommanderService = Depends(get_commander_service)):
    if not body.drill_name or not body.date:
        return failure(400, "Drill name and date are required")
    try:
        return service.start_drill(
            actor, drill_name=body.drill_name, drill_date=body.date,
            location=body.location, role_assignments=body.role_assignments,
        )
    except Exception as exc:
        return internal_failure("Failed to start drill", exc)


@router.get("/casualties/statistics", response_model=CasualtyStatisticsResponse)
def get_casualty_statistics(actor: Actor = Depends(get_current_actor),
                            service: CommanderService = Depends(get_commander_service)):
    try:
        return {"success": True, "data": service.get_casualty_statistics()}
    except Exception as exc:
        return internal_failure("Failed to retrieve casualty statistics", exc)


@router.get("/resources", response_model=ResourceRequestsResponse)
def get_resource_requests(actor: Actor = Depends(get_current_actor),
                          service: CommanderService = Depends(get_commander_service)):
    try:
        return {"success": True, "data": service.get_resource_requests()}
    except Exception as exc:
        return internal_failure("Failed to retrieve resource requests", exc)
