# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from commander.stores.base import UPDATABLE_FIELDS


def _either(snake: str, camel: str):
    return Field(default=None, validation_alias=AliasChoices(snake, camel))


class ProfessionalUpdate(BaseModel):
    """Fields left out (or sent as null) keep their stored value."""

    name: Optional[str] = None
    phone_number: Optional[str] = _either("phone_number", "phoneNumber")
    role: Optional[str] = None
    group_id: Optional[str] = _either("group_id", "groupId")
    current_camp_id: Optional[str] = _either("current_camp_id", "currentCampId")
    current_event_id: Optional[str] = _either("current_event_id", "currentEventId")

    def to_updates(self) -> Dict[str, Any]:
        return {field: getattr(self, field) for field in UPDATABLE_FIELDS}


class ProfessionalOut(BaseModel):
    professional_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    role: Optional[str] = None
    group_id: Optional[str] = None
    current_event_id: Optional[str] = None
    current_camp_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfessionalList(BaseModel):
    success: bool = True
    professionals: List[ProfessionalOut]


class ProfessionalResponse(BaseModel):
    success: bool = True
    professional: ProfessionalOut


class ProfessionalUpdated(ProfessionalResponse):
    message: str = "Professional updated successfully"


class TaskSummaryResponse(BaseModel):
    success: bool = True
    taskSummary: Dict[str, Any]


class DrillCreate(BaseModel):
    drill_name: Optional[str] = _either("drill_name", "drillName")
    location: Optional[str] = None
    date: Optional[str] = None
    role_assignments: Optional[Dict[str, Any]] = _either("role_assignments", "roleAssignments")


class CasualtyBucket(BaseModel):
    color: str
    in_treatment: int
    transported: int
    total: int


class CasualtyStatisticsResponse(BaseModel):
    success: bool = True
    data: Dict[str, CasualtyBucket]


class ResourceRequestsResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]
