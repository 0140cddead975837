# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""System endpoints — health, readiness, metrics."""
from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from commander.core.config import settings
from commander.core.dependencies import get_store
from commander.stores import ProfessionalStore

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


@router.get("/health/ready")
def readiness_check(store: ProfessionalStore = Depends(get_store)):
    try:
        store.verify_connection()
        return {"status": "ok", "backend": store.backend, "store": "connected"}
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"Store unavailable: {exc}")


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
