# type: ignore
# pyright: reportGeneralTypeIssues=false
"""
Commander Backend
=================
REST backend for mass-casualty-incident coordination: responder
("professional") records, the active drill, casualty statistics and
resource requests.

Persistence is pluggable and fixed at startup:
    USE_DYNAMODB=1      → DynamoDB / DynamoDB Local (lazy tables, seeded commander)
    USE_MEMORY_STORE=1  → process-local memory (seeded commander)
    otherwise           → relational database at DATABASE_URL

Port: 5010
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from commander import __version__
from commander.controllers import commander_controller, professional_controller, system_controller
from commander.core.config import settings
from commander.core.dependencies import close_store, get_store
from commander.core.logging import get_logger
from commander.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    store = get_store()
    logger.info("Commander backend starting backend=%s env=%s", store.backend, settings.APP_ENV)
    yield
    close_store()
    logger.info("Shutting down, store closed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Commander Backend",
    description="Responder records, drills and casualty overview for MCI coordination.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    content = {"success": False, "message": "Invalid request body"}
    if settings.is_development:
        content["error"] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=422, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    content = {"success": False, "message": "Internal server error"}
    if settings.is_development:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


app.include_router(system_controller.router)
app.include_router(professional_controller.router, prefix=settings.API_PREFIX)
app.include_router(commander_controller.router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=5010)
