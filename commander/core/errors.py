# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Domain errors and the `{success: false, ...}` failure envelope."""
from typing import Optional

from fastapi.responses import JSONResponse

from commander.core.config import settings
from commander.core.logging import get_logger

logger = get_logger(__name__)


class CommanderError(Exception):
    """Base class for errors the route layer maps to a status code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CommanderError):
    status_code = 404


class ForbiddenError(CommanderError):
    status_code = 403


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def internal_failure(message: str, exc: Optional[BaseException] = None) -> JSONResponse:
    """Log an unexpected error and hide its detail outside development."""
    logger.error("%s: %s", message, exc, exc_info=exc)
    content = {"success": False, "message": message}
    if exc is not None and settings.is_development:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)
