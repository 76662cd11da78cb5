"""
PostDesk API Response Utilities
Error envelope and exception handlers
"""
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import HTTPException, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging_config import api_logger
from .scheduling.errors import SchedulingError


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_body(message: str, error_code: str, details: Optional[Dict] = None) -> Dict:
    body = {
        "ok": False,
        "error": message,
        "error_code": error_code,
        "timestamp": _timestamp(),
    }
    if details:
        body["details"] = details
    return body


# ============================================================
# ERRORS
# ============================================================

class ApiException(HTTPException):
    """HTTP exception carrying a machine-readable error code"""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str = None,
        details: Dict = None,
    ):
        self.error_code = error_code or f"ERR_{status_code}"
        self.details = details
        super().__init__(status_code=status_code, detail=message)


def bad_request(message: str, code: str = "BAD_REQUEST", details: Dict = None):
    raise ApiException(400, message, code, details)

def forbidden(message: str = "Access denied"):
    raise ApiException(403, message, "FORBIDDEN")

def not_found(resource: str = "Resource", id=None):
    message = f"{resource} not found" if id is None else f"{resource} '{id}' not found"
    raise ApiException(404, message, "NOT_FOUND")

def conflict(message: str = "Resource conflict"):
    raise ApiException(409, message, "CONFLICT")


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """ApiException and plain HTTPException share one envelope"""
    error_code = getattr(exc, "error_code", f"HTTP_{exc.status_code}")
    api_logger.warning(
        f"HTTP Error: {exc.detail}",
        status_code=exc.status_code,
        error_code=error_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), error_code, getattr(exc, "details", None)),
        headers=getattr(exc, "headers", None),
    )


async def scheduling_exception_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    """Every scheduling failure is a client error"""
    api_logger.warning(
        f"Scheduling error: {exc.message}",
        error_code=exc.error_code,
        path=request.url.path,
    )
    return JSONResponse(status_code=400, content=error_body(exc.message, exc.error_code))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request fields are reported as 400"""
    errors = exc.errors()
    fields = [".".join(str(part) for part in e["loc"] if part != "body") for e in errors]
    missing = [f for f, e in zip(fields, errors) if e["type"] == "missing"]
    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = f"Invalid value for: {', '.join(fields)}"

    api_logger.warning(message, path=request.url.path)
    return JSONResponse(
        status_code=400,
        content=error_body(message, "VALIDATION_ERROR", {"fields": fields}),
    )
