"""
Exception handlers rendering RFC 7807 problem documents.

Every response carries a stable ``code`` for clients and an ``error_id`` for
log correlation. All 401s share one detail so callers cannot tell a bad
password from an unknown account or an expired token from a forged one.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbac_api.core.config import settings
from rbac_api.core.errors import AppError, ErrorCode, InternalError, UnauthorizedError

logger = structlog.get_logger()

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    500: "Internal Server Error",
    502: "Bad Gateway",
}

_HTTP_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
}


def problem(
    request: Request,
    *,
    status: int,
    code: ErrorCode,
    detail: str,
    error_id: str | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": _TITLES.get(status, "Error"),
        "status": status,
        "detail": detail,
        "code": code.value,
        "instance": request.url.path,
    }
    if error_id:
        body["error_id"] = error_id
    if errors:
        body["errors"] = errors

    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(
        status_code=status,
        content=body,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.failed", code=exc.code.value, error_id=exc.error_id, message=exc.message)
    else:
        logger.info("request.rejected", code=exc.code.value, error_id=exc.error_id, message=exc.message)

    detail = "Unauthorized" if isinstance(exc, UnauthorizedError) else exc.message
    errors = [{"field": k, "msg": v} for k, v in getattr(exc, "errors", {}).items()]
    return problem(
        request,
        status=exc.status_code,
        code=exc.code,
        detail=detail,
        error_id=exc.error_id,
        errors=errors or None,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body/query validation failures render as 400."""
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return problem(
        request,
        status=400,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Invalid input",
        errors=errors,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    detail = "Unauthorized" if exc.status_code == 401 else str(exc.detail)
    return problem(request, status=exc.status_code, code=code, detail=detail)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything untyped becomes a 500 without leaking internals."""
    error = InternalError()
    logger.exception("request.unhandled_exception", error_id=error.error_id)
    detail = str(exc) if settings.debug else error.message
    return problem(
        request,
        status=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
        error_id=error.error_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
