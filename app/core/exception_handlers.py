# /school-backend/app/core/exception_handlers.py

"""
Global exception handlers. Every error leaves the API in the same error
envelope, with the HTTP status taken from the error taxonomy.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import config, responses
from app.core.errors import AppError, ErrorCode, ErrorSeverity
from app.core.logging_config import get_logger
from app.services.database_helpers.base_repository_sql import classify_database_error

logger = get_logger(__name__)


def _envelope(request: Request, status_code: int, message: str, error_detail: dict, headers=None) -> JSONResponse:
    body = responses.error(message=message, status_code=status_code, error_detail=error_detail, request=request)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def _detail(code: ErrorCode, severity: ErrorSeverity, additional_info: dict = None) -> dict:
    detail = {"code": code.value, "severity": severity.value}
    if additional_info:
        detail["additionalInfo"] = additional_info
    return detail


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r} {exc.additional_info}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code.value}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _envelope(request, exc.status_code, exc.message, exc.to_dict(), headers=headers)


def validation_error_handler(request: Request, exc) -> JSONResponse:
    errors = []
    for e in exc.errors():
        loc = e.get("loc") or ()
        errors.append({
            "field": ".".join(str(part) for part in loc if part not in ("body", "query", "path")),
            "message": e.get("msg", "Invalid value"),
            "type": e.get("type"),
        })
    return _envelope(
        request, 400, "Validation failed",
        _detail(ErrorCode.VAL_MISSING_REQUIRED_FIELD, ErrorSeverity.WARNING, {"errors": errors}),
    )


def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    status_code, code, description = classify_database_error(exc)
    logger.error(f"Unwrapped database error on {request.method} {request.url.path}: {exc}")
    return _envelope(request, status_code, description, _detail(code, ErrorSeverity.ERROR))


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        message = f"Route not found: {request.method} {request.url.path}"
        return _envelope(request, 404, message, _detail(ErrorCode.RES_NOT_FOUND, ErrorSeverity.WARNING))
    code = ErrorCode.GEN_INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.VAL_INVALID_FORMAT
    return _envelope(request, exc.status_code, str(exc.detail), _detail(code, ErrorSeverity.WARNING))


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    info = {"exception": repr(exc)} if config.ENVIRONMENT == "development" else None
    return _envelope(
        request, 500, "Internal Server Error",
        _detail(ErrorCode.GEN_INTERNAL_ERROR, ErrorSeverity.CRITICAL, info),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PydanticValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
