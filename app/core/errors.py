# /school-backend/app/core/errors.py

"""
The application's error taxonomy.

Every error that is meant to reach a client is an `AppError` (or one of its
subclasses). Each carries the HTTP status it maps to, an application error
code from `ErrorCode`, a severity, and an `additional_info` bag with
diagnostic context. The global exception handlers in `app/core/exception_handlers.py`
turn these into the standard error envelope.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes organized by domain: <DOMAIN>-<NUMBER>."""

    # --- Generic ---
    GEN_INTERNAL_ERROR = "GEN-001"
    GEN_NOT_IMPLEMENTED = "GEN-002"

    # --- Authentication ---
    AUTH_INVALID_CREDENTIALS = "AUTH-001"
    AUTH_EXPIRED_TOKEN = "AUTH-002"
    AUTH_INVALID_TOKEN = "AUTH-003"
    AUTH_MISSING_TOKEN = "AUTH-004"
    AUTH_INSUFFICIENT_PERMISSIONS = "AUTH-005"

    # --- Validation ---
    VAL_MISSING_REQUIRED_FIELD = "VAL-001"
    VAL_INVALID_FORMAT = "VAL-002"
    VAL_EXCEEDS_LIMIT = "VAL-003"

    # --- Resources ---
    RES_NOT_FOUND = "RES-001"
    RES_ALREADY_EXISTS = "RES-002"
    RES_CONFLICT = "RES-003"

    # --- Database ---
    DB_CONNECTION_ERROR = "DB-001"
    DB_QUERY_FAILED = "DB-002"
    DB_CONSTRAINT_VIOLATION = "DB-003"
    DB_TRANSACTION_FAILED = "DB-004"

    # --- Files ---
    FILE_ERROR = "FILE-000"
    FILE_UPLOAD_FAILED = "FILE-001"
    FILE_SIZE_EXCEEDED = "FILE-002"
    FILE_TYPE_NOT_ALLOWED = "FILE-003"
    FILE_NOT_FOUND = "FILE-004"
    FILE_DELETE_FAILED = "FILE-005"

    # --- External services ---
    EXT_SERVICE_UNAVAILABLE = "EXT-001"
    EXT_REQUEST_FAILED = "EXT-002"
    EXT_RESPONSE_INVALID = "EXT-003"

    # --- Rate limiting ---
    RATE_LIMIT_EXCEEDED = "RATE-001"

    # --- Network ---
    NET_CONNECTION_FAILED = "NET-001"
    NET_TIMEOUT = "NET-002"


class ErrorSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AppError(Exception):
    """Base class for all errors that carry an HTTP status and an error code."""

    status_code: int = 500
    default_code: ErrorCode = ErrorCode.GEN_INTERNAL_ERROR
    default_severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[ErrorCode] = None,
        severity: Optional[ErrorSeverity] = None,
        additional_info: Optional[Dict[str, Any]] = None,
        is_operational: bool = True,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code or self.default_code
        self.severity = severity or self.default_severity
        self.additional_info = additional_info or {}
        self.is_operational = is_operational
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Returns the `error` member of the error envelope."""
        payload = {
            "code": self.code.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp,
        }
        if self.additional_info:
            payload["additionalInfo"] = self.additional_info
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code.value})"


class NotFoundError(AppError):
    status_code = 404
    default_code = ErrorCode.RES_NOT_FOUND
    default_severity = ErrorSeverity.WARNING


class BadRequestError(AppError):
    status_code = 400
    default_code = ErrorCode.VAL_INVALID_FORMAT
    default_severity = ErrorSeverity.WARNING


class UnauthorizedError(AppError):
    status_code = 401
    default_code = ErrorCode.AUTH_MISSING_TOKEN
    default_severity = ErrorSeverity.WARNING


class ForbiddenError(AppError):
    status_code = 403
    default_code = ErrorCode.AUTH_INSUFFICIENT_PERMISSIONS
    default_severity = ErrorSeverity.WARNING


class ConflictError(AppError):
    status_code = 409
    default_code = ErrorCode.RES_CONFLICT
    default_severity = ErrorSeverity.WARNING


class ValidationError(AppError):
    status_code = 422
    default_code = ErrorCode.VAL_INVALID_FORMAT
    default_severity = ErrorSeverity.WARNING


class DatabaseError(AppError):
    status_code = 500
    default_code = ErrorCode.DB_QUERY_FAILED
    default_severity = ErrorSeverity.ERROR


class ServiceUnavailableError(AppError):
    status_code = 503
    default_code = ErrorCode.EXT_SERVICE_UNAVAILABLE
    default_severity = ErrorSeverity.ERROR


class FileError(AppError):
    status_code = 400
    default_code = ErrorCode.FILE_ERROR
    default_severity = ErrorSeverity.WARNING
