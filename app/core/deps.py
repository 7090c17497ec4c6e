# /school-backend/app/core/deps.py

"""
FastAPI dependencies for authentication, permission checks and school
scoping. Routers declare them with `Depends(...)`.
"""

import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core import security
from app.core.errors import ErrorCode, ForbiddenError, UnauthorizedError
from app.core.logging_config import get_logger
from app.db.models.school_user_models import User
from app.services import rbac_service
from app.services.database_service import DatabaseService, get_db_service

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SCHOOL_SCOPED_ROLES = ("admin", "manager")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: DatabaseService = Depends(get_db_service),
) -> User:
    """Resolves the bearer token to a `User`, or raises 401."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No authentication token provided", code=ErrorCode.AUTH_MISSING_TOKEN)

    payload = security.decode_access_token(credentials.credentials)
    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise UnauthorizedError("Invalid authentication token", code=ErrorCode.AUTH_INVALID_TOKEN)

    user = db.users.get_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists", code=ErrorCode.AUTH_INVALID_TOKEN)
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise UnauthorizedError("Inactive user", code=ErrorCode.AUTH_INVALID_CREDENTIALS)
    return current_user


def require_permission(resource: str, action: str):
    """
    Builds a dependency that lets the request through only when the current
    user holds `action` on `resource`. Returns the user so routes can use it.
    """
    def permission_checker(
        current_user: User = Depends(get_current_active_user),
        db: DatabaseService = Depends(get_db_service),
    ) -> User:
        if not rbac_service.has_permission(db, current_user, resource, action):
            logger.warning(f"User {current_user.id} denied {action} on {resource}")
            raise ForbiddenError(
                "Insufficient permissions",
                additional_info={"resource": resource, "action": action, "userId": str(current_user.id)},
            )
        return current_user

    return permission_checker


def get_school_context(current_user: User = Depends(get_current_active_user)) -> Optional[uuid.UUID]:
    """
    The school a request is confined to. `super_admin` and the non-administrative
    roles are not confined (None). `admin` and `manager` are confined to their
    own school and are refused outright if they have none.
    """
    if current_user.role in SCHOOL_SCOPED_ROLES:
        if not current_user.school_id:
            logger.warning(f"User {current_user.id} ({current_user.role}) has no school assignment")
            raise ForbiddenError("Access denied: No school context found for this user")
        return current_user.school_id
    return None


def ensure_school_access(school_context: Optional[uuid.UUID], school_id) -> None:
    """Raises 403 when a school-confined caller targets a different school."""
    if school_context is not None and school_id is not None and str(school_id) != str(school_context):
        raise ForbiddenError(
            "Access denied: Resource belongs to a different school",
            additional_info={"schoolId": str(school_id)},
        )
