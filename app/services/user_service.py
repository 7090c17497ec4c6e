# /school-backend/app/services/user_service.py

"""
Business logic for user accounts and authentication.
"""

from typing import Optional

from app.core import security
from app.core.errors import ConflictError, ErrorCode, NotFoundError, UnauthorizedError
from app.core.logging_config import get_logger
from app.db.models.school_user_models import User
from app.models import user_model
from .database_service import DatabaseService

logger = get_logger(__name__)


def create_user(db: DatabaseService, user: user_model.UserCreate) -> User:
    """
    Registers a new account. Username and email must both be unused; the
    school, when given, must exist.
    """
    if db.users.get_by_username(user.username):
        raise ConflictError(
            "Username is already taken",
            code=ErrorCode.RES_ALREADY_EXISTS,
            additional_info={"field": "username"},
        )
    if user.email and db.users.get_by_email(user.email):
        raise ConflictError(
            "Email is already registered",
            code=ErrorCode.RES_ALREADY_EXISTS,
            additional_info={"field": "email"},
        )
    if user.school_id and not db.schools.get_by_id(user.school_id):
        raise NotFoundError(f"School with ID {user.school_id} not found")

    record = user.model_dump(exclude={"password"})
    record["hashed_password"] = security.get_password_hash(user.password)
    new_user = db.users.create(record)
    logger.info(f"Registered user {new_user.id} ({new_user.username})")
    return new_user


def authenticate_user(db: DatabaseService, login: str, password: str) -> Optional[User]:
    """Returns the user when the credentials match an active account, otherwise None."""
    user = db.users.get_by_login(login)
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    return user


def login(db: DatabaseService, credentials: user_model.UserLogin) -> user_model.Token:
    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        raise UnauthorizedError("Incorrect username or password", code=ErrorCode.AUTH_INVALID_CREDENTIALS)
    access_token = security.create_access_token(subject=user.id, role=user.role)
    return user_model.Token(access_token=access_token, user=user_model.User.model_validate(user))
