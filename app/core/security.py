# /school-backend/app/core/security.py

"""
Cryptographic helpers: password hashing and JWT access tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from app.core import config
from app.core.errors import ErrorCode, UnauthorizedError

ACCESS_TOKEN_TYPE = "access"


def get_password_hash(password: str) -> str:
    return generate_password_hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return check_password_hash(hashed_password, plain_password)


def create_access_token(subject: Any, role: Optional[str] = None, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a signed JWT whose `sub` claim is the user id."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(subject), "exp": expire, "type": ACCESS_TOKEN_TYPE}
    if role:
        to_encode["role"] = role
    return jwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodes and verifies an access token.

    Raises:
        UnauthorizedError: if the token is expired, malformed, or not an access token.
    """
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Authentication token has expired", code=ErrorCode.AUTH_EXPIRED_TOKEN)
    except JWTError:
        raise UnauthorizedError("Invalid authentication token", code=ErrorCode.AUTH_INVALID_TOKEN)

    if payload.get("type") != ACCESS_TOKEN_TYPE or not payload.get("sub"):
        raise UnauthorizedError("Invalid token type", code=ErrorCode.AUTH_INVALID_TOKEN)
    return payload
