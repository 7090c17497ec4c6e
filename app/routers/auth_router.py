# /school-backend/app/routers/auth_router.py

"""
This module defines the public-facing API for all authentication-related actions.

It includes endpoints for:
- User registration (`/register`)
- Login with a JSON body (`/login`) or an OAuth2 password form (`/token`)
- Retrieving the current user's profile (`/me`)

Business errors raised by `user_service` are `AppError`s and are turned into
error envelopes by the global handlers, so the routes carry no try/except.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm

# --- Application-specific Imports ---
from app.core import responses
from app.core.deps import get_current_active_user
from app.db.models.school_user_models import User as UserModel
from app.models.common_model import ApiResponse
from app.models.user_model import Token, User, UserCreate, UserLogin
from app.services import user_service
from app.services.database_service import DatabaseService, get_db_service

# --- Router Initialization ---
router = APIRouter()


@router.post("/register", response_model=ApiResponse[User], status_code=status.HTTP_201_CREATED, summary="Register a New Account")
def register_user(request: Request, user_in: UserCreate, db: DatabaseService = Depends(get_db_service)):
    new_user = user_service.create_user(db=db, user=user_in)
    return responses.success(
        User.model_validate(new_user).model_dump(mode="json"),
        "User registered successfully", 201, request,
    )


@router.post("/login", response_model=ApiResponse[Token], summary="Log In and Receive an Access Token")
def login(request: Request, credentials: UserLogin, db: DatabaseService = Depends(get_db_service)):
    token = user_service.login(db, credentials)
    return responses.success(token.model_dump(mode="json"), "Login successful", request=request)


@router.post("/token", response_model=Token, summary="OAuth2 Password Flow Token")
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: DatabaseService = Depends(get_db_service),
):
    """
    OAuth2-compatible login for API documentation clients. Returns the bare
    token instead of the envelope, as the OAuth2 password flow expects.
    """
    return user_service.login(db, UserLogin(username=form_data.username, password=form_data.password))


@router.get("/me", response_model=ApiResponse[User], summary="Get the Current User")
def read_current_user(request: Request, current_user: UserModel = Depends(get_current_active_user)):
    return responses.success(
        User.model_validate(current_user).model_dump(mode="json"),
        "Current user retrieved successfully", request=request,
    )
