# /school-backend/app/models/user_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, Enum):
    """Coarse-grained account roles used for school scoping."""
    super_admin = "super_admin"
    admin = "admin"
    manager = "manager"
    teacher = "teacher"
    student = "student"
    user = "user"


# --- User Models ---

class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    school_id: Optional[uuid.UUID] = None


class UserCreate(UserBase):
    """The payload for self-registration. New accounts always start with the `user` role."""
    password: str = Field(..., min_length=8, max_length=128)


class UserLogin(BaseModel):
    username: str = Field(..., description="The username or the email address of the account.")
    password: str


class User(UserBase):
    """The public representation of a user account. Never exposes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: UserRole = UserRole.user
    is_active: bool = True
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
