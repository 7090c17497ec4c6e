# /school-backend/app/models/school_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .common_model import ListQuery


class SchoolBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=150)
    short_name: Optional[str] = Field(default=None, max_length=10)
    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    email: Optional[EmailStr] = None
    established_year: Optional[int] = Field(default=None, ge=1800)


class SchoolCreate(SchoolBase):
    pass


class School(SchoolBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class SchoolListQuery(ListQuery):
    sort_by: Literal["name", "created_at"] = Field(default="name", alias="sortBy")
