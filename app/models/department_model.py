# /school-backend/app/models/department_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common_model import ListQuery, reject_null


# --- Model Definitions ---

class DepartmentBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=150)
    description: Optional[str] = Field(default=None, max_length=2000)
    head_of_department_id: Optional[uuid.UUID] = None
    contact_email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=30)
    faculty_count: Optional[int] = None
    student_count: Optional[int] = None
    location: Optional[str] = Field(default=None, max_length=255)
    budget: Optional[float] = None
    is_default: bool = False


class DepartmentCreate(DepartmentBase):
    school_id: uuid.UUID
    code: Optional[str] = Field(
        default=None, min_length=2, max_length=20,
        description="Unique department code. Generated as SS-DDD-NNN when omitted."
    )


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=150)
    code: Optional[str] = Field(default=None, min_length=2, max_length=20)
    description: Optional[str] = Field(default=None, max_length=2000)
    head_of_department_id: Optional[uuid.UUID] = None
    contact_email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=30)
    faculty_count: Optional[int] = None
    student_count: Optional[int] = None
    location: Optional[str] = Field(default=None, max_length=255)
    budget: Optional[float] = None

    @field_validator("name")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class Department(DepartmentBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: Optional[str] = None
    school_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class SetDefaultDepartment(BaseModel):
    school_id: uuid.UUID


class DepartmentListQuery(ListQuery):
    sort_by: Literal["name", "code", "budget", "created_at"] = Field(default="created_at", alias="sortBy")
    school_id: Optional[uuid.UUID] = None
    head_of_department_id: Optional[uuid.UUID] = None
    is_default: Optional[bool] = None


class DepartmentStatistics(BaseModel):
    total_departments: int
    departments_per_school: Dict[str, int]
    total_faculty: int
    total_students: int
    total_budget: float
    average_budget: float
