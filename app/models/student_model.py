# /school-backend/app/models/student_model.py

# --- Core Imports ---
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


# --- Model Definitions ---

class StudentBase(BaseModel):
    """
    The base model for a Student. Contains fields common to create and read operations.
    """
    school_id: uuid.UUID
    grade_level: Optional[str] = Field(default=None, max_length=50, description="e.g. 'Grade 7' or 'Form 2'.")
    class_id: Optional[uuid.UUID] = None
    enrollment_date: date
    guardian_info: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Guardians of the student. Each entry needs 'relationship', 'name' and 'contact'."
    )
    health_info: Optional[Dict[str, Any]] = None
    previous_school: Optional[Dict[str, Any]] = None
    enrollment_notes: Optional[str] = None
    active_status: bool = True


class StudentCreate(StudentBase):
    """
    The model used for enrolling a student. When `student_number` is omitted the
    server generates one.
    """
    user_id: uuid.UUID
    student_number: Optional[str] = Field(default=None, min_length=1, max_length=50)


class StudentUpdate(BaseModel):
    """
    The model for updating a student. All fields are optional to allow for
    partial updates.
    """
    school_id: Optional[uuid.UUID] = None
    grade_level: Optional[str] = Field(default=None, max_length=50)
    class_id: Optional[uuid.UUID] = None
    enrollment_date: Optional[date] = None
    student_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    guardian_info: Optional[List[Dict[str, Any]]] = None
    health_info: Optional[Dict[str, Any]] = None
    previous_school: Optional[Dict[str, Any]] = None
    enrollment_notes: Optional[str] = None
    active_status: Optional[bool] = None

    @field_validator("school_id", "enrollment_date", "student_number", "active_status")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class Student(StudentBase):
    """
    The full representation of a Student resource, as it is stored in the
    database and returned by the API.
    """
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    student_number: str
    created_at: datetime
    updated_at: datetime


class StudentListQuery(ListQuery):
    sort_by: Literal["created_at", "enrollment_date", "student_number"] = Field(default="created_at", alias="sortBy")
    school_id: Optional[uuid.UUID] = None
    class_id: Optional[uuid.UUID] = None
    grade_level: Optional[str] = None
    active_status: Optional[bool] = None


class StudentStatistics(BaseModel):
    total_students: int
    active_students: int
    inactive_students: int
    students_per_school: Dict[str, int]
    students_per_grade_level: Dict[str, int]
