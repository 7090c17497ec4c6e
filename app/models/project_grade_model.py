# /school-backend/app/models/project_grade_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


class GradeStatus(str, Enum):
    pending = "pending"
    graded = "graded"
    revised = "revised"
    final = "final"


# --- Model Definitions ---

class ProjectGradeCreate(BaseModel):
    project_id: uuid.UUID
    student_id: uuid.UUID
    grader_id: Optional[uuid.UUID] = Field(
        default=None,
        description="Defaults to the authenticated user when omitted."
    )
    score: float = Field(..., ge=0)
    max_score: float = Field(default=100.0, ge=0)
    comments: Optional[str] = Field(default=None, max_length=5000)
    submission_date: Optional[datetime] = None
    status: GradeStatus = GradeStatus.graded


class ProjectGradeUpdate(BaseModel):
    score: Optional[float] = Field(default=None, ge=0)
    max_score: Optional[float] = Field(default=None, ge=0)
    comments: Optional[str] = Field(default=None, max_length=5000)
    submission_date: Optional[datetime] = None
    status: Optional[GradeStatus] = None

    @field_validator("score", "max_score", "status")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ProjectGrade(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    student_id: uuid.UUID
    grader_id: uuid.UUID
    score: float
    max_score: float
    comments: Optional[str] = None
    submission_date: Optional[datetime] = None
    graded_date: datetime
    status: GradeStatus
    created_at: datetime
    updated_at: datetime


class ProjectGradeListQuery(ListQuery):
    """
    Filters for the grade list. At least one of project, student or grader is
    required unless `include_all` is set.
    """
    limit: int = Field(default=20, ge=1, le=100)
    sort_by: Literal["score", "graded_date", "created_at", "updated_at"] = Field(default="graded_date", alias="sortBy")
    project_id: Optional[uuid.UUID] = None
    student_id: Optional[uuid.UUID] = None
    grader_id: Optional[uuid.UUID] = None
    status: Optional[GradeStatus] = None
    min_score: Optional[float] = Field(default=None, ge=0)
    max_score: Optional[float] = Field(default=None, ge=0)
    include_all: bool = False
