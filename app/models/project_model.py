# /school-backend/app/models/project_model.py

# --- Core Imports ---
import uuid
from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


class ProjectStatus(str, Enum):
    draft = "draft"
    assigned = "assigned"
    in_progress = "in_progress"
    completed = "completed"
    archived = "archived"


class ProjectDifficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"
    advanced = "advanced"


# --- Model Definitions ---

class ProjectBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    instructions: Optional[str] = Field(default=None, max_length=10000)
    due_date: Optional[date] = None
    assigned_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.draft
    difficulty: ProjectDifficulty = ProjectDifficulty.medium
    max_points: Optional[int] = Field(default=None, ge=0, le=1000)
    is_group_project: bool = False
    subject_id: Optional[uuid.UUID] = None
    class_id: Optional[uuid.UUID] = None
    teacher_id: uuid.UUID
    school_id: uuid.UUID


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    """All fields optional; only the ones that are sent are changed."""
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    instructions: Optional[str] = Field(default=None, max_length=10000)
    due_date: Optional[date] = None
    assigned_date: Optional[date] = None
    status: Optional[ProjectStatus] = None
    difficulty: Optional[ProjectDifficulty] = None
    max_points: Optional[int] = Field(default=None, ge=0, le=1000)
    is_group_project: Optional[bool] = None
    subject_id: Optional[uuid.UUID] = None
    class_id: Optional[uuid.UUID] = None
    teacher_id: Optional[uuid.UUID] = None

    @field_validator("title", "status", "difficulty", "is_group_project", "teacher_id")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class Project(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_by_id: Optional[uuid.UUID] = None
    modified_by_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class ProjectBulkCreate(BaseModel):
    projects: List[ProjectCreate] = Field(..., min_length=1, max_length=100)


class ProjectBulkDelete(BaseModel):
    """Selects the projects to delete. At least one criterion is required."""
    ids: Optional[List[uuid.UUID]] = None
    class_id: Optional[uuid.UUID] = None
    subject_id: Optional[uuid.UUID] = None
    teacher_id: Optional[uuid.UUID] = None
    school_id: Optional[uuid.UUID] = None


class ProjectListQuery(ListQuery):
    sort_by: Literal["title", "due_date", "created_at", "updated_at", "status"] = Field(default="created_at", alias="sortBy")
    status: Optional[ProjectStatus] = None
    difficulty: Optional[ProjectDifficulty] = None
    class_id: Optional[uuid.UUID] = None
    subject_id: Optional[uuid.UUID] = None
    teacher_id: Optional[uuid.UUID] = None
    school_id: Optional[uuid.UUID] = None
    is_group_project: Optional[bool] = None
    due_date_from: Optional[date] = None
    due_date_to: Optional[date] = None
