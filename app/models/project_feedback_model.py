# /school-backend/app/models/project_feedback_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


class FeedbackType(str, Enum):
    comment = "comment"
    suggestion = "suggestion"
    correction = "correction"
    praise = "praise"
    question = "question"


class FeedbackStatus(str, Enum):
    active = "active"
    archived = "archived"
    deleted = "deleted"


# --- Model Definitions ---

class ProjectFeedbackCreate(BaseModel):
    project_id: uuid.UUID
    content: str = Field(..., min_length=1, max_length=5000)
    type: FeedbackType = FeedbackType.comment
    parent_id: Optional[uuid.UUID] = Field(default=None, description="Set to reply to an existing feedback entry.")
    is_private: bool = False
    author_id: Optional[uuid.UUID] = Field(default=None, description="Defaults to the authenticated user when omitted.")


class ProjectFeedbackUpdate(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    type: Optional[FeedbackType] = None
    status: Optional[FeedbackStatus] = None
    is_private: Optional[bool] = None

    @field_validator("content", "type", "status", "is_private")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ProjectFeedback(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    content: str
    type: FeedbackType
    author_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    status: FeedbackStatus
    is_private: bool
    created_at: datetime
    updated_at: datetime


class ProjectFeedbackThread(ProjectFeedback):
    """A top-level feedback entry together with its active replies."""
    replies: List[ProjectFeedback] = []


class ProjectFeedbackListQuery(ListQuery):
    limit: int = Field(default=20, ge=1, le=100)
    sort_by: Literal["created_at", "updated_at"] = Field(default="created_at", alias="sortBy")
    project_id: uuid.UUID
    author_id: Optional[uuid.UUID] = None
    parent_id: Optional[uuid.UUID] = None
    type: Optional[FeedbackType] = None
    status: FeedbackStatus = FeedbackStatus.active
