# /school-backend/app/models/project_file_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


# --- Model Definitions ---

class ProjectFileBase(BaseModel):
    filename: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    thumbnail_url: Optional[str] = Field(default=None, max_length=500)


class ProjectFileCreate(ProjectFileBase):
    """Registers a file that is already stored somewhere reachable by `file_path`/`file_url`."""
    project_id: uuid.UUID
    file_size: int = Field(..., ge=0)
    file_type: str = Field(..., min_length=1, max_length=100)
    file_path: str = Field(..., min_length=1, max_length=500)
    file_url: Optional[str] = Field(default=None, max_length=500)
    uploaded_by_id: Optional[uuid.UUID] = None


class ProjectFileUpdate(BaseModel):
    filename: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    thumbnail_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("filename")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class ProjectFile(ProjectFileBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    file_size: int
    file_type: str
    file_path: str
    file_url: Optional[str] = None
    uploaded_by_id: uuid.UUID
    download_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProjectFileDownload(BaseModel):
    file: ProjectFile
    url: str


class ProjectFileListQuery(ListQuery):
    sort_by: Literal["filename", "created_at", "file_size", "download_count"] = Field(default="created_at", alias="sortBy")
    project_id: uuid.UUID
    file_type: Optional[str] = None
