# /school-backend/app/models/classroom_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


class RoomType(str, Enum):
    standard = "standard"
    laboratory = "laboratory"
    computer_lab = "computer_lab"
    library = "library"
    auditorium = "auditorium"
    gymnasium = "gymnasium"
    art_studio = "art_studio"
    music_room = "music_room"
    staff_room = "staff_room"
    other = "other"


class ClassroomStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    maintenance = "maintenance"
    renovation = "renovation"
    closed = "closed"


# --- Model Definitions ---

class ClassroomBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    room_type: RoomType = RoomType.standard
    max_students: int = Field(..., ge=1)
    details: Optional[str] = Field(default=None, max_length=2000)
    floor: Optional[int] = Field(default=None, ge=-5, le=200)
    features: Optional[List[str]] = None
    status: ClassroomStatus = ClassroomStatus.active


class ClassroomCreate(ClassroomBase):
    block_id: uuid.UUID
    school_id: uuid.UUID


class ClassroomUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    room_type: Optional[RoomType] = None
    max_students: Optional[int] = Field(default=None, ge=1)
    block_id: Optional[uuid.UUID] = None
    school_id: Optional[uuid.UUID] = None
    details: Optional[str] = Field(default=None, max_length=2000)
    floor: Optional[int] = Field(default=None, ge=-5, le=200)
    features: Optional[List[str]] = None
    status: Optional[ClassroomStatus] = None

    @field_validator("name", "room_type", "max_students", "block_id", "school_id", "status")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class Classroom(ClassroomBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    block_id: uuid.UUID
    school_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class ClassroomBulkCreate(BaseModel):
    classrooms: List[ClassroomCreate] = Field(..., min_length=1, max_length=100)


class ClassroomListQuery(ListQuery):
    sort_by: Literal["name", "max_students", "floor", "created_at"] = Field(default="created_at", alias="sortBy")
    school_id: Optional[uuid.UUID] = None
    block_id: Optional[uuid.UUID] = None
    room_type: Optional[RoomType] = None
    status: Optional[ClassroomStatus] = None
    floor: Optional[int] = None
    min_capacity: Optional[int] = Field(default=None, ge=0)
    max_capacity: Optional[int] = Field(default=None, ge=0)


class ClassroomStatistics(BaseModel):
    total_classrooms: int
    total_capacity: int
    average_capacity: float
    classrooms_by_type: Dict[str, int]
    classrooms_by_status: Dict[str, int]
    classrooms_per_school: Dict[str, int]
