# /school-backend/app/models/block_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import ListQuery, reject_null


class BlockStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    maintenance = "maintenance"
    planned = "planned"
    demolished = "demolished"


# --- Model Definitions ---

class BlockBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    number_of_classrooms: int = Field(..., ge=1)
    details: Optional[str] = Field(default=None, max_length=2000)
    location: Optional[str] = Field(default=None, max_length=255)
    year_built: Optional[int] = Field(default=None, ge=1800)
    status: BlockStatus = BlockStatus.active


class BlockCreate(BlockBase):
    school_id: uuid.UUID


class BlockUpdate(BaseModel):
    school_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    number_of_classrooms: Optional[int] = Field(default=None, ge=1)
    details: Optional[str] = Field(default=None, max_length=2000)
    location: Optional[str] = Field(default=None, max_length=255)
    year_built: Optional[int] = Field(default=None, ge=1800)
    status: Optional[BlockStatus] = None

    @field_validator("school_id", "name", "number_of_classrooms", "status")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class Block(BlockBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    school_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class BlockBulkCreate(BaseModel):
    blocks: List[BlockCreate] = Field(..., min_length=1, max_length=100)


class BlockListQuery(ListQuery):
    sort_by: Literal["name", "year_built", "number_of_classrooms", "created_at"] = Field(default="created_at", alias="sortBy")
    school_id: Optional[uuid.UUID] = None
    status: Optional[BlockStatus] = None
    year_built_min: Optional[int] = None
    year_built_max: Optional[int] = None
    min_classrooms: Optional[int] = Field(default=None, ge=0)
    max_classrooms: Optional[int] = Field(default=None, ge=0)


class BlockStatistics(BaseModel):
    total_blocks: int
    total_classrooms: int
    average_classrooms_per_block: float
    blocks_per_school: Dict[str, int]
    blocks_by_status: Dict[str, int]
