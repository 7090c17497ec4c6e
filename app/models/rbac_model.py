# /school-backend/app/models/rbac_model.py

# --- Core Imports ---
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common_model import reject_null


class PermissionAction(str, Enum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    manage = "manage"


# --- Permission Models ---

class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=128)
    description: Optional[str] = Field(default=None, max_length=255)
    resource: str = Field(..., min_length=1, max_length=64, description="Resource name, e.g. 'projectGrade', or '*' for all.")
    action: PermissionAction


class Permission(PermissionCreate):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime


class PermissionIds(BaseModel):
    permission_ids: List[uuid.UUID] = Field(..., min_length=1)


# --- Role Models ---

class RoleCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=128)
    description: Optional[str] = Field(default=None, max_length=255)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=128)
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)


class Role(RoleCreate):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class RoleWithPermissions(Role):
    permissions: List[Permission] = []


class UserRoleAssign(BaseModel):
    role_id: uuid.UUID
