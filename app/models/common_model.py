# /school-backend/app/models/common_model.py

"""
Pydantic models shared by every feature: the response envelope, pagination
metadata and the base list-query parameters.
"""

import uuid
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from app.core import config

T = TypeVar("T")


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class PaginationMeta(BaseModel):
    page: int
    limit: int
    totalItems: int
    totalPages: int
    hasNextPage: bool
    hasPrevPage: bool


class ResponseMeta(BaseModel):
    timestamp: str
    requestId: Optional[str] = None
    pagination: Optional[PaginationMeta] = None


class ApiResponse(BaseModel, Generic[T]):
    """The success envelope every endpoint returns."""
    success: bool = True
    code: int = 200
    message: str
    data: Optional[T] = None
    meta: ResponseMeta


class ListQuery(BaseModel):
    """
    Base query parameters for every paginated list endpoint. Subclasses add
    their own filters and narrow `sort_by` to the columns they allow.
    """
    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE)
    sort_by: str = Field(default="created_at", alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.desc, alias="sortOrder")
    search: Optional[str] = Field(default=None, max_length=100)


class BulkIds(BaseModel):
    ids: List[uuid.UUID] = Field(..., min_length=1, max_length=100)


class BulkDeleteResult(BaseModel):
    success: bool = True
    count: int
    message: str


def reject_null(value):
    """Update fields backed by NOT NULL columns may be omitted but never sent as null."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value
