# /school-backend/app/routers/schools_router.py

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import require_permission
from app.models import school_model
from app.models.common_model import ApiResponse
from app.services import school_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=ApiResponse[List[school_model.School]], summary="List Schools")
def list_schools(
    request: Request,
    query: school_model.SchoolListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    _=Depends(require_permission("school", "read")),
):
    items, total = school_service.list_schools(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Schools retrieved successfully", request)


@router.post("", response_model=ApiResponse[school_model.School], status_code=status.HTTP_201_CREATED, summary="Create a School")
def create_school(
    request: Request,
    school_in: school_model.SchoolCreate,
    db: DatabaseService = Depends(get_db_service),
    _=Depends(require_permission("school", "create")),
):
    school = school_service.create_school(db, school_in)
    return responses.success(school, "School created successfully", 201, request)


@router.get("/{school_id}", response_model=ApiResponse[school_model.School], summary="Get a School")
def get_school(
    request: Request,
    school_id: uuid.UUID,
    db: DatabaseService = Depends(get_db_service),
    _=Depends(require_permission("school", "read")),
):
    return responses.success(school_service.get_school_by_id(db, school_id), "School retrieved successfully", request=request)
