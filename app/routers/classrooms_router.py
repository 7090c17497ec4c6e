# /school-backend/app/routers/classrooms_router.py

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import ensure_school_access, get_school_context, require_permission
from app.models import classroom_model
from app.models.common_model import ApiResponse, BulkIds
from app.services import classroom_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "classroom"


# --- COLLECTION ENDPOINTS (/api/v1/classrooms) ---

@router.get("", response_model=ApiResponse[List[classroom_model.Classroom]], summary="List Classrooms")
def list_classrooms(
    request: Request,
    query: classroom_model.ClassroomListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "read")),
):
    if school_context:
        query.school_id = school_context
    items, total = classroom_service.get_classroom_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Classrooms retrieved successfully", request)


@router.post("", response_model=ApiResponse[classroom_model.Classroom], status_code=status.HTTP_201_CREATED, summary="Create a Classroom")
def create_classroom(request: Request, classroom_in: classroom_model.ClassroomCreate,
                     db: DatabaseService = Depends(get_db_service),
                     school_context: Optional[uuid.UUID] = Depends(get_school_context),
                     _=Depends(require_permission(RESOURCE, "create"))):
    ensure_school_access(school_context, classroom_in.school_id)
    classroom = classroom_service.create_classroom(db, classroom_in)
    return responses.success(classroom, "Classroom created successfully", 201, request)


@router.post("/bulk", response_model=ApiResponse[List[classroom_model.Classroom]], status_code=status.HTTP_201_CREATED, summary="Create Classrooms in Bulk")
def create_classrooms_bulk(request: Request, body: classroom_model.ClassroomBulkCreate,
                           db: DatabaseService = Depends(get_db_service),
                           school_context: Optional[uuid.UUID] = Depends(get_school_context),
                           _=Depends(require_permission(RESOURCE, "create"))):
    for item in body.classrooms:
        ensure_school_access(school_context, item.school_id)
    classrooms = classroom_service.create_classrooms_bulk(db, body)
    return responses.success(classrooms, f"{len(classrooms)} classrooms created successfully", 201, request)


@router.delete("/bulk", response_model=ApiResponse[dict], summary="Delete Classrooms in Bulk")
def delete_classrooms_bulk(request: Request, body: BulkIds, db: DatabaseService = Depends(get_db_service),
                           _=Depends(require_permission(RESOURCE, "delete"))):
    result = classroom_service.delete_classrooms_bulk(db, body.ids)
    return responses.success(result, f"{result['count']} classrooms deleted successfully", request=request)


@router.get("/statistics", response_model=ApiResponse[classroom_model.ClassroomStatistics], summary="Classroom Statistics")
def get_statistics(request: Request, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    stats = classroom_service.get_classroom_statistics(db)
    return responses.success(stats, "Classroom statistics retrieved successfully", request=request)


@router.get("/school/{school_id}", response_model=ApiResponse[List[classroom_model.Classroom]], summary="List a School's Classrooms")
def get_by_school(request: Request, school_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  school_context: Optional[uuid.UUID] = Depends(get_school_context),
                  _=Depends(require_permission(RESOURCE, "read"))):
    ensure_school_access(school_context, school_id)
    classrooms = classroom_service.get_classrooms_by_school(db, school_id)
    return responses.success(classrooms, "Classrooms retrieved successfully", request=request)


@router.get("/block/{block_id}", response_model=ApiResponse[List[classroom_model.Classroom]], summary="List a Block's Classrooms")
def get_by_block(request: Request, block_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                 school_context: Optional[uuid.UUID] = Depends(get_school_context),
                 _=Depends(require_permission(RESOURCE, "read"))):
    classrooms = classroom_service.get_classrooms_by_block(db, block_id)
    if school_context:
        classrooms = [c for c in classrooms if c["school_id"] == str(school_context)]
    return responses.success(classrooms, "Classrooms retrieved successfully", request=request)


# --- INDIVIDUAL CLASSROOM ENDPOINTS (/api/v1/classrooms/{classroom_id}) ---

@router.get("/{classroom_id}", response_model=ApiResponse[classroom_model.Classroom], summary="Get a Classroom")
def get_classroom(request: Request, classroom_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  school_context: Optional[uuid.UUID] = Depends(get_school_context),
                  _=Depends(require_permission(RESOURCE, "read"))):
    classroom = classroom_service.get_classroom_by_id(db, classroom_id)
    ensure_school_access(school_context, classroom["school_id"])
    return responses.success(classroom, "Classroom retrieved successfully", request=request)


@router.put("/{classroom_id}", response_model=ApiResponse[classroom_model.Classroom], summary="Update a Classroom")
def update_classroom(request: Request, classroom_id: uuid.UUID, classroom_in: classroom_model.ClassroomUpdate,
                     db: DatabaseService = Depends(get_db_service),
                     school_context: Optional[uuid.UUID] = Depends(get_school_context),
                     _=Depends(require_permission(RESOURCE, "update"))):
    ensure_school_access(school_context, classroom_service.get_classroom_by_id(db, classroom_id)["school_id"])
    ensure_school_access(school_context, classroom_in.school_id)
    classroom = classroom_service.update_classroom(db, classroom_id, classroom_in)
    return responses.success(classroom, "Classroom updated successfully", request=request)


@router.delete("/{classroom_id}", response_model=ApiResponse[None], summary="Delete a Classroom")
def delete_classroom(request: Request, classroom_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                     school_context: Optional[uuid.UUID] = Depends(get_school_context),
                     _=Depends(require_permission(RESOURCE, "delete"))):
    ensure_school_access(school_context, classroom_service.get_classroom_by_id(db, classroom_id)["school_id"])
    classroom_service.delete_classroom(db, classroom_id)
    return responses.success(None, "Classroom deleted successfully", request=request)
