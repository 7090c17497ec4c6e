# /school-backend/app/routers/departments_router.py

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import ensure_school_access, get_school_context, require_permission
from app.models import department_model
from app.models.common_model import ApiResponse
from app.services import department_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "department"


# --- COLLECTION ENDPOINTS (/api/v1/departments) ---

@router.get("", response_model=ApiResponse[List[department_model.Department]], summary="List Departments")
def list_departments(
    request: Request,
    query: department_model.DepartmentListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "read")),
):
    if school_context:
        query.school_id = school_context
    items, total = department_service.get_department_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Departments retrieved successfully", request)


@router.post("", response_model=ApiResponse[department_model.Department], status_code=status.HTTP_201_CREATED, summary="Create a Department")
def create_department(request: Request, department_in: department_model.DepartmentCreate,
                      db: DatabaseService = Depends(get_db_service),
                      school_context: Optional[uuid.UUID] = Depends(get_school_context),
                      _=Depends(require_permission(RESOURCE, "create"))):
    ensure_school_access(school_context, department_in.school_id)
    department = department_service.create_department(db, department_in)
    return responses.success(department, "Department created successfully", 201, request)


@router.get("/statistics", response_model=ApiResponse[department_model.DepartmentStatistics], summary="Department Statistics")
def get_statistics(request: Request, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    stats = department_service.get_department_statistics(db)
    return responses.success(stats, "Department statistics retrieved successfully", request=request)


@router.get("/code/{code}", response_model=ApiResponse[department_model.Department], summary="Get a Department by Code")
def get_by_code(request: Request, code: str, db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "read"))):
    department = department_service.get_department_by_code(db, code)
    ensure_school_access(school_context, department["school_id"])
    return responses.success(department, "Department retrieved successfully", request=request)


@router.get("/school/{school_id}", response_model=ApiResponse[List[department_model.Department]], summary="List a School's Departments")
def get_by_school(request: Request, school_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  school_context: Optional[uuid.UUID] = Depends(get_school_context),
                  _=Depends(require_permission(RESOURCE, "read"))):
    ensure_school_access(school_context, school_id)
    departments = department_service.get_departments_by_school(db, school_id)
    return responses.success(departments, "Departments retrieved successfully", request=request)


@router.get("/school/{school_id}/default", response_model=ApiResponse[Optional[department_model.Department]], summary="Get a School's Default Department")
def get_default(request: Request, school_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "read"))):
    ensure_school_access(school_context, school_id)
    department = department_service.get_default_department(db, school_id)
    message = "Default department retrieved successfully" if department else "No default department set"
    return responses.success(department, message, request=request)


@router.get("/head/{head_id}", response_model=ApiResponse[List[department_model.Department]], summary="List Departments Headed by a User")
def get_by_head(request: Request, head_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "read"))):
    departments = department_service.get_departments_by_head(db, head_id)
    if school_context:
        departments = [d for d in departments if d["school_id"] == str(school_context)]
    return responses.success(departments, "Departments retrieved successfully", request=request)


# --- INDIVIDUAL DEPARTMENT ENDPOINTS (/api/v1/departments/{department_id}) ---

@router.get("/{department_id}", response_model=ApiResponse[department_model.Department], summary="Get a Department")
def get_department(request: Request, department_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   school_context: Optional[uuid.UUID] = Depends(get_school_context),
                   _=Depends(require_permission(RESOURCE, "read"))):
    department = department_service.get_department_by_id(db, department_id)
    ensure_school_access(school_context, department["school_id"])
    return responses.success(department, "Department retrieved successfully", request=request)


@router.put("/{department_id}", response_model=ApiResponse[department_model.Department], summary="Update a Department")
def update_department(request: Request, department_id: uuid.UUID, department_in: department_model.DepartmentUpdate,
                      db: DatabaseService = Depends(get_db_service),
                      school_context: Optional[uuid.UUID] = Depends(get_school_context),
                      _=Depends(require_permission(RESOURCE, "update"))):
    ensure_school_access(school_context, department_service.get_department_by_id(db, department_id)["school_id"])
    department = department_service.update_department(db, department_id, department_in)
    return responses.success(department, "Department updated successfully", request=request)


@router.put("/{department_id}/default", response_model=ApiResponse[department_model.Department], summary="Make a Department the School Default")
def set_default(request: Request, department_id: uuid.UUID, body: department_model.SetDefaultDepartment,
                db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "update"))):
    ensure_school_access(school_context, body.school_id)
    department = department_service.set_default_department(db, department_id, body.school_id)
    return responses.success(department, "Default department set successfully", request=request)


@router.delete("/{department_id}", response_model=ApiResponse[None], summary="Delete a Department")
def delete_department(request: Request, department_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                      school_context: Optional[uuid.UUID] = Depends(get_school_context),
                      _=Depends(require_permission(RESOURCE, "delete"))):
    ensure_school_access(school_context, department_service.get_department_by_id(db, department_id)["school_id"])
    department_service.delete_department(db, department_id)
    return responses.success(None, "Department deleted successfully", request=request)
