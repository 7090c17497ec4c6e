# /school-backend/app/routers/projects_router.py

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import ensure_school_access, get_school_context, require_permission
from app.db.models.school_user_models import User
from app.models import project_model
from app.models.common_model import ApiResponse
from app.services import project_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "project"


# --- COLLECTION ENDPOINTS (/api/v1/projects) ---

@router.get("", response_model=ApiResponse[List[project_model.Project]], summary="List Projects")
def list_projects(
    request: Request,
    query: project_model.ProjectListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "read")),
):
    if school_context:
        query.school_id = school_context
    items, total = project_service.get_project_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Projects retrieved successfully", request)


@router.post("", response_model=ApiResponse[project_model.Project], status_code=status.HTTP_201_CREATED, summary="Create a Project")
def create_project(
    request: Request,
    project_in: project_model.ProjectCreate,
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    current_user: User = Depends(require_permission(RESOURCE, "create")),
):
    ensure_school_access(school_context, project_in.school_id)
    project = project_service.create_project(db, project_in, user_id=current_user.id)
    return responses.success(project, "Project created successfully", 201, request)


@router.post("/bulk", response_model=ApiResponse[List[project_model.Project]], status_code=status.HTTP_201_CREATED, summary="Create Projects in Bulk")
def create_projects_bulk(
    request: Request,
    body: project_model.ProjectBulkCreate,
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    current_user: User = Depends(require_permission(RESOURCE, "create")),
):
    for item in body.projects:
        ensure_school_access(school_context, item.school_id)
    projects = project_service.create_projects_bulk(db, body, user_id=current_user.id)
    return responses.success(projects, f"{len(projects)} projects created successfully", 201, request)


@router.delete("/bulk", response_model=ApiResponse[dict], summary="Delete Projects in Bulk")
def delete_projects_bulk(
    request: Request,
    criteria: project_model.ProjectBulkDelete,
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "delete")),
):
    if school_context:
        ensure_school_access(school_context, criteria.school_id)
        criteria.school_id = school_context
    result = project_service.delete_projects_bulk(db, criteria)
    return responses.success(result, f"{result['count']} projects deleted successfully", request=request)


@router.get("/class/{class_id}", response_model=ApiResponse[List[project_model.Project]], summary="List a Class's Projects")
def get_by_class(request: Request, class_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                 _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(project_service.get_projects_by_class_id(db, class_id), "Projects retrieved successfully", request=request)


@router.get("/subject/{subject_id}", response_model=ApiResponse[List[project_model.Project]], summary="List a Subject's Projects")
def get_by_subject(request: Request, subject_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(project_service.get_projects_by_subject_id(db, subject_id), "Projects retrieved successfully", request=request)


@router.get("/teacher/{teacher_id}", response_model=ApiResponse[List[project_model.Project]], summary="List a Teacher's Projects")
def get_by_teacher(request: Request, teacher_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(project_service.get_projects_by_teacher_id(db, teacher_id), "Projects retrieved successfully", request=request)


# --- INDIVIDUAL PROJECT ENDPOINTS (/api/v1/projects/{project_id}) ---

@router.get("/{project_id}", response_model=ApiResponse[project_model.Project], summary="Get a Project")
def get_project(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "read"))):
    project = project_service.get_project_by_id(db, project_id)
    ensure_school_access(school_context, project["school_id"])
    return responses.success(project, "Project retrieved successfully", request=request)


@router.put("/{project_id}", response_model=ApiResponse[project_model.Project], summary="Update a Project")
def update_project(request: Request, project_id: uuid.UUID, project_in: project_model.ProjectUpdate,
                   db: DatabaseService = Depends(get_db_service),
                   school_context: Optional[uuid.UUID] = Depends(get_school_context),
                   current_user: User = Depends(require_permission(RESOURCE, "update"))):
    ensure_school_access(school_context, project_service.get_project_by_id(db, project_id)["school_id"])
    project = project_service.update_project(db, project_id, project_in, user_id=current_user.id)
    return responses.success(project, "Project updated successfully", request=request)


@router.delete("/{project_id}", response_model=ApiResponse[None], summary="Delete a Project")
def delete_project(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   school_context: Optional[uuid.UUID] = Depends(get_school_context),
                   _=Depends(require_permission(RESOURCE, "delete"))):
    ensure_school_access(school_context, project_service.get_project_by_id(db, project_id)["school_id"])
    project_service.delete_project(db, project_id)
    return responses.success(None, "Project deleted successfully", request=request)
