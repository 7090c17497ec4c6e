# /school-backend/app/routers/project_files_router.py

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from app.core import responses
from app.core.deps import require_permission
from app.db.models.school_user_models import User
from app.models import project_file_model
from app.models.common_model import ApiResponse
from app.services import project_file_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "projectFile"


@router.get("", response_model=ApiResponse[List[project_file_model.ProjectFile]], summary="List a Project's Files")
def list_files(
    request: Request,
    query: project_file_model.ProjectFileListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    _=Depends(require_permission(RESOURCE, "read")),
):
    items, total = project_file_service.get_file_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Files retrieved successfully", request)


@router.post("", response_model=ApiResponse[project_file_model.ProjectFile], status_code=status.HTTP_201_CREATED, summary="Register a Stored File")
def create_file(request: Request, file_in: project_file_model.ProjectFileCreate,
                db: DatabaseService = Depends(get_db_service),
                current_user: User = Depends(require_permission(RESOURCE, "create"))):
    project_file = project_file_service.create_file(db, file_in, uploaded_by_id=current_user.id)
    return responses.success(project_file, "File created successfully", 201, request)


@router.post("/upload", response_model=ApiResponse[project_file_model.ProjectFile], status_code=status.HTTP_201_CREATED, summary="Upload a File to a Project")
def upload_file(
    request: Request,
    project_id: uuid.UUID = Form(...),
    description: Optional[str] = Form(None),
    file: UploadFile = File(...),
    db: DatabaseService = Depends(get_db_service),
    current_user: User = Depends(require_permission(RESOURCE, "create")),
):
    project_file = project_file_service.upload_file(db, project_id, file, current_user.id, description)
    return responses.success(project_file, "File uploaded successfully", 201, request)


@router.get("/project/{project_id}", response_model=ApiResponse[List[project_file_model.ProjectFile]], summary="Get All Files of a Project")
def get_by_project(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    files = project_file_service.get_files_by_project_id(db, project_id)
    return responses.success(files, "Files retrieved successfully", request=request)


@router.delete("/project/{project_id}", response_model=ApiResponse[dict], summary="Delete All Files of a Project")
def bulk_delete_files(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                      _=Depends(require_permission(RESOURCE, "delete"))):
    result = project_file_service.bulk_delete_files(db, project_id)
    return responses.success(result, f"Deleted {result['count']} files", request=request)


@router.get("/{file_id}/download", response_model=ApiResponse[project_file_model.ProjectFileDownload], summary="Download a File")
def download_file(request: Request, file_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(project_file_service.download_file(db, file_id), "File download ready", request=request)


@router.get("/{file_id}", response_model=ApiResponse[project_file_model.ProjectFile], summary="Get a File")
def get_file(request: Request, file_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
             _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(project_file_service.get_file_by_id(db, file_id), "File retrieved successfully", request=request)


@router.put("/{file_id}", response_model=ApiResponse[project_file_model.ProjectFile], summary="Update a File")
def update_file(request: Request, file_id: uuid.UUID, file_in: project_file_model.ProjectFileUpdate,
                db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    return responses.success(project_file_service.update_file(db, file_id, file_in), "File updated successfully", request=request)


@router.delete("/{file_id}", response_model=ApiResponse[None], summary="Delete a File")
def delete_file(request: Request, file_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                _=Depends(require_permission(RESOURCE, "delete"))):
    project_file_service.delete_file(db, file_id)
    return responses.success(None, "File deleted successfully", request=request)
