# /school-backend/app/routers/project_feedback_router.py

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import require_permission
from app.db.models.school_user_models import User
from app.models import project_feedback_model
from app.models.common_model import ApiResponse
from app.services import project_feedback_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "projectFeedback"


@router.get("/list", response_model=ApiResponse[List[project_feedback_model.ProjectFeedback]], summary="Search Feedback")
def get_feedback_list(
    request: Request,
    query: project_feedback_model.ProjectFeedbackListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    _=Depends(require_permission(RESOURCE, "read")),
):
    items, total = project_feedback_service.get_feedback_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Feedback retrieved successfully", request)


@router.get("/single/{feedback_id}", response_model=ApiResponse[project_feedback_model.ProjectFeedback], summary="Get a Feedback Entry")
def get_feedback(request: Request, feedback_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                 _=Depends(require_permission(RESOURCE, "read"))):
    feedback = project_feedback_service.get_feedback_by_id(db, feedback_id)
    return responses.success(feedback, "Feedback retrieved successfully", request=request)


@router.get("/replies/{parent_id}", response_model=ApiResponse[List[project_feedback_model.ProjectFeedback]], summary="List Replies")
def get_replies(request: Request, parent_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                _=Depends(require_permission(RESOURCE, "read"))):
    replies = project_feedback_service.get_feedback_replies(db, parent_id)
    return responses.success(replies, "Replies retrieved successfully", request=request)


@router.get("/author/{author_id}", response_model=ApiResponse[List[project_feedback_model.ProjectFeedback]], summary="List an Author's Feedback")
def get_by_author(request: Request, author_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  _=Depends(require_permission(RESOURCE, "read"))):
    feedback = project_feedback_service.get_feedback_by_author_id(db, author_id)
    return responses.success(feedback, "Feedback retrieved successfully", request=request)


@router.delete("/project/{project_id}", response_model=ApiResponse[dict], summary="Delete All Feedback of a Project")
def bulk_delete_feedback(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                         _=Depends(require_permission(RESOURCE, "delete"))):
    result = project_feedback_service.bulk_delete_feedback(db, project_id)
    return responses.success(result, f"Deleted {result['count']} feedback entries", request=request)


@router.post("", response_model=ApiResponse[project_feedback_model.ProjectFeedback], status_code=status.HTTP_201_CREATED, summary="Leave Feedback")
def create_feedback(request: Request, feedback_in: project_feedback_model.ProjectFeedbackCreate,
                    db: DatabaseService = Depends(get_db_service),
                    current_user: User = Depends(require_permission(RESOURCE, "create"))):
    feedback = project_feedback_service.create_feedback(db, feedback_in, author_id=current_user.id)
    return responses.success(feedback, "Feedback created successfully", 201, request)


@router.get("/{project_id}", response_model=ApiResponse[List[project_feedback_model.ProjectFeedbackThread]], summary="Get a Project's Feedback Threads")
def get_by_project(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    threads = project_feedback_service.get_feedback_by_project_id(db, project_id)
    return responses.success(threads, "Feedback retrieved successfully", request=request)


@router.put("/{feedback_id}", response_model=ApiResponse[project_feedback_model.ProjectFeedback], summary="Update Feedback")
def update_feedback(request: Request, feedback_id: uuid.UUID, feedback_in: project_feedback_model.ProjectFeedbackUpdate,
                    db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    feedback = project_feedback_service.update_feedback(db, feedback_id, feedback_in)
    return responses.success(feedback, "Feedback updated successfully", request=request)


@router.delete("/{feedback_id}", response_model=ApiResponse[None], summary="Delete Feedback")
def delete_feedback(request: Request, feedback_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                    _=Depends(require_permission(RESOURCE, "delete"))):
    project_feedback_service.delete_feedback(db, feedback_id)
    return responses.success(None, "Feedback deleted successfully", request=request)
