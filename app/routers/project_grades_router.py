# /school-backend/app/routers/project_grades_router.py

"""
Project grade endpoints. The fixed-prefix routes (`/list`, `/single`,
`/student`, `/project`) are registered before the bare `/{project_id}` route
so they are matched first.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import require_permission
from app.db.models.school_user_models import User
from app.models import project_grade_model
from app.models.common_model import ApiResponse, BulkDeleteResult
from app.services import project_grade_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "projectGrade"


@router.get("/list", response_model=ApiResponse[List[project_grade_model.ProjectGrade]], summary="Search Grades")
def get_grade_list(
    request: Request,
    query: project_grade_model.ProjectGradeListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    _=Depends(require_permission(RESOURCE, "read")),
):
    items, total = project_grade_service.get_grade_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Grades retrieved successfully", request)


@router.get("/single/{grade_id}", response_model=ApiResponse[project_grade_model.ProjectGrade], summary="Get a Grade")
def get_grade(request: Request, grade_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
              _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(project_grade_service.get_grade_by_id(db, grade_id), "Grade retrieved successfully", request=request)


@router.get("/student/{student_id}", response_model=ApiResponse[List[project_grade_model.ProjectGrade]], summary="List a Student's Grades")
def get_grades_by_student(request: Request, student_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                          _=Depends(require_permission(RESOURCE, "read"))):
    grades = project_grade_service.get_grades_by_student_id(db, student_id)
    return responses.success(grades, "Grades retrieved successfully", request=request)


@router.get(
    "/project/{project_id}/student/{student_id}",
    response_model=ApiResponse[project_grade_model.ProjectGrade],
    summary="Get a Student's Grade on a Project",
)
def get_grade_by_project_and_student(request: Request, project_id: uuid.UUID, student_id: uuid.UUID,
                                     db: DatabaseService = Depends(get_db_service),
                                     _=Depends(require_permission(RESOURCE, "read"))):
    grade = project_grade_service.get_grade_by_project_and_student(db, project_id, student_id)
    return responses.success(grade, "Grade retrieved successfully", request=request)


@router.delete("/project/{project_id}", response_model=ApiResponse[BulkDeleteResult], summary="Delete All Grades of a Project")
def bulk_delete_grades(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                       _=Depends(require_permission(RESOURCE, "delete"))):
    result = project_grade_service.bulk_delete_grades(db, project_id)
    return responses.success(result, result["message"], request=request)


@router.post("", response_model=ApiResponse[project_grade_model.ProjectGrade], status_code=status.HTTP_201_CREATED, summary="Grade a Student")
def create_grade(request: Request, grade_in: project_grade_model.ProjectGradeCreate,
                 db: DatabaseService = Depends(get_db_service),
                 current_user: User = Depends(require_permission(RESOURCE, "create"))):
    grade = project_grade_service.create_grade(db, grade_in, grader_id=current_user.id)
    return responses.success(grade, "Grade created successfully", 201, request)


@router.get("/{project_id}", response_model=ApiResponse[List[project_grade_model.ProjectGrade]], summary="List a Project's Grades")
def get_grades_by_project(request: Request, project_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                          _=Depends(require_permission(RESOURCE, "read"))):
    grades = project_grade_service.get_grades_by_project_id(db, project_id)
    return responses.success(grades, "Grades retrieved successfully", request=request)


@router.put("/{grade_id}", response_model=ApiResponse[project_grade_model.ProjectGrade], summary="Update a Grade")
def update_grade(request: Request, grade_id: uuid.UUID, grade_in: project_grade_model.ProjectGradeUpdate,
                 db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    grade = project_grade_service.update_grade(db, grade_id, grade_in)
    return responses.success(grade, "Grade updated successfully", request=request)


@router.delete("/{grade_id}", response_model=ApiResponse[None], summary="Delete a Grade")
def delete_grade(request: Request, grade_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                 _=Depends(require_permission(RESOURCE, "delete"))):
    project_grade_service.delete_grade(db, grade_id)
    return responses.success(None, "Grade deleted successfully", request=request)
