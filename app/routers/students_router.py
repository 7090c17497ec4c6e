# /school-backend/app/routers/students_router.py

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import ensure_school_access, get_school_context, require_permission
from app.models import student_model
from app.models.common_model import ApiResponse
from app.services import student_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "student"


# --- COLLECTION ENDPOINTS (/api/v1/students) ---

@router.get("", response_model=ApiResponse[List[student_model.Student]], summary="List Students")
def list_students(
    request: Request,
    query: student_model.StudentListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "read")),
):
    if school_context:
        query.school_id = school_context
    items, total = student_service.list_students(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Students retrieved successfully", request)


@router.post("", response_model=ApiResponse[student_model.Student], status_code=status.HTTP_201_CREATED, summary="Enroll a Student")
def create_student(
    request: Request,
    student_in: student_model.StudentCreate,
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "create")),
):
    ensure_school_access(school_context, student_in.school_id)
    student = student_service.create_student(db, student_in)
    return responses.success(student, "Student created successfully", 201, request)


@router.get("/statistics", response_model=ApiResponse[student_model.StudentStatistics], summary="Student Statistics")
def get_statistics(request: Request, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(student_service.get_student_statistics(db), "Student statistics retrieved successfully", request=request)


@router.get("/user/{user_id}", response_model=ApiResponse[student_model.Student], summary="Get a Student by User")
def get_by_user(request: Request, user_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "read"))):
    student = student_service.get_student_by_user_id(db, user_id)
    ensure_school_access(school_context, student["school_id"])
    return responses.success(student, "Student retrieved successfully", request=request)


@router.get("/number/{student_number}", response_model=ApiResponse[student_model.Student], summary="Get a Student by Number")
def get_by_number(request: Request, student_number: str, db: DatabaseService = Depends(get_db_service),
                  school_context: Optional[uuid.UUID] = Depends(get_school_context),
                  _=Depends(require_permission(RESOURCE, "read"))):
    student = student_service.get_student_by_number(db, student_number)
    ensure_school_access(school_context, student["school_id"])
    return responses.success(student, "Student retrieved successfully", request=request)


@router.get("/school/{school_id}", response_model=ApiResponse[List[student_model.Student]], summary="List a School's Students")
def get_by_school(request: Request, school_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  school_context: Optional[uuid.UUID] = Depends(get_school_context),
                  _=Depends(require_permission(RESOURCE, "read"))):
    ensure_school_access(school_context, school_id)
    return responses.success(student_service.get_students_by_school(db, school_id), "Students retrieved successfully", request=request)


@router.get("/class/{class_id}", response_model=ApiResponse[List[student_model.Student]], summary="List a Class's Students")
def get_by_class(request: Request, class_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                 school_context: Optional[uuid.UUID] = Depends(get_school_context),
                 _=Depends(require_permission(RESOURCE, "read"))):
    students = student_service.get_students_by_class(db, class_id)
    if school_context:
        students = [s for s in students if s["school_id"] == str(school_context)]
    return responses.success(students, "Students retrieved successfully", request=request)


# --- INDIVIDUAL STUDENT ENDPOINTS (/api/v1/students/{student_id}) ---

@router.get("/{student_id}", response_model=ApiResponse[student_model.Student], summary="Get a Student")
def get_student(request: Request, student_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                school_context: Optional[uuid.UUID] = Depends(get_school_context),
                _=Depends(require_permission(RESOURCE, "read"))):
    student = student_service.get_student_by_id(db, student_id)
    ensure_school_access(school_context, student["school_id"])
    return responses.success(student, "Student retrieved successfully", request=request)


@router.put("/{student_id}", response_model=ApiResponse[student_model.Student], summary="Update a Student")
def update_student(request: Request, student_id: uuid.UUID, student_in: student_model.StudentUpdate,
                   db: DatabaseService = Depends(get_db_service),
                   school_context: Optional[uuid.UUID] = Depends(get_school_context),
                   _=Depends(require_permission(RESOURCE, "update"))):
    ensure_school_access(school_context, student_service.get_student_by_id(db, student_id)["school_id"])
    ensure_school_access(school_context, student_in.school_id)
    student = student_service.update_student(db, student_id, student_in)
    return responses.success(student, "Student updated successfully", request=request)


@router.delete("/{student_id}", response_model=ApiResponse[None], summary="Delete a Student")
def delete_student(request: Request, student_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                   school_context: Optional[uuid.UUID] = Depends(get_school_context),
                   _=Depends(require_permission(RESOURCE, "delete"))):
    ensure_school_access(school_context, student_service.get_student_by_id(db, student_id)["school_id"])
    student_service.delete_student(db, student_id)
    return responses.success(None, "Student deleted successfully", request=request)
