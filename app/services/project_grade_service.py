# /school-backend/app/services/project_grade_service.py

"""
Business logic for project grades.

A grade is cached under `project-grade:{id}` and appears in three derived
keys: the grades of its project, the grades of its student and the single
project/student pair. Every mutation clears all of them together.
"""

from typing import Dict, List, Tuple

from app.core.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.project_models import ProjectGrade
from app.models import project_grade_model
from app.models.common_model import BulkDeleteResult
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "project-grade:"


def _project_key(project_id) -> str:
    return f"{CACHE_PREFIX}project:{project_id}"


def _student_key(student_id) -> str:
    return f"{CACHE_PREFIX}student:{student_id}"


def _pair_key(project_id, student_id) -> str:
    return f"{CACHE_PREFIX}project:{project_id}:student:{student_id}"


def grade_cache_keys(grade: ProjectGrade) -> List[str]:
    return [
        f"{CACHE_PREFIX}{grade.id}",
        _project_key(grade.project_id),
        _student_key(grade.student_id),
        _pair_key(grade.project_id, grade.student_id),
    ]


def _get_grade_or_404(db: DatabaseService, grade_id) -> ProjectGrade:
    grade = db.project_grades.get_by_id(grade_id)
    if not grade:
        raise NotFoundError(f"Grade with ID {grade_id} not found")
    return grade


def _validate_scores(score: float, max_score: float, message: str = "Score cannot exceed maximum score") -> None:
    if score < 0:
        raise BadRequestError("Score cannot be negative", code=ErrorCode.VAL_INVALID_FORMAT)
    if max_score < 0:
        raise BadRequestError("Maximum score cannot be negative", code=ErrorCode.VAL_INVALID_FORMAT)
    if score > max_score:
        raise BadRequestError(message, code=ErrorCode.VAL_INVALID_FORMAT,
                              additional_info={"score": score, "maxScore": max_score})


# --- READS ---

def get_grade_by_id(db: DatabaseService, grade_id) -> Dict:
    def load():
        return serialize(project_grade_model.ProjectGrade, _get_grade_or_404(db, grade_id))
    return read_through(f"{CACHE_PREFIX}{grade_id}", load)


def get_grades_by_project_id(db: DatabaseService, project_id) -> List[Dict]:
    def load():
        if not db.projects.get_by_id(project_id):
            raise NotFoundError(f"Project with ID {project_id} not found")
        return serialize_many(project_grade_model.ProjectGrade, db.project_grades.get_by_project(project_id))
    return read_through(_project_key(project_id), load)


def get_grades_by_student_id(db: DatabaseService, student_id) -> List[Dict]:
    def load():
        if not db.students.get_by_id(student_id):
            raise NotFoundError(f"Student with ID {student_id} not found")
        return serialize_many(project_grade_model.ProjectGrade, db.project_grades.get_by_student(student_id))
    return read_through(_student_key(student_id), load)


def get_grade_by_project_and_student(db: DatabaseService, project_id, student_id) -> Dict:
    def load():
        grade = db.project_grades.get_by_project_and_student(project_id, student_id)
        if not grade:
            raise NotFoundError(
                "No grade found for this project and student",
                additional_info={"projectId": str(project_id), "studentId": str(student_id)},
            )
        return serialize(project_grade_model.ProjectGrade, grade)
    return read_through(_pair_key(project_id, student_id), load)


def get_grade_list(db: DatabaseService, query: project_grade_model.ProjectGradeListQuery) -> Tuple[List[Dict], int]:
    if query.min_score is not None and query.max_score is not None and query.min_score > query.max_score:
        raise BadRequestError("Minimum score cannot be greater than maximum score", code=ErrorCode.VAL_INVALID_FORMAT)
    if not query.include_all and not (query.project_id or query.student_id or query.grader_id):
        raise BadRequestError(
            "At least one of project_id, student_id or grader_id is required",
            code=ErrorCode.VAL_MISSING_REQUIRED_FIELD,
        )
    items, total = db.project_grades.list(query)
    return serialize_many(project_grade_model.ProjectGrade, items), total


# --- WRITES ---

def create_grade(db: DatabaseService, data: project_grade_model.ProjectGradeCreate, grader_id=None) -> Dict:
    _validate_scores(data.score, data.max_score)

    record = to_record(data)
    record["grader_id"] = data.grader_id or grader_id
    if not record["grader_id"]:
        raise BadRequestError("A grader is required", code=ErrorCode.VAL_MISSING_REQUIRED_FIELD)

    if not db.projects.get_by_id(data.project_id):
        raise NotFoundError(f"Project with ID {data.project_id} not found")
    if not db.students.get_by_id(data.student_id):
        raise NotFoundError(f"Student with ID {data.student_id} not found")
    if not db.users.get_by_id(record["grader_id"]):
        raise NotFoundError(f"Grader with ID {record['grader_id']} not found")
    if db.project_grades.get_by_project_and_student(data.project_id, data.student_id):
        raise ConflictError(
            "A grade already exists for this student on this project",
            code=ErrorCode.RES_ALREADY_EXISTS,
            additional_info={"projectId": str(data.project_id), "studentId": str(data.student_id)},
        )

    with service_errors("create grade", project_id=data.project_id, student_id=data.student_id):
        grade = db.project_grades.create(record)
        result = serialize(project_grade_model.ProjectGrade, grade)

    invalidate(_project_key(data.project_id), _student_key(data.student_id), _pair_key(data.project_id, data.student_id))
    logger.info(f"Graded student {data.student_id} on project {data.project_id}: {data.score}/{data.max_score}")
    return result


def update_grade(db: DatabaseService, grade_id, data: project_grade_model.ProjectGradeUpdate) -> Dict:
    grade = _get_grade_or_404(db, grade_id)
    changes = to_record(data, exclude_unset=True)

    max_score = changes.get("max_score")
    if max_score is None:
        max_score = grade.max_score

    if changes.get("score") is not None:
        _validate_scores(changes["score"], max_score)
    elif changes.get("max_score") is not None:
        _validate_scores(grade.score, changes["max_score"], "Current score exceeds the new maximum score")

    with service_errors("update grade", grade_id=grade_id):
        updated = db.project_grades.update(grade, changes)
        result = serialize(project_grade_model.ProjectGrade, updated)

    invalidate(*grade_cache_keys(updated))
    return result


def delete_grade(db: DatabaseService, grade_id) -> bool:
    grade = _get_grade_or_404(db, grade_id)
    keys = grade_cache_keys(grade)

    with service_errors("delete grade", grade_id=grade_id):
        with db.transaction():
            db.project_grades.delete(grade, commit=False)

    invalidate(*keys)
    logger.info(f"Deleted grade {grade_id}")
    return True


def bulk_delete_grades(db: DatabaseService, project_id) -> Dict:
    """Deletes every grade of a project in one transaction."""
    if not db.projects.get_by_id(project_id):
        raise NotFoundError(f"Project with ID {project_id} not found")

    with service_errors("bulk delete grades", project_id=project_id):
        with db.transaction():
            grades = db.project_grades.get_by_project(project_id)
            keys = [key for grade in grades for key in grade_cache_keys(grade)]
            count = db.project_grades.delete_by_project(project_id)

    invalidate(_project_key(project_id), *keys)
    message = f"Deleted {count} grades" if count else "No grades deleted"
    logger.info(f"{message} for project {project_id}")
    return BulkDeleteResult(success=True, count=count, message=message).model_dump()
