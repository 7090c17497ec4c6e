# /school-backend/app/services/student_service.py

"""
Business logic for student records.

A student is an existing user enrolled at a school. Enrollment generates a
student number of the form `SS-GX-YY-NNN` unless one is supplied:
  - SS:  first two letters of the school short name (or name)
  - GX:  `G` for "Grade" levels and `F` for "Form" levels, plus the level number
  - YY:  the current year
  - NNN: the running count of students in that school and grade level
"""

import random
import re
from datetime import date
from typing import Dict, List, Optional, Tuple

from app.core.cache import CACHE_TTL
from app.core.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.school_user_models import School
from app.db.models.student_models import Student
from app.models import student_model
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "student:"
STATISTICS_KEY = f"{CACHE_PREFIX}statistics"
GUARDIAN_FIELDS = ("relationship", "name", "contact")


def _school_key(school_id) -> Optional[str]:
    return f"{CACHE_PREFIX}school:{school_id}" if school_id else None


def _class_key(class_id) -> Optional[str]:
    return f"{CACHE_PREFIX}class:{class_id}" if class_id else None


def _number_key(student_number) -> Optional[str]:
    return f"{CACHE_PREFIX}number:{student_number}" if student_number else None


def _get_student_or_404(db: DatabaseService, student_id) -> Student:
    student = db.students.get_by_id(student_id)
    if not student:
        raise NotFoundError(f"Student with ID {student_id} not found")
    return student


# --- READS ---

def get_student_by_id(db: DatabaseService, student_id) -> Dict:
    def load():
        return serialize(student_model.Student, _get_student_or_404(db, student_id))
    return read_through(f"{CACHE_PREFIX}{student_id}", load)


def get_student_by_user_id(db: DatabaseService, user_id) -> Dict:
    def load():
        student = db.students.get_by_user_id(user_id)
        if not student:
            raise NotFoundError(f"Student with user ID {user_id} not found")
        return serialize(student_model.Student, student)
    return read_through(f"{CACHE_PREFIX}user:{user_id}", load)


def get_student_by_number(db: DatabaseService, student_number: str) -> Dict:
    def load():
        student = db.students.get_by_student_number(student_number)
        if not student:
            raise NotFoundError(f"Student with number {student_number} not found")
        return serialize(student_model.Student, student)
    return read_through(_number_key(student_number), load)


def get_students_by_school(db: DatabaseService, school_id) -> List[Dict]:
    def load():
        if not db.schools.get_by_id(school_id):
            raise NotFoundError(f"School with ID {school_id} not found")
        return serialize_many(student_model.Student, db.students.get_by_school(school_id))
    return read_through(_school_key(school_id), load)


def get_students_by_class(db: DatabaseService, class_id) -> List[Dict]:
    return read_through(
        _class_key(class_id),
        lambda: serialize_many(student_model.Student, db.students.get_by_class(class_id)),
    )


def list_students(db: DatabaseService, query: student_model.StudentListQuery) -> Tuple[List[Dict], int]:
    items, total = db.students.list(query)
    return serialize_many(student_model.Student, items), total


# --- VALIDATION & NUMBERING ---

def validate_student_data(data: Dict) -> None:
    enrollment_date = data.get("enrollment_date")
    if enrollment_date and enrollment_date > date.today():
        raise BadRequestError("Enrollment date cannot be in the future", code=ErrorCode.VAL_INVALID_FORMAT)

    for guardian in data.get("guardian_info") or []:
        if not all(guardian.get(field) for field in GUARDIAN_FIELDS):
            raise BadRequestError(
                "Each guardian must have relationship, name, and contact information",
                code=ErrorCode.VAL_INVALID_FORMAT,
            )


def generate_student_number(db: DatabaseService, school: School, grade_level: Optional[str]) -> str:
    school_code = (school.short_name or school.name)[:2].upper()

    level = grade_level or ""
    level_prefix = "F" if level.startswith("Form") else "G"
    level_digits = re.search(r"\d+", level)
    grade_code = f"{level_prefix}{level_digits.group(0) if level_digits else ''}"

    year_code = str(date.today().year)[-2:]
    sequence = db.students.count_by_school_and_grade(school.id, grade_level) + 1

    student_number = f"{school_code}-{grade_code}-{year_code}-{sequence:03d}"
    while db.students.get_by_student_number(student_number):
        student_number = f"{student_number}-{random.randint(0, 9)}"
    return student_number


def _ensure_number_free(db: DatabaseService, student_number: str, exclude_id=None) -> None:
    existing = db.students.get_by_student_number(student_number)
    if existing and existing.id != exclude_id:
        raise ConflictError(
            f"Student number {student_number} is already taken",
            code=ErrorCode.RES_ALREADY_EXISTS,
        )


# --- WRITES ---

def create_student(db: DatabaseService, data: student_model.StudentCreate) -> Dict:
    record = to_record(data)
    validate_student_data(record)

    with service_errors("create student", user_id=data.user_id):
        with db.transaction():
            if not db.users.get_by_id(data.user_id):
                raise NotFoundError(f"User with ID {data.user_id} not found")
            school = db.schools.get_by_id(data.school_id)
            if not school:
                raise NotFoundError(f"School with ID {data.school_id} not found")
            if db.students.get_by_user_id(data.user_id):
                raise ConflictError(
                    "User is already registered as a student",
                    code=ErrorCode.RES_ALREADY_EXISTS,
                    additional_info={"userId": str(data.user_id)},
                )

            if record.get("student_number"):
                _ensure_number_free(db, record["student_number"])
            else:
                record["student_number"] = generate_student_number(db, school, data.grade_level)

            student = db.students.create(record, commit=False)
            result = serialize(student_model.Student, student)

    invalidate(_school_key(data.school_id), _class_key(data.class_id), STATISTICS_KEY)
    logger.info(f"Enrolled student {result['id']} as {result['student_number']}")
    return result


def update_student(db: DatabaseService, student_id, data: student_model.StudentUpdate) -> Dict:
    student = _get_student_or_404(db, student_id)
    changes = to_record(data, exclude_unset=True)
    validate_student_data(changes)

    if changes.get("student_number") and changes["student_number"] != student.student_number:
        _ensure_number_free(db, changes["student_number"], exclude_id=student.id)
    if changes.get("school_id") and not db.schools.get_by_id(changes["school_id"]):
        raise NotFoundError(f"School with ID {changes['school_id']} not found")

    old_number, old_school, old_class = student.student_number, student.school_id, student.class_id
    with service_errors("update student", student_id=student_id):
        updated = db.students.update(student, changes)
        result = serialize(student_model.Student, updated)

    invalidate(
        f"{CACHE_PREFIX}{student_id}",
        f"{CACHE_PREFIX}user:{updated.user_id}",
        _number_key(old_number), _number_key(updated.student_number),
        _school_key(old_school), _school_key(updated.school_id),
        _class_key(old_class), _class_key(updated.class_id),
        STATISTICS_KEY,
    )
    return result


def delete_student(db: DatabaseService, student_id) -> bool:
    student = _get_student_or_404(db, student_id)
    keys = (
        f"{CACHE_PREFIX}{student_id}",
        f"{CACHE_PREFIX}user:{student.user_id}",
        _number_key(student.student_number),
        _school_key(student.school_id),
        _class_key(student.class_id),
        STATISTICS_KEY,
    )
    with service_errors("delete student", student_id=student_id):
        db.students.delete(student)

    invalidate(*keys)
    logger.info(f"Deleted student {student_id}")
    return True


# --- STATISTICS ---

def get_student_statistics(db: DatabaseService) -> Dict:
    def load():
        df = db.students.get_students_as_dataframe()
        if df.empty:
            return student_model.StudentStatistics(
                total_students=0, active_students=0, inactive_students=0,
                students_per_school={}, students_per_grade_level={},
            ).model_dump()

        active = int(df["active_status"].astype(bool).sum())
        per_school = df.groupby(df["school_id"].astype(str)).size()
        per_grade = df.groupby(df["grade_level"].fillna("Unassigned")).size()
        return student_model.StudentStatistics(
            total_students=len(df),
            active_students=active,
            inactive_students=len(df) - active,
            students_per_school={k: int(v) for k, v in per_school.items()},
            students_per_grade_level={k: int(v) for k, v in per_grade.items()},
        ).model_dump()
    return read_through(STATISTICS_KEY, load, CACHE_TTL["statistics"])
