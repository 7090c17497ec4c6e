# /tests/test_student_service.py

import uuid
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.models.student_model import StudentCreate, StudentUpdate
from app.services import student_service

YEAR = str(date.today().year)[-2:]


def _enroll(db, user, school, **extra):
    data = StudentCreate(user_id=user.id, school_id=school.id, enrollment_date=date(2024, 9, 1), **extra)
    return student_service.create_student(db, data)


def test_generated_number_for_grade_level(db, school, user_factory):
    student = _enroll(db, user_factory("amy", "student", school), school, grade_level="Grade 7")
    assert student["student_number"] == f"GF-G7-{YEAR}-001"


def test_generated_number_counts_per_grade(db, school, user_factory):
    _enroll(db, user_factory("amy", "student", school), school, grade_level="Form 2")
    second = _enroll(db, user_factory("ben", "student", school), school, grade_level="Form 2")
    assert second["student_number"] == f"GF-F2-{YEAR}-002"


def test_school_name_is_used_without_short_name(db, other_school, user_factory):
    student = _enroll(db, user_factory("cal", "student", other_school), other_school, grade_level="Grade 10")
    assert student["student_number"].startswith("RI-G10-")


def test_taken_generated_number_gets_a_suffix(db, school, user_factory):
    _enroll(db, user_factory("amy", "student", school), school, student_number=f"GF-G7-{YEAR}-001")
    with patch("app.services.student_service.random.randint", return_value=4):
        student = _enroll(db, user_factory("ben", "student", school), school, grade_level="Grade 7")
    assert student["student_number"] == f"GF-G7-{YEAR}-001-4"


def test_explicit_number_must_be_free(db, school, user_factory):
    _enroll(db, user_factory("amy", "student", school), school, student_number="S-1")
    with pytest.raises(ConflictError) as exc_info:
        _enroll(db, user_factory("ben", "student", school), school, student_number="S-1")
    assert exc_info.value.message == "Student number S-1 is already taken"


def test_user_can_only_be_enrolled_once(db, school, user_factory):
    user = user_factory("amy", "student", school)
    _enroll(db, user, school)
    with pytest.raises(ConflictError):
        _enroll(db, user, school)


def test_unknown_user_is_not_found(db, school):
    data = StudentCreate(user_id=uuid.uuid4(), school_id=school.id, enrollment_date=date(2024, 9, 1))
    with pytest.raises(NotFoundError):
        student_service.create_student(db, data)


def test_future_enrollment_date_is_rejected(db, school, user_factory):
    data = StudentCreate(
        user_id=user_factory("amy", "student", school).id,
        school_id=school.id,
        enrollment_date=date.today() + timedelta(days=1),
    )
    with pytest.raises(BadRequestError) as exc_info:
        student_service.create_student(db, data)
    assert exc_info.value.message == "Enrollment date cannot be in the future"


def test_incomplete_guardian_is_rejected(db, school, user_factory):
    with pytest.raises(BadRequestError) as exc_info:
        _enroll(db, user_factory("amy", "student", school), school,
                guardian_info=[{"relationship": "mother", "name": "Ann"}])
    assert exc_info.value.message == "Each guardian must have relationship, name, and contact information"


def test_update_clears_number_and_school_keys(db, fake_redis, student):
    student_service.get_student_by_number(db, student.student_number)
    student_service.get_students_by_school(db, student.school_id)

    student_service.update_student(db, student.id, StudentUpdate(student_number="NEW-001"))

    assert fake_redis.store == {}
    assert student_service.get_student_by_number(db, "NEW-001")["id"] == str(student.id)
    with pytest.raises(NotFoundError):
        student_service.get_student_by_number(db, "GF-G7-24-001")


def test_delete_student(db, student):
    student_service.delete_student(db, student.id)
    with pytest.raises(NotFoundError):
        student_service.get_student_by_id(db, student.id)


def test_student_statistics(db, school, student, user_factory):
    _enroll(db, user_factory("amy", "student", school), school, active_status=False)
    stats = student_service.get_student_statistics(db)
    assert stats["total_students"] == 2
    assert stats["active_students"] == 1
    assert stats["inactive_students"] == 1
    assert stats["students_per_grade_level"] == {"Grade 7": 1, "Unassigned": 1}
