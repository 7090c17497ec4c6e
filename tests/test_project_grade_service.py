# /tests/test_project_grade_service.py

import uuid

import pytest
from pydantic import ValidationError

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.models.project_grade_model import ProjectGradeCreate, ProjectGradeListQuery, ProjectGradeUpdate
from app.services import project_grade_service


def _grade(db, project, student, grader, score=80.0, max_score=100.0):
    data = ProjectGradeCreate(project_id=project.id, student_id=student.id, score=score, max_score=max_score)
    return project_grade_service.create_grade(db, data, grader_id=grader.id)


def test_create_grade_defaults_grader_to_current_user(db, project, student, teacher):
    grade = _grade(db, project, student, teacher)
    assert grade["grader_id"] == str(teacher.id)
    assert grade["status"] == "graded"
    assert grade["max_score"] == 100.0


def test_duplicate_grade_is_a_conflict(db, project, student, teacher):
    _grade(db, project, student, teacher)
    with pytest.raises(ConflictError):
        _grade(db, project, student, teacher, score=90)


def test_score_above_maximum_is_rejected(db, project, student, teacher):
    with pytest.raises(BadRequestError) as exc_info:
        _grade(db, project, student, teacher, score=120, max_score=100)
    assert exc_info.value.message == "Score cannot exceed maximum score"


def test_lowering_max_score_below_current_score_is_rejected(db, project, student, teacher):
    grade = _grade(db, project, student, teacher, score=80)
    with pytest.raises(BadRequestError) as exc_info:
        project_grade_service.update_grade(db, uuid.UUID(grade["id"]), ProjectGradeUpdate(max_score=50))
    assert exc_info.value.message == "Current score exceeds the new maximum score"


def test_null_max_score_is_rejected_on_update():
    with pytest.raises(ValidationError) as exc_info:
        ProjectGradeUpdate(score=6, max_score=None)
    assert [e["loc"] for e in exc_info.value.errors()] == [("max_score",)]


def test_score_update_checks_against_stored_max_score(db, project, student, teacher):
    grade = _grade(db, project, student, teacher, score=5, max_score=10)
    updated = project_grade_service.update_grade(db, uuid.UUID(grade["id"]), ProjectGradeUpdate(score=6))
    assert updated["score"] == 6
    with pytest.raises(BadRequestError) as exc_info:
        project_grade_service.update_grade(db, uuid.UUID(grade["id"]), ProjectGradeUpdate(score=12))
    assert exc_info.value.additional_info == {"score": 12, "maxScore": 10}


def test_create_grade_for_unknown_project(db, student, teacher):
    data = ProjectGradeCreate(project_id=uuid.uuid4(), student_id=student.id, score=10)
    with pytest.raises(NotFoundError):
        project_grade_service.create_grade(db, data, grader_id=teacher.id)


def test_update_clears_every_derived_key(db, fake_redis, project, student, teacher):
    grade = _grade(db, project, student, teacher)
    project_grade_service.get_grade_by_id(db, uuid.UUID(grade["id"]))
    project_grade_service.get_grades_by_project_id(db, project.id)
    project_grade_service.get_grades_by_student_id(db, student.id)
    project_grade_service.get_grade_by_project_and_student(db, project.id, student.id)
    assert len(fake_redis.store) == 4

    updated = project_grade_service.update_grade(db, uuid.UUID(grade["id"]), ProjectGradeUpdate(score=95))

    assert updated["score"] == 95
    assert fake_redis.store == {}
    assert project_grade_service.get_grades_by_project_id(db, project.id)[0]["score"] == 95


def test_missing_grade_leaves_cache_untouched(db, fake_redis, project):
    project_grade_service.get_grades_by_project_id(db, project.id)
    before = dict(fake_redis.store)
    with pytest.raises(NotFoundError):
        project_grade_service.delete_grade(db, uuid.uuid4())
    assert fake_redis.store == before


def test_grade_list_requires_a_filter(db):
    with pytest.raises(BadRequestError):
        project_grade_service.get_grade_list(db, ProjectGradeListQuery())


def test_grade_list_rejects_inverted_score_range(db, project):
    query = ProjectGradeListQuery(project_id=project.id, min_score=50, max_score=10)
    with pytest.raises(BadRequestError):
        project_grade_service.get_grade_list(db, query)


def test_grade_list_filters_by_score(db, project, student, teacher, user_factory, school):
    _grade(db, project, student, teacher, score=40)
    other_user = user_factory("second", role="student", school=school)
    other = db.students.create({
        "user_id": other_user.id, "school_id": school.id,
        "enrollment_date": student.enrollment_date, "student_number": "GF-G7-24-002",
    })
    _grade(db, project, other, teacher, score=90)

    items, total = project_grade_service.get_grade_list(
        db, ProjectGradeListQuery(project_id=project.id, min_score=50)
    )
    assert total == 1
    assert items[0]["score"] == 90


def test_bulk_delete_reports_count(db, project, student, teacher):
    _grade(db, project, student, teacher)
    result = project_grade_service.bulk_delete_grades(db, project.id)
    assert result == {"success": True, "count": 1, "message": "Deleted 1 grades"}

    again = project_grade_service.bulk_delete_grades(db, project.id)
    assert again["count"] == 0
    assert again["message"] == "No grades deleted"
