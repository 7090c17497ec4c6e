# /tests/test_project_service.py

import io
import os
import uuid
from datetime import date
from unittest.mock import patch

import pytest
from fastapi import UploadFile
from pydantic import ValidationError

from app.core import config
from app.core.errors import BadRequestError, ConflictError, ErrorCode, FileError, NotFoundError
from app.models.project_feedback_model import ProjectFeedbackCreate
from app.models.project_grade_model import ProjectGradeCreate
from app.models.project_model import (
    ProjectBulkCreate,
    ProjectBulkDelete,
    ProjectCreate,
    ProjectListQuery,
    ProjectUpdate,
)
from app.services import project_feedback_service, project_file_service, project_grade_service, project_service


def _payload(school, teacher, title, **extra):
    return ProjectCreate(title=title, teacher_id=teacher.id, school_id=school.id, **extra)


# --- Projects ---

def test_create_project_records_creator(db, school, teacher):
    project = project_service.create_project(db, _payload(school, teacher, "Solar System"), user_id=teacher.id)
    assert project["created_by_id"] == str(teacher.id)
    assert project["status"] == "draft"


def test_duplicate_title_for_same_teacher_conflicts(db, school, teacher):
    project_service.create_project(db, _payload(school, teacher, "Solar System"))
    with pytest.raises(ConflictError):
        project_service.create_project(db, _payload(school, teacher, "Solar System"))


def test_bulk_create_is_all_or_nothing(db, school, teacher):
    project_service.create_project(db, _payload(school, teacher, "Existing"))
    batch = ProjectBulkCreate(projects=[
        _payload(school, teacher, "Fresh One"),
        _payload(school, teacher, "Existing"),
    ])
    with pytest.raises(ConflictError):
        project_service.create_projects_bulk(db, batch)
    assert db.projects.find_by_title("Fresh One", teacher.id) is None


def test_bulk_create_rejects_duplicates_within_request(db, school, teacher):
    batch = ProjectBulkCreate(projects=[
        _payload(school, teacher, "Twin"),
        _payload(school, teacher, "Twin"),
    ])
    with pytest.raises(ConflictError):
        project_service.create_projects_bulk(db, batch)


def test_bulk_create_inserts_every_project(db, school, teacher):
    batch = ProjectBulkCreate(projects=[_payload(school, teacher, f"Project {n}") for n in range(3)])
    created = project_service.create_projects_bulk(db, batch, user_id=teacher.id)
    assert len(created) == 3
    assert {p["created_by_id"] for p in created} == {str(teacher.id)}


def test_update_clears_old_and_new_class_keys(db, fake_redis, school, teacher):
    old_class, new_class = uuid.uuid4(), uuid.uuid4()
    project = project_service.create_project(db, _payload(school, teacher, "Moving", class_id=old_class))
    project_service.get_projects_by_class_id(db, old_class)
    project_service.get_projects_by_class_id(db, new_class)

    project_service.update_project(db, uuid.UUID(project["id"]), ProjectUpdate(class_id=new_class), user_id=teacher.id)

    assert f"project:class:{old_class}" not in fake_redis.store
    assert f"project:class:{new_class}" not in fake_redis.store
    assert [p["title"] for p in project_service.get_projects_by_class_id(db, new_class)] == ["Moving"]


def test_list_rejects_inverted_due_dates(db):
    query = ProjectListQuery(due_date_from=date(2025, 6, 1), due_date_to=date(2025, 1, 1))
    with pytest.raises(BadRequestError):
        project_service.get_project_list(db, query)


def test_bulk_delete_requires_criteria(db):
    with pytest.raises(BadRequestError) as exc_info:
        project_service.delete_projects_bulk(db, ProjectBulkDelete())
    assert exc_info.value.code == ErrorCode.VAL_MISSING_REQUIRED_FIELD


def test_bulk_delete_by_teacher(db, school, teacher):
    for n in range(2):
        project_service.create_project(db, _payload(school, teacher, f"Old {n}"))
    assert project_service.delete_projects_bulk(db, ProjectBulkDelete(teacher_id=teacher.id)) == {"count": 2}


def test_update_rejects_null_title():
    with pytest.raises(ValidationError) as exc_info:
        ProjectUpdate(title=None)
    assert exc_info.value.errors()[0]["loc"] == ("title",)


def test_delete_project_cascades_and_clears_child_keys(db, fake_redis, project, student, teacher, tmp_path):
    grade = project_grade_service.create_grade(
        db, ProjectGradeCreate(project_id=project.id, student_id=student.id, score=7), grader_id=teacher.id
    )
    feedback = project_feedback_service.create_feedback(
        db, ProjectFeedbackCreate(project_id=project.id, content="Nice work"), author_id=teacher.id
    )
    with patch.object(config, "UPLOAD_DIR", str(tmp_path)):
        stored = project_file_service.upload_file(db, project.id, _upload(), teacher.id)

    project_grade_service.get_grade_by_id(db, uuid.UUID(grade["id"]))
    project_grade_service.get_grades_by_project_id(db, project.id)
    project_grade_service.get_grades_by_student_id(db, student.id)
    project_grade_service.get_grade_by_project_and_student(db, project.id, student.id)
    project_feedback_service.get_feedback_by_id(db, uuid.UUID(feedback["id"]))
    project_feedback_service.get_feedback_replies(db, uuid.UUID(feedback["id"]))
    project_file_service.get_file_by_id(db, uuid.UUID(stored["id"]))

    project_service.delete_project(db, project.id)

    assert fake_redis.store == {}
    assert project_grade_service.get_grades_by_student_id(db, student.id) == []
    assert not os.path.exists(stored["file_path"])
    with pytest.raises(NotFoundError):
        project_grade_service.get_grade_by_id(db, uuid.UUID(grade["id"]))
    with pytest.raises(NotFoundError):
        project_service.get_project_by_id(db, project.id)


def test_bulk_delete_clears_student_grade_keys(db, fake_redis, project, student, teacher):
    project_grade_service.create_grade(
        db, ProjectGradeCreate(project_id=project.id, student_id=student.id, score=7), grader_id=teacher.id
    )
    project_grade_service.get_grades_by_student_id(db, student.id)

    assert project_service.delete_projects_bulk(db, ProjectBulkDelete(ids=[project.id])) == {"count": 1}

    assert f"project-grade:student:{student.id}" not in fake_redis.store
    assert project_grade_service.get_grades_by_student_id(db, student.id) == []


# --- Files ---

def _upload(name="notes.txt", content=b"hello world"):
    return UploadFile(file=io.BytesIO(content), filename=name)


def test_upload_stores_file_and_counts_downloads(db, project, teacher, tmp_path):
    with patch.object(config, "UPLOAD_DIR", str(tmp_path)):
        stored = project_file_service.upload_file(db, project.id, _upload(), teacher.id, "Lab notes")

    assert stored["file_size"] == 11
    assert stored["uploaded_by_id"] == str(teacher.id)
    assert (tmp_path / str(project.id)).is_dir()

    download = project_file_service.download_file(db, uuid.UUID(stored["id"]))
    assert download["file"]["download_count"] == 1
    assert download["url"] == stored["file_url"]


def test_upload_over_size_limit_is_rejected(db, project, teacher, tmp_path):
    with patch.object(config, "UPLOAD_DIR", str(tmp_path)), patch.object(config, "MAX_UPLOAD_SIZE", 4):
        with pytest.raises(FileError) as exc_info:
            project_file_service.upload_file(db, project.id, _upload(), teacher.id)
    assert exc_info.value.code == ErrorCode.FILE_SIZE_EXCEEDED


def test_delete_file_removes_stored_content(db, project, teacher, tmp_path):
    with patch.object(config, "UPLOAD_DIR", str(tmp_path)):
        stored = project_file_service.upload_file(db, project.id, _upload(), teacher.id)
    path = stored["file_path"]

    project_file_service.delete_file(db, uuid.UUID(stored["id"]))

    assert not os.path.exists(path)
    assert project_file_service.get_files_by_project_id(db, project.id) == []
