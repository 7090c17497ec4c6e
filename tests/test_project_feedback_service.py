# /tests/test_project_feedback_service.py

import uuid

import pytest

from app.core.errors import BadRequestError, NotFoundError
from app.models.project_feedback_model import ProjectFeedbackCreate, ProjectFeedbackListQuery, ProjectFeedbackUpdate
from app.services import project_feedback_service


def _post(db, project, author, content="Nice work", parent_id=None):
    data = ProjectFeedbackCreate(project_id=project.id, content=content, parent_id=parent_id)
    return project_feedback_service.create_feedback(db, data, author_id=author.id)


def test_threads_include_active_replies(db, project, teacher):
    top = _post(db, project, teacher, "Top level")
    _post(db, project, teacher, "A reply", parent_id=uuid.UUID(top["id"]))

    threads = project_feedback_service.get_feedback_by_project_id(db, project.id)

    assert len(threads) == 1
    assert threads[0]["content"] == "Top level"
    assert [r["content"] for r in threads[0]["replies"]] == ["A reply"]


def test_reply_to_feedback_of_another_project_is_rejected(db, project, teacher, school):
    other_project = db.projects.create({"title": "Bridge Design", "teacher_id": teacher.id, "school_id": school.id})
    top = _post(db, other_project, teacher)
    with pytest.raises(BadRequestError):
        _post(db, project, teacher, parent_id=uuid.UUID(top["id"]))


def test_reply_to_unknown_parent_is_not_found(db, project, teacher):
    with pytest.raises(NotFoundError):
        _post(db, project, teacher, parent_id=uuid.uuid4())


def test_delete_is_soft_and_clears_thread_cache(db, fake_redis, project, teacher):
    entry = _post(db, project, teacher)
    entry_id = uuid.UUID(entry["id"])
    project_feedback_service.get_feedback_by_project_id(db, project.id)
    assert f"project-feedback:project:{project.id}" in fake_redis.store

    project_feedback_service.delete_feedback(db, entry_id)

    assert f"project-feedback:project:{project.id}" not in fake_redis.store
    assert db.project_feedback.get_by_id(entry_id).status == "deleted"
    assert project_feedback_service.get_feedback_by_project_id(db, project.id) == []


def test_update_changes_content(db, project, teacher):
    entry = _post(db, project, teacher)
    updated = project_feedback_service.update_feedback(
        db, uuid.UUID(entry["id"]), ProjectFeedbackUpdate(content="Edited", type="praise")
    )
    assert updated["content"] == "Edited"
    assert updated["type"] == "praise"


def test_list_filters_by_status(db, project, teacher):
    _post(db, project, teacher, "kept")
    gone = _post(db, project, teacher, "gone")
    project_feedback_service.delete_feedback(db, uuid.UUID(gone["id"]))

    items, total = project_feedback_service.get_feedback_list(db, ProjectFeedbackListQuery(project_id=project.id))
    assert total == 1
    assert items[0]["content"] == "kept"


def test_bulk_delete_counts_only_live_entries(db, project, teacher):
    _post(db, project, teacher, "one")
    _post(db, project, teacher, "two")
    assert project_feedback_service.bulk_delete_feedback(db, project.id) == {"count": 2}
    assert project_feedback_service.bulk_delete_feedback(db, project.id) == {"count": 0}
