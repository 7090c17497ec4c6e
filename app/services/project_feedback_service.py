# /school-backend/app/services/project_feedback_service.py

"""
Business logic for threaded project feedback.

Top-level entries of a project are cached as one thread list under
`project-feedback:project:{id}` (each entry carrying its active replies), and
the replies of a single entry under `project-feedback:replies:{parent_id}`.
Feedback is never removed: deleting sets its status to "deleted".
"""

from typing import Dict, List, Tuple

from app.core.errors import BadRequestError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.project_models import ProjectFeedback
from app.models import project_feedback_model
from app.models.project_feedback_model import FeedbackStatus
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "project-feedback:"


def _project_key(project_id) -> str:
    return f"{CACHE_PREFIX}project:{project_id}"


def _replies_key(parent_id):
    return f"{CACHE_PREFIX}replies:{parent_id}" if parent_id else None


def feedback_cache_keys(feedback: ProjectFeedback) -> List[str]:
    return [
        f"{CACHE_PREFIX}{feedback.id}",
        _project_key(feedback.project_id),
        _replies_key(feedback.parent_id),
        _replies_key(feedback.id),
    ]


def _get_feedback_or_404(db: DatabaseService, feedback_id) -> ProjectFeedback:
    feedback = db.project_feedback.get_by_id(feedback_id)
    if not feedback:
        raise NotFoundError(f"Feedback with ID {feedback_id} not found")
    return feedback


# --- READS ---

def get_feedback_by_id(db: DatabaseService, feedback_id) -> Dict:
    def load():
        return serialize(project_feedback_model.ProjectFeedback, _get_feedback_or_404(db, feedback_id))
    return read_through(f"{CACHE_PREFIX}{feedback_id}", load)


def get_feedback_by_project_id(db: DatabaseService, project_id) -> List[Dict]:
    """Active top-level feedback of a project, newest first, each with its active replies."""
    def load():
        if not db.projects.get_by_id(project_id):
            raise NotFoundError(f"Project with ID {project_id} not found")
        threads = []
        for entry in db.project_feedback.get_top_level_by_project(project_id):
            thread = serialize(project_feedback_model.ProjectFeedback, entry)
            thread["replies"] = serialize_many(
                project_feedback_model.ProjectFeedback, db.project_feedback.get_replies(entry.id)
            )
            threads.append(thread)
        return threads
    return read_through(_project_key(project_id), load)


def get_feedback_by_author_id(db: DatabaseService, author_id) -> List[Dict]:
    return serialize_many(project_feedback_model.ProjectFeedback, db.project_feedback.get_by_author(author_id))


def get_feedback_replies(db: DatabaseService, parent_id) -> List[Dict]:
    def load():
        _get_feedback_or_404(db, parent_id)
        return serialize_many(project_feedback_model.ProjectFeedback, db.project_feedback.get_replies(parent_id))
    return read_through(_replies_key(parent_id), load)


def get_feedback_list(db: DatabaseService, query: project_feedback_model.ProjectFeedbackListQuery) -> Tuple[List[Dict], int]:
    items, total = db.project_feedback.list(query)
    return serialize_many(project_feedback_model.ProjectFeedback, items), total


# --- WRITES ---

def create_feedback(db: DatabaseService, data: project_feedback_model.ProjectFeedbackCreate, author_id=None) -> Dict:
    record = to_record(data)
    record["author_id"] = data.author_id or author_id
    if not record["author_id"]:
        raise BadRequestError("An author is required", code=ErrorCode.VAL_MISSING_REQUIRED_FIELD)

    if not db.projects.get_by_id(data.project_id):
        raise NotFoundError(f"Project with ID {data.project_id} not found")
    if not db.users.get_by_id(record["author_id"]):
        raise NotFoundError(f"Author with ID {record['author_id']} not found")
    if data.parent_id:
        parent = _get_feedback_or_404(db, data.parent_id)
        if parent.project_id != data.project_id:
            raise BadRequestError(
                "Parent feedback belongs to a different project",
                code=ErrorCode.VAL_INVALID_FORMAT,
                additional_info={"parentId": str(data.parent_id)},
            )

    with service_errors("create feedback", project_id=data.project_id):
        feedback = db.project_feedback.create(record)
        result = serialize(project_feedback_model.ProjectFeedback, feedback)

    invalidate(_project_key(data.project_id), _replies_key(data.parent_id))
    return result


def update_feedback(db: DatabaseService, feedback_id, data: project_feedback_model.ProjectFeedbackUpdate) -> Dict:
    feedback = _get_feedback_or_404(db, feedback_id)
    changes = to_record(data, exclude_unset=True)

    with service_errors("update feedback", feedback_id=feedback_id):
        updated = db.project_feedback.update(feedback, changes)
        result = serialize(project_feedback_model.ProjectFeedback, updated)

    invalidate(*feedback_cache_keys(updated))
    return result


def delete_feedback(db: DatabaseService, feedback_id) -> bool:
    """Soft delete: the row stays, its status becomes "deleted"."""
    feedback = _get_feedback_or_404(db, feedback_id)

    with service_errors("delete feedback", feedback_id=feedback_id):
        with db.transaction():
            db.project_feedback.update(feedback, {"status": FeedbackStatus.deleted.value}, commit=False)
        keys = feedback_cache_keys(feedback)

    invalidate(*keys)
    logger.info(f"Soft deleted feedback {feedback_id}")
    return True


def bulk_delete_feedback(db: DatabaseService, project_id) -> Dict:
    if not db.projects.get_by_id(project_id):
        raise NotFoundError(f"Project with ID {project_id} not found")

    with service_errors("bulk delete feedback", project_id=project_id):
        with db.transaction():
            entries = db.project_feedback.get_active_by_project(project_id)
            keys = [key for entry in entries for key in feedback_cache_keys(entry)]
            count = db.project_feedback.soft_delete_by_project(project_id)

    invalidate(_project_key(project_id), *keys)
    logger.info(f"Soft deleted {count} feedback entries of project {project_id}")
    return {"count": count}
