# /school-backend/app/services/project_service.py

"""
Business logic for projects.

Projects are cached individually under `project:{id}` and in three derived
collections keyed by class, subject and teacher. Every mutation drops each
derived key that could still list the changed project, for both the old and
the new value of a re-assigned relation.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from app.core.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.project_models import Project
from app.models import project_model
from . import project_feedback_service, project_file_service, project_grade_service
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "project:"
RELATED_FIELDS = {"class_id": "class", "subject_id": "subject", "teacher_id": "teacher"}


def _related_keys(values: Iterable[Dict]) -> List[Optional[str]]:
    """`project:<relation>:<id>` for every relation value present in `values`."""
    keys = []
    for value in values:
        for field, relation in RELATED_FIELDS.items():
            if value.get(field):
                keys.append(f"{CACHE_PREFIX}{relation}:{value[field]}")
    return keys


def _cascade_keys(project: Project) -> List[Optional[str]]:
    """Every cached key of the grades, feedback and files deleted with the project."""
    keys = [f"{prefix}:project:{project.id}" for prefix in ("project-grade", "project-feedback", "project-file")]
    for grade in project.grades:
        keys.extend(project_grade_service.grade_cache_keys(grade))
    for feedback in project.feedback:
        keys.extend(project_feedback_service.feedback_cache_keys(feedback))
    for project_file in project.files:
        keys.extend(project_file_service.file_cache_keys(project_file))
    return keys


def _snapshot(project: Project) -> Dict:
    return {field: getattr(project, field) for field in RELATED_FIELDS}


def _get_project_or_404(db: DatabaseService, project_id) -> Project:
    project = db.projects.get_by_id(project_id)
    if not project:
        raise NotFoundError(f"Project with ID {project_id} not found")
    return project


def _check_title(db: DatabaseService, title: str, teacher_id, class_id=None, exclude_id=None) -> None:
    if db.projects.find_by_title(title, teacher_id, class_id, exclude_id):
        raise ConflictError(
            f"A project titled '{title}' already exists for this teacher",
            code=ErrorCode.RES_ALREADY_EXISTS,
            additional_info={"title": title, "teacherId": str(teacher_id)},
        )


def _validate_new_project(db: DatabaseService, data: project_model.ProjectCreate) -> None:
    if not db.schools.get_by_id(data.school_id):
        raise NotFoundError(f"School with ID {data.school_id} not found")
    if not db.users.get_by_id(data.teacher_id):
        raise NotFoundError(f"Teacher with ID {data.teacher_id} not found")
    _check_title(db, data.title, data.teacher_id, data.class_id)


# --- READS ---

def get_project_by_id(db: DatabaseService, project_id) -> Dict:
    def load():
        return serialize(project_model.Project, _get_project_or_404(db, project_id))
    return read_through(f"{CACHE_PREFIX}{project_id}", load)


def _get_projects_by(db: DatabaseService, field: str, value) -> List[Dict]:
    return read_through(
        f"{CACHE_PREFIX}{RELATED_FIELDS[field]}:{value}",
        lambda: serialize_many(project_model.Project, db.projects.get_by_field(field, value)),
    )


def get_projects_by_class_id(db: DatabaseService, class_id) -> List[Dict]:
    return _get_projects_by(db, "class_id", class_id)


def get_projects_by_subject_id(db: DatabaseService, subject_id) -> List[Dict]:
    return _get_projects_by(db, "subject_id", subject_id)


def get_projects_by_teacher_id(db: DatabaseService, teacher_id) -> List[Dict]:
    return _get_projects_by(db, "teacher_id", teacher_id)


def get_project_list(db: DatabaseService, query: project_model.ProjectListQuery) -> Tuple[List[Dict], int]:
    if query.due_date_from and query.due_date_to and query.due_date_from > query.due_date_to:
        raise BadRequestError("due_date_from cannot be after due_date_to", code=ErrorCode.VAL_INVALID_FORMAT)
    items, total = db.projects.list(query)
    return serialize_many(project_model.Project, items), total


# --- WRITES ---

def create_project(db: DatabaseService, data: project_model.ProjectCreate, user_id=None) -> Dict:
    _validate_new_project(db, data)

    record = to_record(data)
    record["created_by_id"] = user_id
    with service_errors("create project", title=data.title):
        project = db.projects.create(record)
        result = serialize(project_model.Project, project)

    invalidate(*_related_keys([record]))
    logger.info(f"Created project {result['id']} '{data.title}'")
    return result


def create_projects_bulk(db: DatabaseService, data: project_model.ProjectBulkCreate, user_id=None) -> List[Dict]:
    """
    Validates every project first, then inserts them all in one transaction.
    A failure on any item leaves nothing behind.
    """
    titles_seen = set()
    records = []
    for item in data.projects:
        _validate_new_project(db, item)
        title_key = (item.title, item.teacher_id, item.class_id)
        if title_key in titles_seen:
            raise ConflictError(
                f"Duplicate project title '{item.title}' in the request",
                code=ErrorCode.RES_ALREADY_EXISTS,
            )
        titles_seen.add(title_key)
        record = to_record(item)
        record["created_by_id"] = user_id
        records.append(record)

    with service_errors("bulk create projects", count=len(records)):
        with db.transaction():
            projects = db.projects.bulk_create(records, commit=False)
            result = serialize_many(project_model.Project, projects)

    invalidate(*_related_keys(records))
    logger.info(f"Bulk created {len(result)} projects")
    return result


def update_project(db: DatabaseService, project_id, data: project_model.ProjectUpdate, user_id=None) -> Dict:
    project = _get_project_or_404(db, project_id)
    changes = to_record(data, exclude_unset=True)

    if changes.get("teacher_id") and not db.users.get_by_id(changes["teacher_id"]):
        raise NotFoundError(f"Teacher with ID {changes['teacher_id']} not found")
    if "title" in changes or "teacher_id" in changes or "class_id" in changes:
        _check_title(
            db,
            changes.get("title", project.title),
            changes.get("teacher_id", project.teacher_id),
            changes.get("class_id", project.class_id),
            exclude_id=project.id,
        )

    before = _snapshot(project)
    changes["modified_by_id"] = user_id
    with service_errors("update project", project_id=project_id):
        updated = db.projects.update(project, changes)
        result = serialize(project_model.Project, updated)

    invalidate(f"{CACHE_PREFIX}{project_id}", *_related_keys([before, _snapshot(updated)]))
    return result


def delete_project(db: DatabaseService, project_id) -> bool:
    project = _get_project_or_404(db, project_id)
    keys = [f"{CACHE_PREFIX}{project_id}", *_related_keys([_snapshot(project)]), *_cascade_keys(project)]
    for project_file in project.files:
        project_file_service.remove_stored_file(project_file)

    with service_errors("delete project", project_id=project_id):
        db.projects.delete(project)

    invalidate(*keys)
    logger.info(f"Deleted project {project_id}")
    return True


def delete_projects_bulk(db: DatabaseService, criteria: project_model.ProjectBulkDelete) -> Dict:
    if not any([criteria.ids, criteria.class_id, criteria.subject_id, criteria.teacher_id, criteria.school_id]):
        raise BadRequestError(
            "At least one deletion criterion is required",
            code=ErrorCode.VAL_MISSING_REQUIRED_FIELD,
        )

    with service_errors("bulk delete projects"):
        with db.transaction():
            projects = db.projects.find_for_bulk_delete(criteria)
            keys = []
            for project in projects:
                keys.append(f"{CACHE_PREFIX}{project.id}")
                keys.extend(_related_keys([_snapshot(project)]))
                keys.extend(_cascade_keys(project))
                for project_file in project.files:
                    project_file_service.remove_stored_file(project_file)
            count = db.projects.delete_many(projects)

    invalidate(*keys)
    logger.info(f"Bulk deleted {count} projects")
    return {"count": count}
