# /school-backend/app/services/project_file_service.py

"""
Business logic for files attached to projects.

Uploaded content is written to `UPLOAD_DIR/<project_id>/` and served from
`UPLOAD_BASE_URL`. File rows are hard-deleted; the stored file is removed
first, and a storage failure is logged without blocking the delete.
"""

import os
import uuid
from typing import Dict, List, Optional, Tuple

from fastapi import UploadFile

from app.core import config
from app.core.errors import ErrorCode, FileError, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.project_models import ProjectFile
from app.models import project_file_model
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "project-file:"


def _project_key(project_id) -> str:
    return f"{CACHE_PREFIX}project:{project_id}"


def file_cache_keys(project_file: ProjectFile) -> List[str]:
    return [f"{CACHE_PREFIX}{project_file.id}", _project_key(project_file.project_id)]


def _get_file_or_404(db: DatabaseService, file_id) -> ProjectFile:
    project_file = db.project_files.get_by_id(file_id)
    if not project_file:
        raise NotFoundError(f"File with ID {file_id} not found")
    return project_file


def _ensure_project(db: DatabaseService, project_id) -> None:
    if not db.projects.get_by_id(project_id):
        raise NotFoundError(f"Project with ID {project_id} not found")


def remove_stored_file(project_file: ProjectFile) -> None:
    path = project_file.file_path
    if not path or not os.path.isfile(path):
        return
    try:
        os.remove(path)
    except OSError as e:
        logger.warning(f"Could not remove stored file {path} for {project_file.id}: {e}")


def _save_upload(project_id, upload: UploadFile) -> Tuple[str, str, int]:
    """Writes the upload to disk and returns (path, url, size)."""
    content = upload.file.read()
    if len(content) > config.MAX_UPLOAD_SIZE:
        raise FileError(
            f"File exceeds the maximum upload size of {config.MAX_UPLOAD_SIZE} bytes",
            code=ErrorCode.FILE_SIZE_EXCEEDED,
            additional_info={"size": len(content), "maxSize": config.MAX_UPLOAD_SIZE},
        )

    project_dir = os.path.join(config.UPLOAD_DIR, str(project_id))
    os.makedirs(project_dir, exist_ok=True)
    stored_name = f"{uuid.uuid4().hex[:8]}_{os.path.basename(upload.filename or 'untitled')}"
    path = os.path.join(project_dir, stored_name)
    try:
        with open(path, "wb") as buffer:
            buffer.write(content)
    except OSError as e:
        logger.error(f"Failed to store upload {upload.filename}: {e}")
        raise FileError("Failed to store the uploaded file", code=ErrorCode.FILE_UPLOAD_FAILED) from e

    url = f"{config.UPLOAD_BASE_URL.rstrip('/')}/{project_id}/{stored_name}"
    return path, url, len(content)


# --- READS ---

def get_file_by_id(db: DatabaseService, file_id) -> Dict:
    def load():
        return serialize(project_file_model.ProjectFile, _get_file_or_404(db, file_id))
    return read_through(f"{CACHE_PREFIX}{file_id}", load)


def get_files_by_project_id(db: DatabaseService, project_id) -> List[Dict]:
    def load():
        _ensure_project(db, project_id)
        return serialize_many(project_file_model.ProjectFile, db.project_files.get_by_project(project_id))
    return read_through(_project_key(project_id), load)


def get_file_list(db: DatabaseService, query: project_file_model.ProjectFileListQuery) -> Tuple[List[Dict], int]:
    items, total = db.project_files.list(query)
    return serialize_many(project_file_model.ProjectFile, items), total


# --- WRITES ---

def upload_file(
    db: DatabaseService,
    project_id,
    upload: UploadFile,
    uploaded_by_id,
    description: Optional[str] = None,
) -> Dict:
    _ensure_project(db, project_id)
    path, url, size = _save_upload(project_id, upload)

    record = {
        "project_id": project_id,
        "filename": upload.filename or os.path.basename(path),
        "description": description,
        "file_size": size,
        "file_type": upload.content_type or "application/octet-stream",
        "file_path": path,
        "file_url": url,
        "uploaded_by_id": uploaded_by_id,
    }
    try:
        with service_errors("upload file", project_id=project_id):
            project_file = db.project_files.create(record)
            result = serialize(project_file_model.ProjectFile, project_file)
    except Exception:
        # The row never made it; do not leave the bytes behind.
        if os.path.isfile(path):
            os.remove(path)
        raise

    invalidate(_project_key(project_id))
    logger.info(f"Stored {size} bytes for project {project_id} at {path}")
    return result


def create_file(db: DatabaseService, data: project_file_model.ProjectFileCreate, uploaded_by_id=None) -> Dict:
    _ensure_project(db, data.project_id)
    record = to_record(data)
    record["uploaded_by_id"] = data.uploaded_by_id or uploaded_by_id

    with service_errors("create file", project_id=data.project_id):
        project_file = db.project_files.create(record)
        result = serialize(project_file_model.ProjectFile, project_file)

    invalidate(_project_key(data.project_id))
    return result


def update_file(db: DatabaseService, file_id, data: project_file_model.ProjectFileUpdate) -> Dict:
    project_file = _get_file_or_404(db, file_id)
    changes = to_record(data, exclude_unset=True)

    with service_errors("update file", file_id=file_id):
        updated = db.project_files.update(project_file, changes)
        result = serialize(project_file_model.ProjectFile, updated)

    invalidate(f"{CACHE_PREFIX}{file_id}", _project_key(updated.project_id))
    return result


def delete_file(db: DatabaseService, file_id) -> bool:
    project_file = _get_file_or_404(db, file_id)
    keys = file_cache_keys(project_file)
    remove_stored_file(project_file)

    with service_errors("delete file", file_id=file_id):
        with db.transaction():
            db.project_files.delete(project_file, commit=False)

    invalidate(*keys)
    logger.info(f"Deleted file {file_id}")
    return True


def bulk_delete_files(db: DatabaseService, project_id) -> Dict:
    _ensure_project(db, project_id)
    files = db.project_files.get_by_project(project_id)
    keys = [key for f in files for key in file_cache_keys(f)]
    for project_file in files:
        remove_stored_file(project_file)

    with service_errors("bulk delete files", project_id=project_id):
        with db.transaction():
            count = db.project_files.delete_by_project(project_id)

    invalidate(_project_key(project_id), *keys)
    logger.info(f"Deleted {count} files of project {project_id}")
    return {"count": count}


def download_file(db: DatabaseService, file_id) -> Dict:
    """Records the download and returns the file with the URL to fetch it from."""
    project_file = _get_file_or_404(db, file_id)
    with service_errors("record download", file_id=file_id):
        updated = db.project_files.increment_download_count(project_file)
        result = serialize(project_file_model.ProjectFile, updated)

    invalidate(f"{CACHE_PREFIX}{file_id}")
    url = result["file_url"] or f"{config.UPLOAD_BASE_URL.rstrip('/')}/{result['project_id']}/{os.path.basename(result['file_path'])}"
    return project_file_model.ProjectFileDownload(file=result, url=url).model_dump(mode="json")
