# /school-backend/app/services/classroom_service.py

"""
Business logic for classrooms. A classroom always sits in a block of the
same school it belongs to.
"""

from typing import Dict, List, Tuple

from app.core.cache import CACHE_TTL
from app.core.errors import BadRequestError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.school_config_models import Block, Classroom
from app.models import classroom_model
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "classroom:"
STATISTICS_KEY = f"{CACHE_PREFIX}statistics"


def _school_key(school_id) -> str:
    return f"{CACHE_PREFIX}school:{school_id}"


def _block_key(block_id) -> str:
    return f"{CACHE_PREFIX}block:{block_id}"


def _classroom_keys(classroom: Classroom) -> List[str]:
    return [
        f"{CACHE_PREFIX}{classroom.id}",
        _school_key(classroom.school_id),
        _block_key(classroom.block_id),
        STATISTICS_KEY,
    ]


def _get_classroom_or_404(db: DatabaseService, classroom_id) -> Classroom:
    classroom = db.classrooms.get_by_id(classroom_id)
    if not classroom:
        raise NotFoundError(f"Classroom with ID {classroom_id} not found")
    return classroom


def _get_block(db: DatabaseService, block_id) -> Block:
    block = db.blocks.get_by_id(block_id)
    if not block:
        raise NotFoundError(f"Block with ID {block_id} not found")
    return block


def _ensure_school(db: DatabaseService, school_id) -> None:
    if not db.schools.get_by_id(school_id):
        raise NotFoundError(f"School with ID {school_id} not found")


def _ensure_block_in_school(block: Block, school_id, message: str) -> None:
    if block.school_id != school_id:
        raise BadRequestError(
            message,
            code=ErrorCode.VAL_INVALID_FORMAT,
            additional_info={"blockId": str(block.id), "schoolId": str(school_id)},
        )


def _validate_placement(db: DatabaseService, block_id, school_id) -> None:
    block = _get_block(db, block_id)
    _ensure_school(db, school_id)
    _ensure_block_in_school(block, school_id, "The specified block does not belong to the specified school")


# --- READS ---

def get_classroom_by_id(db: DatabaseService, classroom_id) -> Dict:
    def load():
        return serialize(classroom_model.Classroom, _get_classroom_or_404(db, classroom_id))
    return read_through(f"{CACHE_PREFIX}{classroom_id}", load)


def get_classrooms_by_school(db: DatabaseService, school_id) -> List[Dict]:
    def load():
        _ensure_school(db, school_id)
        return serialize_many(classroom_model.Classroom, db.classrooms.get_by_school(school_id))
    return read_through(_school_key(school_id), load)


def get_classrooms_by_block(db: DatabaseService, block_id) -> List[Dict]:
    def load():
        _get_block(db, block_id)
        return serialize_many(classroom_model.Classroom, db.classrooms.get_by_block(block_id))
    return read_through(_block_key(block_id), load)


def get_classroom_list(db: DatabaseService, query: classroom_model.ClassroomListQuery) -> Tuple[List[Dict], int]:
    if query.min_capacity is not None and query.max_capacity is not None and query.min_capacity > query.max_capacity:
        raise BadRequestError("min_capacity cannot be greater than max_capacity", code=ErrorCode.VAL_INVALID_FORMAT)
    items, total = db.classrooms.list(query)
    return serialize_many(classroom_model.Classroom, items), total


def get_classroom_statistics(db: DatabaseService) -> Dict:
    def load():
        df = db.classrooms.get_classrooms_as_dataframe()
        if df.empty:
            return classroom_model.ClassroomStatistics(
                total_classrooms=0, total_capacity=0, average_capacity=0.0,
                classrooms_by_type={}, classrooms_by_status={}, classrooms_per_school={},
            ).model_dump()

        return classroom_model.ClassroomStatistics(
            total_classrooms=len(df),
            total_capacity=int(df["max_students"].sum()),
            average_capacity=round(float(df["max_students"].mean()), 2),
            classrooms_by_type={k: int(v) for k, v in df.groupby("room_type").size().items()},
            classrooms_by_status={k: int(v) for k, v in df.groupby("status").size().items()},
            classrooms_per_school={k: int(v) for k, v in df.groupby(df["school_id"].astype(str)).size().items()},
        ).model_dump()
    return read_through(STATISTICS_KEY, load, CACHE_TTL["statistics"])


# --- WRITES ---

def create_classroom(db: DatabaseService, data: classroom_model.ClassroomCreate) -> Dict:
    _validate_placement(db, data.block_id, data.school_id)

    with service_errors("create classroom", block_id=data.block_id):
        classroom = db.classrooms.create(to_record(data))
        result = serialize(classroom_model.Classroom, classroom)

    invalidate(_school_key(data.school_id), _block_key(data.block_id), STATISTICS_KEY)
    logger.info(f"Created classroom {result['id']} '{data.name}'")
    return result


def update_classroom(db: DatabaseService, classroom_id, data: classroom_model.ClassroomUpdate) -> Dict:
    classroom = _get_classroom_or_404(db, classroom_id)
    changes = to_record(data, exclude_unset=True)
    new_block_id = changes.get("block_id")
    new_school_id = changes.get("school_id")

    if new_block_id and new_school_id:
        _validate_placement(db, new_block_id, new_school_id)
    elif new_block_id:
        _ensure_block_in_school(
            _get_block(db, new_block_id), classroom.school_id,
            "The specified block does not belong to the classroom's school",
        )
    elif new_school_id:
        _ensure_school(db, new_school_id)
        _ensure_block_in_school(
            _get_block(db, classroom.block_id), new_school_id,
            "The classroom's current block does not belong to the specified school",
        )

    old_keys = _classroom_keys(classroom)
    with service_errors("update classroom", classroom_id=classroom_id):
        updated = db.classrooms.update(classroom, changes)
        result = serialize(classroom_model.Classroom, updated)

    invalidate(*old_keys, *_classroom_keys(updated))
    return result


def delete_classroom(db: DatabaseService, classroom_id) -> bool:
    classroom = _get_classroom_or_404(db, classroom_id)
    keys = _classroom_keys(classroom)

    with service_errors("delete classroom", classroom_id=classroom_id):
        db.classrooms.delete(classroom)

    invalidate(*keys)
    logger.info(f"Deleted classroom {classroom_id}")
    return True


def create_classrooms_bulk(db: DatabaseService, data: classroom_model.ClassroomBulkCreate) -> List[Dict]:
    records = []
    for item in data.classrooms:
        _validate_placement(db, item.block_id, item.school_id)
        records.append(to_record(item))

    with service_errors("bulk create classrooms", count=len(records)):
        with db.transaction():
            classrooms = db.classrooms.bulk_create(records, commit=False)
            result = serialize_many(classroom_model.Classroom, classrooms)

    keys = {_school_key(r["school_id"]) for r in records} | {_block_key(r["block_id"]) for r in records}
    invalidate(*keys, STATISTICS_KEY)
    logger.info(f"Bulk created {len(result)} classrooms")
    return result


def delete_classrooms_bulk(db: DatabaseService, classroom_ids: List) -> Dict:
    classrooms = db.classrooms.get_by_ids(classroom_ids)
    if not classrooms:
        raise NotFoundError("None of the specified classrooms were found")
    keys = [key for classroom in classrooms for key in _classroom_keys(classroom)]

    with service_errors("bulk delete classrooms", count=len(classrooms)):
        with db.transaction():
            count = db.classrooms.delete_many(classrooms)

    invalidate(*keys)
    logger.info(f"Bulk deleted {count} classrooms")
    return {"count": count}
