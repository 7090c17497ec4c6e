# /school-backend/app/services/block_service.py

"""
Business logic for school blocks (buildings).

Deleting a block also deletes its classrooms, so block deletes clear the
classroom cache keys of that block as well.
"""

from datetime import date
from typing import Dict, List, Tuple

from app.core.cache import CACHE_TTL
from app.core.errors import BadRequestError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.school_config_models import Block
from app.models import block_model
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "block:"
STATISTICS_KEY = f"{CACHE_PREFIX}statistics"
CLASSROOM_PREFIX = "classroom:"


def _school_key(school_id) -> str:
    return f"{CACHE_PREFIX}school:{school_id}"


def _block_keys(block: Block) -> List[str]:
    """Every key a block (and the classrooms cascading with it) can appear under."""
    keys = [
        f"{CACHE_PREFIX}{block.id}",
        _school_key(block.school_id),
        STATISTICS_KEY,
        f"{CLASSROOM_PREFIX}block:{block.id}",
        f"{CLASSROOM_PREFIX}school:{block.school_id}",
        f"{CLASSROOM_PREFIX}statistics",
    ]
    keys.extend(f"{CLASSROOM_PREFIX}{classroom.id}" for classroom in block.classrooms)
    return keys


def _get_block_or_404(db: DatabaseService, block_id) -> Block:
    block = db.blocks.get_by_id(block_id)
    if not block:
        raise NotFoundError(f"Block with ID {block_id} not found")
    return block


def _ensure_school(db: DatabaseService, school_id) -> None:
    if not db.schools.get_by_id(school_id):
        raise NotFoundError(f"School with ID {school_id} not found")


def validate_block_data(data: Dict) -> None:
    """Checks the rules a request schema cannot express on its own."""
    if data.get("number_of_classrooms") is not None and data["number_of_classrooms"] < 1:
        raise BadRequestError("Number of classrooms must be at least 1", code=ErrorCode.VAL_INVALID_FORMAT)
    year_built = data.get("year_built")
    if year_built is not None:
        latest = date.today().year + 10
        if year_built < 1800 or year_built > latest:
            raise BadRequestError(
                f"Year built must be between 1800 and {latest}",
                code=ErrorCode.VAL_INVALID_FORMAT,
                additional_info={"yearBuilt": year_built},
            )


# --- READS ---

def get_block_by_id(db: DatabaseService, block_id) -> Dict:
    def load():
        return serialize(block_model.Block, _get_block_or_404(db, block_id))
    return read_through(f"{CACHE_PREFIX}{block_id}", load)


def get_blocks_by_school(db: DatabaseService, school_id) -> List[Dict]:
    def load():
        _ensure_school(db, school_id)
        return serialize_many(block_model.Block, db.blocks.get_by_school(school_id))
    return read_through(_school_key(school_id), load)


def get_block_list(db: DatabaseService, query: block_model.BlockListQuery) -> Tuple[List[Dict], int]:
    if (query.year_built_min is not None and query.year_built_max is not None
            and query.year_built_min > query.year_built_max):
        raise BadRequestError("year_built_min cannot be greater than year_built_max", code=ErrorCode.VAL_INVALID_FORMAT)
    items, total = db.blocks.list(query)
    return serialize_many(block_model.Block, items), total


def get_block_statistics(db: DatabaseService) -> Dict:
    def load():
        df = db.blocks.get_blocks_as_dataframe()
        if df.empty:
            return block_model.BlockStatistics(
                total_blocks=0, total_classrooms=0, average_classrooms_per_block=0.0,
                blocks_per_school={}, blocks_by_status={},
            ).model_dump()

        per_school = df.groupby(df["school_id"].astype(str)).size()
        by_status = df.groupby("status").size()
        return block_model.BlockStatistics(
            total_blocks=len(df),
            total_classrooms=int(df["number_of_classrooms"].sum()),
            average_classrooms_per_block=round(float(df["number_of_classrooms"].mean()), 2),
            blocks_per_school={k: int(v) for k, v in per_school.items()},
            blocks_by_status={k: int(v) for k, v in by_status.items()},
        ).model_dump()
    return read_through(STATISTICS_KEY, load, CACHE_TTL["statistics"])


# --- WRITES ---

def create_block(db: DatabaseService, data: block_model.BlockCreate) -> Dict:
    record = to_record(data)
    validate_block_data(record)
    _ensure_school(db, data.school_id)

    with service_errors("create block", school_id=data.school_id):
        block = db.blocks.create(record)
        result = serialize(block_model.Block, block)

    invalidate(_school_key(data.school_id), STATISTICS_KEY)
    logger.info(f"Created block {result['id']} '{data.name}'")
    return result


def update_block(db: DatabaseService, block_id, data: block_model.BlockUpdate) -> Dict:
    block = _get_block_or_404(db, block_id)
    changes = to_record(data, exclude_unset=True)
    validate_block_data(changes)
    if changes.get("school_id") and changes["school_id"] != block.school_id:
        _ensure_school(db, changes["school_id"])

    old_school = block.school_id
    with service_errors("update block", block_id=block_id):
        updated = db.blocks.update(block, changes)
        result = serialize(block_model.Block, updated)

    invalidate(f"{CACHE_PREFIX}{block_id}", _school_key(old_school), _school_key(updated.school_id), STATISTICS_KEY)
    return result


def delete_block(db: DatabaseService, block_id) -> bool:
    block = _get_block_or_404(db, block_id)
    keys = _block_keys(block)

    with service_errors("delete block", block_id=block_id):
        db.blocks.delete(block)

    invalidate(*keys)
    logger.info(f"Deleted block {block_id}")
    return True


def create_blocks_bulk(db: DatabaseService, data: block_model.BlockBulkCreate) -> List[Dict]:
    """Validates every block and its school first, then inserts all of them in one transaction."""
    records = []
    for item in data.blocks:
        record = to_record(item)
        validate_block_data(record)
        _ensure_school(db, item.school_id)
        records.append(record)

    with service_errors("bulk create blocks", count=len(records)):
        with db.transaction():
            blocks = db.blocks.bulk_create(records, commit=False)
            result = serialize_many(block_model.Block, blocks)

    invalidate(*{_school_key(r["school_id"]) for r in records}, STATISTICS_KEY)
    logger.info(f"Bulk created {len(result)} blocks")
    return result


def delete_blocks_bulk(db: DatabaseService, block_ids: List) -> Dict:
    blocks = db.blocks.get_by_ids(block_ids)
    if not blocks:
        raise NotFoundError("None of the specified blocks were found")
    keys = [key for block in blocks for key in _block_keys(block)]

    with service_errors("bulk delete blocks", count=len(blocks)):
        with db.transaction():
            count = db.blocks.delete_many(blocks)

    invalidate(*keys)
    logger.info(f"Bulk deleted {count} blocks")
    return {"count": count}
