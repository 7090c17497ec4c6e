# /tests/test_school_config_services.py

import re
import uuid
from datetime import date

import pytest

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.models.block_model import BlockBulkCreate, BlockCreate, BlockListQuery, BlockUpdate
from app.models.classroom_model import ClassroomCreate, ClassroomListQuery, ClassroomUpdate
from app.models.department_model import DepartmentCreate, DepartmentUpdate
from app.services import block_service, classroom_service, department_service


def _block(db, school, name="North Wing", rooms=4, **extra):
    data = BlockCreate(school_id=school.id, name=name, number_of_classrooms=rooms, **extra)
    return block_service.create_block(db, data)


def _classroom(db, block, school, name="Room 1", max_students=30):
    data = ClassroomCreate(name=name, max_students=max_students, block_id=block["id"], school_id=school.id)
    return classroom_service.create_classroom(db, data)


# --- Blocks ---

def test_year_built_too_far_in_future_is_rejected(db, school):
    with pytest.raises(BadRequestError) as exc_info:
        _block(db, school, year_built=date.today().year + 11)
    assert "Year built must be between 1800 and" in exc_info.value.message


def test_block_for_unknown_school_is_not_found(db):
    with pytest.raises(NotFoundError):
        block_service.create_block(db, BlockCreate(school_id=uuid.uuid4(), name="Ghost", number_of_classrooms=1))


def test_block_list_rejects_inverted_year_range(db):
    with pytest.raises(BadRequestError):
        block_service.get_block_list(db, BlockListQuery(year_built_min=2000, year_built_max=1990))


def test_block_statistics(db, school, other_school):
    _block(db, school, "A", rooms=4)
    _block(db, school, "B", rooms=2, status="maintenance")
    _block(db, other_school, "C", rooms=6)

    stats = block_service.get_block_statistics(db)

    assert stats["total_blocks"] == 3
    assert stats["total_classrooms"] == 12
    assert stats["average_classrooms_per_block"] == 4.0
    assert stats["blocks_per_school"][str(school.id)] == 2
    assert stats["blocks_by_status"] == {"active": 2, "maintenance": 1}


def test_empty_statistics_are_zeroed(db):
    stats = block_service.get_block_statistics(db)
    assert stats["total_blocks"] == 0
    assert stats["blocks_per_school"] == {}


def test_statistics_are_invalidated_by_writes(db, fake_redis, school):
    block_service.get_block_statistics(db)
    assert "block:statistics" in fake_redis.store
    _block(db, school)
    assert "block:statistics" not in fake_redis.store


def test_update_block_moves_school_keys(db, fake_redis, school, other_school):
    block = _block(db, school)
    block_service.get_blocks_by_school(db, school.id)
    block_service.update_block(db, uuid.UUID(block["id"]), BlockUpdate(school_id=other_school.id))
    assert f"block:school:{school.id}" not in fake_redis.store
    assert [b["name"] for b in block_service.get_blocks_by_school(db, other_school.id)] == ["North Wing"]


def test_bulk_delete_of_unknown_blocks_is_not_found(db):
    with pytest.raises(NotFoundError) as exc_info:
        block_service.delete_blocks_bulk(db, [uuid.uuid4()])
    assert exc_info.value.message == "None of the specified blocks were found"


def test_bulk_create_and_delete_blocks(db, school):
    created = block_service.create_blocks_bulk(db, BlockBulkCreate(blocks=[
        BlockCreate(school_id=school.id, name=f"Block {n}", number_of_classrooms=2) for n in range(3)
    ]))
    ids = [uuid.UUID(b["id"]) for b in created]
    assert block_service.delete_blocks_bulk(db, ids + [uuid.uuid4()]) == {"count": 3}


def test_deleting_block_removes_its_classrooms(db, fake_redis, school):
    block = _block(db, school)
    room = _classroom(db, block, school)
    classroom_service.get_classroom_by_id(db, uuid.UUID(room["id"]))

    block_service.delete_block(db, uuid.UUID(block["id"]))

    assert f"classroom:{room['id']}" not in fake_redis.store
    with pytest.raises(NotFoundError):
        classroom_service.get_classroom_by_id(db, uuid.UUID(room["id"]))


# --- Classrooms ---

def test_classroom_block_must_belong_to_school(db, school, other_school):
    block = _block(db, other_school)
    with pytest.raises(BadRequestError) as exc_info:
        _classroom(db, block, school)
    assert exc_info.value.message == "The specified block does not belong to the specified school"


def test_moving_classroom_to_foreign_block_is_rejected(db, school, other_school):
    home = _block(db, school, "Home")
    away = _block(db, other_school, "Away")
    room = _classroom(db, home, school)
    with pytest.raises(BadRequestError) as exc_info:
        classroom_service.update_classroom(db, uuid.UUID(room["id"]), ClassroomUpdate(block_id=away["id"]))
    assert exc_info.value.message == "The specified block does not belong to the classroom's school"


def test_moving_classroom_to_school_of_another_block_is_rejected(db, school, other_school):
    room = _classroom(db, _block(db, school), school)
    with pytest.raises(BadRequestError) as exc_info:
        classroom_service.update_classroom(db, uuid.UUID(room["id"]), ClassroomUpdate(school_id=other_school.id))
    assert exc_info.value.message == "The classroom's current block does not belong to the specified school"


def test_classroom_list_filters_by_capacity(db, school):
    block = _block(db, school)
    _classroom(db, block, school, "Small", 10)
    _classroom(db, block, school, "Large", 40)
    items, total = classroom_service.get_classroom_list(db, ClassroomListQuery(min_capacity=20))
    assert total == 1
    assert items[0]["name"] == "Large"


def test_classroom_list_rejects_inverted_capacity(db):
    with pytest.raises(BadRequestError):
        classroom_service.get_classroom_list(db, ClassroomListQuery(min_capacity=50, max_capacity=10))


def test_bulk_delete_of_unknown_classrooms_is_not_found(db):
    with pytest.raises(NotFoundError) as exc_info:
        classroom_service.delete_classrooms_bulk(db, [uuid.uuid4()])
    assert exc_info.value.message == "None of the specified classrooms were found"


# --- Departments ---

def _department(db, school, name="Mathematics", **extra):
    return department_service.create_department(db, DepartmentCreate(school_id=school.id, name=name, **extra))


def test_generated_department_code_format(db, school):
    department = _department(db, school, "Science & Tech")
    assert re.fullmatch(r"GF-SCI-\d{3}", department["code"])


def test_short_department_names_are_padded(db, other_school):
    department = _department(db, other_school, "IT")
    assert re.fullmatch(r"RI-ITX-\d{3}", department["code"])


def test_duplicate_department_code_conflicts(db, school):
    _department(db, school, code="MATH-01")
    with pytest.raises(ConflictError):
        _department(db, school, "Maths Two", code="MATH-01")


def test_negative_budget_is_rejected(db, school):
    with pytest.raises(BadRequestError) as exc_info:
        _department(db, school, budget=-5)
    assert exc_info.value.message == "Budget must be a positive number"


def test_default_department_cannot_be_deleted(db, school):
    department = _department(db, school, is_default=True)
    with pytest.raises(BadRequestError) as exc_info:
        department_service.delete_department(db, uuid.UUID(department["id"]))
    assert exc_info.value.message.startswith("Cannot delete a default department")


def test_set_default_department_switches_the_flag(db, school):
    first = _department(db, school, "Arts", is_default=True)
    second = _department(db, school, "Music")

    department_service.get_department_by_id(db, uuid.UUID(first["id"]))
    department_service.set_default_department(db, uuid.UUID(second["id"]), school.id)

    assert department_service.get_default_department(db, school.id)["id"] == second["id"]
    assert department_service.get_department_by_id(db, uuid.UUID(first["id"]))["is_default"] is False


def test_creating_a_new_default_unsets_the_old_one(db, school):
    _department(db, school, "Arts", is_default=True)
    newer = _department(db, school, "History", is_default=True)
    defaults = [d for d in department_service.get_departments_by_school(db, school.id) if d["is_default"]]
    assert [d["id"] for d in defaults] == [newer["id"]]


def test_set_default_for_wrong_school_is_rejected(db, school, other_school):
    department = _department(db, school)
    with pytest.raises(BadRequestError):
        department_service.set_default_department(db, uuid.UUID(department["id"]), other_school.id)


def test_update_department_code_conflict(db, school):
    _department(db, school, "Arts", code="ART-1")
    music = _department(db, school, "Music", code="MUS-1")
    with pytest.raises(ConflictError):
        department_service.update_department(db, uuid.UUID(music["id"]), DepartmentUpdate(code="ART-1"))


def test_department_statistics(db, school):
    _department(db, school, "Arts", budget=1000, faculty_count=3)
    _department(db, school, "Music", budget=500, student_count=40)
    stats = department_service.get_department_statistics(db)
    assert stats["total_departments"] == 2
    assert stats["total_budget"] == 1500.0
    assert stats["average_budget"] == 750.0
    assert stats["total_faculty"] == 3
    assert stats["total_students"] == 40
