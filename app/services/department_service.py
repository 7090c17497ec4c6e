# /school-backend/app/services/department_service.py

"""
Business logic for academic departments.

Each school may have one default department. Department codes are unique
across schools; when a code is not supplied one is generated as
`SS-DDD-NNN` (school prefix, department prefix, random digits).
"""

import random
import re
from typing import Dict, List, Optional, Tuple

from app.core.cache import CACHE_TTL
from app.core.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.school_config_models import Department
from app.db.models.school_user_models import School
from app.models import department_model
from .database_service import DatabaseService
from .service_helpers import invalidate, read_through, serialize, serialize_many, service_errors, to_record

logger = get_logger(__name__)

CACHE_PREFIX = "department:"
STATISTICS_KEY = f"{CACHE_PREFIX}statistics"
NON_NEGATIVE_FIELDS = {
    "budget": "Budget must be a positive number",
    "faculty_count": "Faculty count must be a positive integer",
    "student_count": "Student count must be a positive integer",
}


def _code_key(code) -> Optional[str]:
    return f"{CACHE_PREFIX}code:{code}" if code else None


def _school_key(school_id) -> str:
    return f"{CACHE_PREFIX}school:{school_id}"


def _get_department_or_404(db: DatabaseService, department_id) -> Department:
    department = db.departments.get_by_id(department_id)
    if not department:
        raise NotFoundError(f"Department with ID {department_id} not found")
    return department


def _get_school_or_404(db: DatabaseService, school_id) -> School:
    school = db.schools.get_by_id(school_id)
    if not school:
        raise NotFoundError(f"School with ID {school_id} not found")
    return school


def _ensure_code_free(db: DatabaseService, code: str, exclude_id=None) -> None:
    existing = db.departments.get_by_code(code)
    if existing and existing.id != exclude_id:
        raise ConflictError(f"Department code {code} is already taken", code=ErrorCode.RES_ALREADY_EXISTS)


def validate_department_data(data: Dict) -> None:
    for field, message in NON_NEGATIVE_FIELDS.items():
        value = data.get(field)
        if value is not None and value < 0:
            raise BadRequestError(message, code=ErrorCode.VAL_INVALID_FORMAT, additional_info={"field": field})


def generate_department_code(db: DatabaseService, name: str, school: School) -> str:
    school_prefix = (school.short_name or school.name)[:2].upper()
    department_prefix = (re.sub(r"[^A-Z0-9]", "", name.upper()) + "XXX")[:3]
    while True:
        code = f"{school_prefix}-{department_prefix}-{random.randint(100, 999)}"
        if not db.departments.get_by_code(code):
            return code


# --- READS ---

def get_department_by_id(db: DatabaseService, department_id) -> Dict:
    def load():
        return serialize(department_model.Department, _get_department_or_404(db, department_id))
    return read_through(f"{CACHE_PREFIX}{department_id}", load)


def get_department_by_code(db: DatabaseService, code: str) -> Dict:
    def load():
        department = db.departments.get_by_code(code)
        if not department:
            raise NotFoundError(f"Department with code {code} not found")
        return serialize(department_model.Department, department)
    return read_through(_code_key(code), load)


def get_departments_by_school(db: DatabaseService, school_id) -> List[Dict]:
    def load():
        _get_school_or_404(db, school_id)
        return serialize_many(department_model.Department, db.departments.get_by_school(school_id))
    return read_through(_school_key(school_id), load)


def get_departments_by_head(db: DatabaseService, head_id) -> List[Dict]:
    if not db.users.get_by_id(head_id):
        raise NotFoundError(f"User with ID {head_id} not found")
    return serialize_many(department_model.Department, db.departments.get_by_head(head_id))


def get_department_list(db: DatabaseService, query: department_model.DepartmentListQuery) -> Tuple[List[Dict], int]:
    items, total = db.departments.list(query)
    return serialize_many(department_model.Department, items), total


def get_default_department(db: DatabaseService, school_id) -> Optional[Dict]:
    _get_school_or_404(db, school_id)
    department = db.departments.get_default(school_id)
    return serialize(department_model.Department, department) if department else None


def get_department_statistics(db: DatabaseService) -> Dict:
    def load():
        df = db.departments.get_departments_as_dataframe()
        if df.empty:
            return department_model.DepartmentStatistics(
                total_departments=0, departments_per_school={}, total_faculty=0,
                total_students=0, total_budget=0.0, average_budget=0.0,
            ).model_dump()

        budgets = df["budget"].dropna().astype(float)
        return department_model.DepartmentStatistics(
            total_departments=len(df),
            departments_per_school={k: int(v) for k, v in df.groupby(df["school_id"].astype(str)).size().items()},
            total_faculty=int(df["faculty_count"].fillna(0).sum()),
            total_students=int(df["student_count"].fillna(0).sum()),
            total_budget=round(float(budgets.sum()), 2),
            average_budget=round(float(budgets.mean()), 2) if not budgets.empty else 0.0,
        ).model_dump()
    return read_through(STATISTICS_KEY, load, CACHE_TTL["statistics"])


# --- WRITES ---

def create_department(db: DatabaseService, data: department_model.DepartmentCreate) -> Dict:
    record = to_record(data)
    validate_department_data(record)
    school = _get_school_or_404(db, data.school_id)
    if data.head_of_department_id and not db.users.get_by_id(data.head_of_department_id):
        raise NotFoundError(f"User with ID {data.head_of_department_id} not found")

    if record.get("code"):
        _ensure_code_free(db, record["code"])
    else:
        record["code"] = generate_department_code(db, data.name, school)

    with service_errors("create department", school_id=data.school_id):
        with db.transaction():
            if data.is_default:
                db.departments.unset_defaults(data.school_id)
            department = db.departments.create(record, commit=False)
            result = serialize(department_model.Department, department)

    sibling_keys = []
    if data.is_default:
        for d in db.departments.get_by_school(data.school_id):
            sibling_keys.extend([f"{CACHE_PREFIX}{d.id}", _code_key(d.code)])
    invalidate(_school_key(data.school_id), STATISTICS_KEY, *sibling_keys)
    logger.info(f"Created department {result['id']} ({result['code']})")
    return result


def update_department(db: DatabaseService, department_id, data: department_model.DepartmentUpdate) -> Dict:
    department = _get_department_or_404(db, department_id)
    changes = to_record(data, exclude_unset=True)
    validate_department_data(changes)
    if changes.get("code") and changes["code"] != department.code:
        _ensure_code_free(db, changes["code"], exclude_id=department.id)
    if changes.get("head_of_department_id") and not db.users.get_by_id(changes["head_of_department_id"]):
        raise NotFoundError(f"User with ID {changes['head_of_department_id']} not found")

    old_code = department.code
    with service_errors("update department", department_id=department_id):
        updated = db.departments.update(department, changes)
        result = serialize(department_model.Department, updated)

    invalidate(
        f"{CACHE_PREFIX}{department_id}",
        _code_key(old_code), _code_key(updated.code),
        _school_key(updated.school_id),
        STATISTICS_KEY,
    )
    return result


def delete_department(db: DatabaseService, department_id) -> bool:
    department = _get_department_or_404(db, department_id)
    if department.is_default:
        raise BadRequestError(
            "Cannot delete a default department. Please set another department as default first.",
            code=ErrorCode.VAL_INVALID_FORMAT,
        )
    keys = (
        f"{CACHE_PREFIX}{department_id}",
        _code_key(department.code),
        _school_key(department.school_id),
        STATISTICS_KEY,
    )

    with service_errors("delete department", department_id=department_id):
        db.departments.delete(department)

    invalidate(*keys)
    logger.info(f"Deleted department {department_id}")
    return True


def set_default_department(db: DatabaseService, department_id, school_id) -> Dict:
    department = _get_department_or_404(db, department_id)
    if department.school_id != school_id:
        raise BadRequestError(
            f"Department with ID {department_id} does not belong to school with ID {school_id}",
            code=ErrorCode.VAL_INVALID_FORMAT,
        )

    with service_errors("set default department", department_id=department_id):
        with db.transaction():
            db.departments.unset_defaults(school_id, except_id=department.id)
            updated = db.departments.update(department, {"is_default": True}, commit=False)
            result = serialize(department_model.Department, updated)

    # Every department of the school may have lost its default flag.
    siblings = db.departments.get_by_school(school_id)
    invalidate(
        f"{CACHE_PREFIX}{department_id}",
        *[f"{CACHE_PREFIX}{d.id}" for d in siblings],
        *[_code_key(d.code) for d in siblings],
        _school_key(school_id), STATISTICS_KEY,
    )
    logger.info(f"Department {department_id} is now the default of school {school_id}")
    return result
