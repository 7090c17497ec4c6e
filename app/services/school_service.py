# /school-backend/app/services/school_service.py

from typing import Dict, List, Tuple

from app.core.errors import NotFoundError
from app.models import school_model
from .database_service import DatabaseService
from .service_helpers import read_through, serialize, serialize_many, service_errors, to_record

CACHE_PREFIX = "school:"


def get_school_by_id(db: DatabaseService, school_id) -> Dict:
    def load():
        school = db.schools.get_by_id(school_id)
        if not school:
            raise NotFoundError(f"School with ID {school_id} not found")
        return serialize(school_model.School, school)
    return read_through(f"{CACHE_PREFIX}{school_id}", load)


def create_school(db: DatabaseService, data: school_model.SchoolCreate) -> Dict:
    with service_errors("create school"):
        school = db.schools.create(to_record(data))
        return serialize(school_model.School, school)


def list_schools(db: DatabaseService, query: school_model.SchoolListQuery) -> Tuple[List[Dict], int]:
    items, total = db.schools.list(query)
    return serialize_many(school_model.School, items), total
