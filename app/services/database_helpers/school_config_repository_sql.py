# /school-backend/app/services/database_helpers/school_config_repository_sql.py

"""
SQL repositories for the school-configuration tables: blocks, classrooms and
departments.
"""

from typing import List, Optional, Tuple

import pandas as pd
from sqlalchemy import or_

from app.db.models.school_config_models import Block, Classroom, Department
from app.models.block_model import BlockListQuery
from app.models.classroom_model import ClassroomListQuery
from app.models.department_model import DepartmentListQuery
from .base_repository_sql import BaseRepositorySQL, rows_as_dataframe


# --- BLOCKS ---

class BlockRepositorySQL(BaseRepositorySQL):
    model = Block
    entity_name = "block"

    def get_by_school(self, school_id) -> List[Block]:
        with self._guard("fetching blocks by school", school_id=school_id):
            return self.db.query(Block).filter(Block.school_id == school_id).order_by(Block.name).all()

    def delete_many(self, blocks: List[Block]) -> int:
        """Deletes through the ORM so each block's classrooms cascade. Never commits."""
        with self._guard("bulk deleting blocks", count=len(blocks)):
            for block in blocks:
                self.db.delete(block)
            self.db.flush()
            return len(blocks)

    def list(self, query: BlockListQuery) -> Tuple[List[Block], int]:
        with self._guard("listing blocks"):
            q = self.db.query(Block)
            if query.search:
                term = f"%{query.search}%"
                q = q.filter(or_(Block.name.ilike(term), Block.details.ilike(term), Block.location.ilike(term)))
            if query.school_id:
                q = q.filter(Block.school_id == query.school_id)
            if query.status:
                q = q.filter(Block.status == query.status.value)
            if query.year_built_min is not None:
                q = q.filter(Block.year_built >= query.year_built_min)
            if query.year_built_max is not None:
                q = q.filter(Block.year_built <= query.year_built_max)
            if query.min_classrooms is not None:
                q = q.filter(Block.number_of_classrooms >= query.min_classrooms)
            if query.max_classrooms is not None:
                q = q.filter(Block.number_of_classrooms <= query.max_classrooms)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)

    def get_blocks_as_dataframe(self) -> pd.DataFrame:
        with self._guard("loading block statistics"):
            return rows_as_dataframe(
                self.db.query(Block).all(), ["id", "school_id", "number_of_classrooms", "status"]
            )


# --- CLASSROOMS ---

class ClassroomRepositorySQL(BaseRepositorySQL):
    model = Classroom
    entity_name = "classroom"

    def get_by_school(self, school_id) -> List[Classroom]:
        with self._guard("fetching classrooms by school", school_id=school_id):
            return self.db.query(Classroom).filter(Classroom.school_id == school_id).order_by(Classroom.name).all()

    def get_by_block(self, block_id) -> List[Classroom]:
        with self._guard("fetching classrooms by block", block_id=block_id):
            return self.db.query(Classroom).filter(Classroom.block_id == block_id).order_by(Classroom.name).all()

    def delete_many(self, classrooms: List[Classroom]) -> int:
        with self._guard("bulk deleting classrooms", count=len(classrooms)):
            ids = [c.id for c in classrooms]
            return (
                self.db.query(Classroom)
                .filter(Classroom.id.in_(ids))
                .delete(synchronize_session=False)
            )

    def list(self, query: ClassroomListQuery) -> Tuple[List[Classroom], int]:
        with self._guard("listing classrooms"):
            q = self.db.query(Classroom)
            if query.search:
                term = f"%{query.search}%"
                q = q.filter(or_(Classroom.name.ilike(term), Classroom.details.ilike(term)))
            for field in ("school_id", "block_id", "floor"):
                value = getattr(query, field)
                if value is not None:
                    q = q.filter(getattr(Classroom, field) == value)
            if query.room_type:
                q = q.filter(Classroom.room_type == query.room_type.value)
            if query.status:
                q = q.filter(Classroom.status == query.status.value)
            if query.min_capacity is not None:
                q = q.filter(Classroom.max_students >= query.min_capacity)
            if query.max_capacity is not None:
                q = q.filter(Classroom.max_students <= query.max_capacity)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)

    def get_classrooms_as_dataframe(self) -> pd.DataFrame:
        with self._guard("loading classroom statistics"):
            return rows_as_dataframe(
                self.db.query(Classroom).all(), ["id", "school_id", "room_type", "status", "max_students"]
            )


# --- DEPARTMENTS ---

class DepartmentRepositorySQL(BaseRepositorySQL):
    model = Department
    entity_name = "department"

    def get_by_code(self, code: str) -> Optional[Department]:
        with self._guard("fetching department by code", code=code):
            return self.db.query(Department).filter(Department.code == code).first()

    def get_by_school(self, school_id) -> List[Department]:
        with self._guard("fetching departments by school", school_id=school_id):
            return self.db.query(Department).filter(Department.school_id == school_id).order_by(Department.name).all()

    def get_by_head(self, head_id) -> List[Department]:
        with self._guard("fetching departments by head", head_id=head_id):
            return self.db.query(Department).filter(Department.head_of_department_id == head_id).all()

    def get_default(self, school_id) -> Optional[Department]:
        with self._guard("fetching default department", school_id=school_id):
            return (
                self.db.query(Department)
                .filter(Department.school_id == school_id, Department.is_default.is_(True))
                .first()
            )

    def unset_defaults(self, school_id, except_id=None) -> int:
        """Clears the default flag on every department of a school. Never commits."""
        with self._guard("clearing default departments", school_id=school_id):
            q = self.db.query(Department).filter(Department.school_id == school_id, Department.is_default.is_(True))
            if except_id:
                q = q.filter(Department.id != except_id)
            return q.update({Department.is_default: False}, synchronize_session="fetch")

    def list(self, query: DepartmentListQuery) -> Tuple[List[Department], int]:
        with self._guard("listing departments"):
            q = self.db.query(Department)
            if query.search:
                term = f"%{query.search}%"
                q = q.filter(or_(Department.name.ilike(term), Department.code.ilike(term), Department.description.ilike(term)))
            for field in ("school_id", "head_of_department_id", "is_default"):
                value = getattr(query, field)
                if value is not None:
                    q = q.filter(getattr(Department, field) == value)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)

    def get_departments_as_dataframe(self) -> pd.DataFrame:
        with self._guard("loading department statistics"):
            return rows_as_dataframe(
                self.db.query(Department).all(),
                ["id", "school_id", "faculty_count", "student_count", "budget"],
            )
