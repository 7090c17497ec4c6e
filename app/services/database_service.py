# /school-backend/app/services/database_service.py

"""
The single entry point services use to reach the database.

`DatabaseService` bundles one SQL repository per table around a shared
session and exposes `transaction()` for multi-step writes. Routers receive
it through the `get_db_service` dependency and hand it to the service layer.
"""

from contextlib import contextmanager
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

# --- Core Database Setup ---
from app.db.database import get_db, transaction

# --- Repository Imports ---
from .database_helpers.school_user_repository_sql import SchoolRepositorySQL, UserRepositorySQL
from .database_helpers.rbac_repository_sql import RoleRepositorySQL, PermissionRepositorySQL
from .database_helpers.student_repository_sql import StudentRepositorySQL
from .database_helpers.project_repository_sql import (
    ProjectRepositorySQL,
    ProjectGradeRepositorySQL,
    ProjectFeedbackRepositorySQL,
    ProjectFileRepositorySQL,
)
from .database_helpers.school_config_repository_sql import (
    BlockRepositorySQL,
    ClassroomRepositorySQL,
    DepartmentRepositorySQL,
)


class DatabaseService:
    def __init__(self, db_session: Session):
        self.session = db_session

        # --- Tenancy & Accounts ---
        self.schools = SchoolRepositorySQL(db_session)
        self.users = UserRepositorySQL(db_session)
        self.roles = RoleRepositorySQL(db_session)
        self.permissions = PermissionRepositorySQL(db_session)
        self.students = StudentRepositorySQL(db_session)

        # --- Projects ---
        self.projects = ProjectRepositorySQL(db_session)
        self.project_grades = ProjectGradeRepositorySQL(db_session)
        self.project_feedback = ProjectFeedbackRepositorySQL(db_session)
        self.project_files = ProjectFileRepositorySQL(db_session)

        # --- School Configuration ---
        self.blocks = BlockRepositorySQL(db_session)
        self.classrooms = ClassroomRepositorySQL(db_session)
        self.departments = DepartmentRepositorySQL(db_session)

    @contextmanager
    def transaction(self):
        """
        Groups several repository writes into one database transaction.
        Repository calls inside the block must pass `commit=False`.
        """
        with transaction(self.session):
            yield self


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
