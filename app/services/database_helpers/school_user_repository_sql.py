# /school-backend/app/services/database_helpers/school_user_repository_sql.py

"""
SQL repositories for the School and User tables. These back authentication
and the existence checks every other service performs against schools and
users.
"""

from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.db.models.rbac_models import Permission, Role, role_permissions
from app.db.models.school_user_models import School, User, user_roles
from app.models.school_model import SchoolListQuery
from .base_repository_sql import BaseRepositorySQL


class SchoolRepositorySQL(BaseRepositorySQL):
    model = School
    entity_name = "school"

    def list(self, query: SchoolListQuery) -> Tuple[List[School], int]:
        with self._guard("listing schools"):
            q = self.db.query(School)
            if query.search:
                term = f"%{query.search}%"
                q = q.filter(or_(School.name.ilike(term), School.city.ilike(term)))
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)


class UserRepositorySQL(BaseRepositorySQL):
    model = User
    entity_name = "user"

    def get_by_username(self, username: str) -> Optional[User]:
        with self._guard("fetching user by username"):
            return self.db.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> Optional[User]:
        with self._guard("fetching user by email"):
            return self.db.query(User).filter(User.email == email).first()

    def get_by_login(self, login: str) -> Optional[User]:
        """Looks a user up by username or email address."""
        with self._guard("fetching user by login"):
            return self.db.query(User).filter(or_(User.username == login, User.email == login)).first()

    def get_permissions(self, user_id) -> List[Permission]:
        """Every permission granted to the user through any of their roles."""
        with self._guard("fetching user permissions", user_id=user_id):
            return (
                self.db.query(Permission)
                .join(role_permissions, role_permissions.c.permission_id == Permission.id)
                .join(Role, Role.id == role_permissions.c.role_id)
                .join(user_roles, user_roles.c.role_id == Role.id)
                .filter(user_roles.c.user_id == user_id)
                .distinct()
                .all()
            )
