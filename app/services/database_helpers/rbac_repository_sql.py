# /school-backend/app/services/database_helpers/rbac_repository_sql.py

from typing import List, Optional

from app.db.models.rbac_models import Permission, Role
from app.db.models.school_user_models import User
from .base_repository_sql import BaseRepositorySQL


class RoleRepositorySQL(BaseRepositorySQL):
    model = Role
    entity_name = "role"

    def find_all(self) -> List[Role]:
        with self._guard("listing roles"):
            return self.db.query(Role).order_by(Role.name).all()

    def find_by_name(self, name: str) -> Optional[Role]:
        with self._guard("fetching role by name"):
            return self.db.query(Role).filter(Role.name == name).first()

    def add_permissions_to_role(self, role: Role, permissions: List[Permission]) -> Role:
        with self._guard("adding permissions to role", role_id=role.id):
            existing = {p.id for p in role.permissions}
            for permission in permissions:
                if permission.id not in existing:
                    role.permissions.append(permission)
            return self._save(role, commit=True)

    def remove_permissions_from_role(self, role: Role, permission_ids: List) -> Role:
        with self._guard("removing permissions from role", role_id=role.id):
            to_remove = set(permission_ids)
            role.permissions = [p for p in role.permissions if p.id not in to_remove]
            return self._save(role, commit=True)

    def assign_role_to_user(self, user: User, role: Role) -> User:
        with self._guard("assigning role to user", user_id=user.id, role_id=role.id):
            if role not in user.roles:
                user.roles.append(role)
            return self._save(user, commit=True)


class PermissionRepositorySQL(BaseRepositorySQL):
    model = Permission
    entity_name = "permission"

    def find_all(self) -> List[Permission]:
        with self._guard("listing permissions"):
            return self.db.query(Permission).order_by(Permission.resource, Permission.action).all()

    def find_by_name(self, name: str) -> Optional[Permission]:
        with self._guard("fetching permission by name"):
            return self.db.query(Permission).filter(Permission.name == name).first()
