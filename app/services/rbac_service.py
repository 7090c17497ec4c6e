# /school-backend/app/services/rbac_service.py

"""
Role-based access control.

Roles group permissions; users hold roles. A permission is a (resource,
action) pair. `manage` on a resource implies every action on it except
`delete`, and the resource `*` matches every resource. The flattened
permission list of each user is cached under `permissions:{user_id}`, and
any change to a role's permissions or to a user's roles drops those keys.
"""

from typing import Dict, List

from app.core.cache import CACHE_TTL
from app.core.errors import BadRequestError, ConflictError, ErrorCode, NotFoundError
from app.core.logging_config import get_logger
from app.db.models.rbac_models import Role
from app.db.models.school_user_models import User
from app.models import rbac_model
from app.models.rbac_model import PermissionAction
from .database_service import DatabaseService
from .service_helpers import invalidate, invalidate_pattern, read_through, serialize, serialize_many, to_record

logger = get_logger(__name__)

PERMISSION_CACHE_PREFIX = "permissions:"
SYSTEM_ROLES = ("admin", "user")
BYPASS_ROLES = ("super_admin", "admin")

# Actions implied by holding a higher-level action on the same resource.
PERMISSION_HIERARCHY: Dict[str, List[str]] = {
    PermissionAction.manage.value: [
        PermissionAction.create.value,
        PermissionAction.read.value,
        PermissionAction.update.value,
    ],
}


# --- PERMISSION CHECKS ---

def get_user_permissions(db: DatabaseService, user_id) -> List[Dict]:
    def load():
        return [{"resource": p.resource, "action": p.action} for p in db.users.get_permissions(user_id)]
    return read_through(f"{PERMISSION_CACHE_PREFIX}{user_id}", load, CACHE_TTL["permissions"])


def permission_grants(granted: Dict, resource: str, action: str) -> bool:
    if granted["resource"] not in (resource, "*"):
        return False
    if granted["action"] in (action, "*"):
        return True
    return action in PERMISSION_HIERARCHY.get(granted["action"], [])


def has_permission(db: DatabaseService, user: User, resource: str, action: str) -> bool:
    """True when the user may perform `action` on `resource`."""
    if user.role in BYPASS_ROLES:
        return True
    return any(permission_grants(p, resource, action) for p in get_user_permissions(db, user.id))


# --- ROLES ---

def _get_role_or_404(db: DatabaseService, role_id) -> Role:
    role = db.roles.get_by_id(role_id)
    if not role:
        raise NotFoundError("Role not found", additional_info={"roleId": str(role_id)})
    return role


def get_all_roles(db: DatabaseService) -> List[Dict]:
    return serialize_many(rbac_model.Role, db.roles.find_all())


def get_role_by_id(db: DatabaseService, role_id) -> Dict:
    return serialize(rbac_model.RoleWithPermissions, _get_role_or_404(db, role_id))


def create_role(db: DatabaseService, data: rbac_model.RoleCreate) -> Dict:
    if db.roles.find_by_name(data.name):
        raise ConflictError(
            "Role with this name already exists",
            code=ErrorCode.RES_ALREADY_EXISTS,
            additional_info={"field": "name"},
        )
    return serialize(rbac_model.Role, db.roles.create(data.model_dump()))


def update_role(db: DatabaseService, role_id, data: rbac_model.RoleUpdate) -> Dict:
    role = _get_role_or_404(db, role_id)
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise BadRequestError("No update data provided.")
    new_name = update_data.get("name")
    if new_name and new_name != role.name:
        existing = db.roles.find_by_name(new_name)
        if existing and existing.id != role.id:
            raise ConflictError(
                "Another role with this name already exists",
                code=ErrorCode.RES_ALREADY_EXISTS,
                additional_info={"field": "name"},
            )
    return serialize(rbac_model.Role, db.roles.update(role, update_data))


def delete_role(db: DatabaseService, role_id) -> bool:
    role = _get_role_or_404(db, role_id)
    if role.name in SYSTEM_ROLES:
        raise BadRequestError(
            "Cannot delete system role",
            code=ErrorCode.AUTH_INSUFFICIENT_PERMISSIONS,
            additional_info={"roleName": role.name},
        )
    db.roles.delete(role)
    invalidate_pattern(f"{PERMISSION_CACHE_PREFIX}*")
    return True


def get_role_permissions(db: DatabaseService, role_id) -> List[Dict]:
    return serialize_many(rbac_model.Permission, _get_role_or_404(db, role_id).permissions)


def add_permissions_to_role(db: DatabaseService, role_id, permission_ids: List) -> List[Dict]:
    role = _get_role_or_404(db, role_id)
    permissions = db.permissions.get_by_ids(permission_ids)
    missing = set(permission_ids) - {p.id for p in permissions}
    if missing:
        raise NotFoundError(
            "One or more permissions were not found",
            additional_info={"permissionIds": sorted(str(m) for m in missing)},
        )
    role = db.roles.add_permissions_to_role(role, permissions)
    invalidate_pattern(f"{PERMISSION_CACHE_PREFIX}*")
    return serialize_many(rbac_model.Permission, role.permissions)


def remove_permissions_from_role(db: DatabaseService, role_id, permission_ids: List) -> List[Dict]:
    role = _get_role_or_404(db, role_id)
    role = db.roles.remove_permissions_from_role(role, permission_ids)
    invalidate_pattern(f"{PERMISSION_CACHE_PREFIX}*")
    return serialize_many(rbac_model.Permission, role.permissions)


def assign_role_to_user(db: DatabaseService, user_id, role_id) -> Dict:
    user = db.users.get_by_id(user_id)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")
    role = _get_role_or_404(db, role_id)
    db.roles.assign_role_to_user(user, role)
    invalidate(f"{PERMISSION_CACHE_PREFIX}{user_id}")
    return {"userId": str(user.id), "roles": [r.name for r in user.roles]}


# --- PERMISSIONS ---

def get_all_permissions(db: DatabaseService) -> List[Dict]:
    return serialize_many(rbac_model.Permission, db.permissions.find_all())


def create_permission(db: DatabaseService, data: rbac_model.PermissionCreate) -> Dict:
    if db.permissions.find_by_name(data.name):
        raise ConflictError(
            "Permission with this name already exists",
            code=ErrorCode.RES_ALREADY_EXISTS,
            additional_info={"field": "name"},
        )
    return serialize(rbac_model.Permission, db.permissions.create(to_record(data)))
