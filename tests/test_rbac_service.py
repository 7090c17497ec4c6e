# /tests/test_rbac_service.py

import uuid

import pytest

from app.core.errors import BadRequestError, ConflictError
from app.models.rbac_model import PermissionCreate, RoleCreate
from app.services import rbac_service


@pytest.fixture
def grant(db):
    """Creates a role holding one permission and assigns it to the given user."""
    def _grant(user, resource, action):
        role = rbac_service.create_role(db, RoleCreate(name=f"{resource}-{action}"))
        permission = rbac_service.create_permission(
            db, PermissionCreate(name=f"{resource}:{action}", resource=resource, action=action)
        )
        rbac_service.add_permissions_to_role(db, uuid.UUID(role["id"]), [uuid.UUID(permission["id"])])
        rbac_service.assign_role_to_user(db, user.id, uuid.UUID(role["id"]))
    return _grant


@pytest.mark.parametrize("granted,requested,allowed", [
    ({"resource": "block", "action": "read"}, ("block", "read"), True),
    ({"resource": "block", "action": "read"}, ("block", "update"), False),
    ({"resource": "block", "action": "manage"}, ("block", "update"), True),
    ({"resource": "block", "action": "manage"}, ("block", "delete"), False),
    ({"resource": "*", "action": "read"}, ("projectGrade", "read"), True),
    ({"resource": "block", "action": "*"}, ("block", "delete"), True),
    ({"resource": "classroom", "action": "manage"}, ("block", "read"), False),
])
def test_permission_grants(granted, requested, allowed):
    assert rbac_service.permission_grants(granted, *requested) is allowed


def test_bypass_roles_hold_every_permission(db, super_admin):
    assert rbac_service.has_permission(db, super_admin, "department", "delete")


def test_user_without_roles_is_denied(db, teacher):
    assert not rbac_service.has_permission(db, teacher, "project", "read")


def test_granted_permission_is_cached_per_user(db, fake_redis, teacher, grant):
    grant(teacher, "project", "manage")
    assert rbac_service.has_permission(db, teacher, "project", "update")
    assert f"permissions:{teacher.id}" in fake_redis.store
    assert not rbac_service.has_permission(db, teacher, "project", "delete")


def test_role_changes_drop_cached_permissions(db, fake_redis, teacher, grant):
    grant(teacher, "project", "read")
    rbac_service.get_user_permissions(db, teacher.id)
    role = rbac_service.create_role(db, RoleCreate(name="extra"))
    rbac_service.assign_role_to_user(db, teacher.id, uuid.UUID(role["id"]))
    assert f"permissions:{teacher.id}" not in fake_redis.store


def test_duplicate_role_name_conflicts(db):
    rbac_service.create_role(db, RoleCreate(name="auditor"))
    with pytest.raises(ConflictError):
        rbac_service.create_role(db, RoleCreate(name="auditor"))


def test_system_roles_cannot_be_deleted(db):
    role = rbac_service.create_role(db, RoleCreate(name="admin"))
    with pytest.raises(BadRequestError):
        rbac_service.delete_role(db, uuid.UUID(role["id"]))
