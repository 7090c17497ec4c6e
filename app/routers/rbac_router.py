# /school-backend/app/routers/rbac_router.py

"""
Role and permission administration. Every route requires the matching
action on the `role` resource.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import require_permission
from app.models import rbac_model
from app.models.common_model import ApiResponse
from app.services import rbac_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "role"


# --- ROLES ---

@router.get("/roles", response_model=ApiResponse[List[rbac_model.Role]], summary="List Roles")
def list_roles(request: Request, db: DatabaseService = Depends(get_db_service),
               _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(rbac_service.get_all_roles(db), "Roles retrieved successfully", request=request)


@router.post("/roles", response_model=ApiResponse[rbac_model.Role], status_code=status.HTTP_201_CREATED, summary="Create a Role")
def create_role(request: Request, role_in: rbac_model.RoleCreate, db: DatabaseService = Depends(get_db_service),
                _=Depends(require_permission(RESOURCE, "create"))):
    return responses.success(rbac_service.create_role(db, role_in), "Role created successfully", 201, request)


@router.get("/roles/{role_id}", response_model=ApiResponse[rbac_model.RoleWithPermissions], summary="Get a Role")
def get_role(request: Request, role_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
             _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(rbac_service.get_role_by_id(db, role_id), "Role retrieved successfully", request=request)


@router.put("/roles/{role_id}", response_model=ApiResponse[rbac_model.Role], summary="Update a Role")
def update_role(request: Request, role_id: uuid.UUID, role_in: rbac_model.RoleUpdate,
                db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    return responses.success(rbac_service.update_role(db, role_id, role_in), "Role updated successfully", request=request)


@router.delete("/roles/{role_id}", response_model=ApiResponse[None], summary="Delete a Role")
def delete_role(request: Request, role_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                _=Depends(require_permission(RESOURCE, "delete"))):
    rbac_service.delete_role(db, role_id)
    return responses.success(None, "Role deleted successfully", request=request)


@router.get("/roles/{role_id}/permissions", response_model=ApiResponse[List[rbac_model.Permission]], summary="List a Role's Permissions")
def get_role_permissions(request: Request, role_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                         _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(rbac_service.get_role_permissions(db, role_id), "Role permissions retrieved successfully", request=request)


@router.post("/roles/{role_id}/permissions", response_model=ApiResponse[List[rbac_model.Permission]], summary="Grant Permissions to a Role")
def add_permissions(request: Request, role_id: uuid.UUID, body: rbac_model.PermissionIds,
                    db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    permissions = rbac_service.add_permissions_to_role(db, role_id, body.permission_ids)
    return responses.success(permissions, "Permissions added to role successfully", request=request)


@router.delete("/roles/{role_id}/permissions", response_model=ApiResponse[List[rbac_model.Permission]], summary="Revoke Permissions from a Role")
def remove_permissions(request: Request, role_id: uuid.UUID, body: rbac_model.PermissionIds,
                       db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    permissions = rbac_service.remove_permissions_from_role(db, role_id, body.permission_ids)
    return responses.success(permissions, "Permissions removed from role successfully", request=request)


# --- PERMISSIONS ---

@router.get("/permissions", response_model=ApiResponse[List[rbac_model.Permission]], summary="List Permissions")
def list_permissions(request: Request, db: DatabaseService = Depends(get_db_service),
                     _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(rbac_service.get_all_permissions(db), "Permissions retrieved successfully", request=request)


@router.post("/permissions", response_model=ApiResponse[rbac_model.Permission], status_code=status.HTTP_201_CREATED, summary="Create a Permission")
def create_permission(request: Request, permission_in: rbac_model.PermissionCreate,
                      db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "create"))):
    return responses.success(rbac_service.create_permission(db, permission_in), "Permission created successfully", 201, request)


# --- USER ROLES ---

@router.post("/users/{user_id}/roles", response_model=ApiResponse[dict], summary="Assign a Role to a User")
def assign_role(request: Request, user_id: uuid.UUID, body: rbac_model.UserRoleAssign,
                db: DatabaseService = Depends(get_db_service), _=Depends(require_permission(RESOURCE, "update"))):
    return responses.success(rbac_service.assign_role_to_user(db, user_id, body.role_id), "Role assigned successfully", request=request)
