# /school-backend/app/routers/blocks_router.py

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from app.core import responses
from app.core.deps import ensure_school_access, get_school_context, require_permission
from app.models import block_model
from app.models.common_model import ApiResponse, BulkIds
from app.services import block_service
from app.services.database_service import DatabaseService, get_db_service

router = APIRouter()

RESOURCE = "block"


# --- COLLECTION ENDPOINTS (/api/v1/blocks) ---

@router.get("", response_model=ApiResponse[List[block_model.Block]], summary="List Blocks")
def list_blocks(
    request: Request,
    query: block_model.BlockListQuery = Depends(),
    db: DatabaseService = Depends(get_db_service),
    school_context: Optional[uuid.UUID] = Depends(get_school_context),
    _=Depends(require_permission(RESOURCE, "read")),
):
    if school_context:
        query.school_id = school_context
    items, total = block_service.get_block_list(db, query)
    return responses.paginated(items, query.page, query.limit, total, "Blocks retrieved successfully", request)


@router.post("", response_model=ApiResponse[block_model.Block], status_code=status.HTTP_201_CREATED, summary="Create a Block")
def create_block(request: Request, block_in: block_model.BlockCreate, db: DatabaseService = Depends(get_db_service),
                 school_context: Optional[uuid.UUID] = Depends(get_school_context),
                 _=Depends(require_permission(RESOURCE, "create"))):
    ensure_school_access(school_context, block_in.school_id)
    return responses.success(block_service.create_block(db, block_in), "Block created successfully", 201, request)


@router.post("/bulk", response_model=ApiResponse[List[block_model.Block]], status_code=status.HTTP_201_CREATED, summary="Create Blocks in Bulk")
def create_blocks_bulk(request: Request, body: block_model.BlockBulkCreate, db: DatabaseService = Depends(get_db_service),
                       school_context: Optional[uuid.UUID] = Depends(get_school_context),
                       _=Depends(require_permission(RESOURCE, "create"))):
    for item in body.blocks:
        ensure_school_access(school_context, item.school_id)
    blocks = block_service.create_blocks_bulk(db, body)
    return responses.success(blocks, f"{len(blocks)} blocks created successfully", 201, request)


@router.delete("/bulk", response_model=ApiResponse[dict], summary="Delete Blocks in Bulk")
def delete_blocks_bulk(request: Request, body: BulkIds, db: DatabaseService = Depends(get_db_service),
                       _=Depends(require_permission(RESOURCE, "delete"))):
    result = block_service.delete_blocks_bulk(db, body.ids)
    return responses.success(result, f"{result['count']} blocks deleted successfully", request=request)


@router.get("/statistics", response_model=ApiResponse[block_model.BlockStatistics], summary="Block Statistics")
def get_statistics(request: Request, db: DatabaseService = Depends(get_db_service),
                   _=Depends(require_permission(RESOURCE, "read"))):
    return responses.success(block_service.get_block_statistics(db), "Block statistics retrieved successfully", request=request)


@router.get("/school/{school_id}", response_model=ApiResponse[List[block_model.Block]], summary="List a School's Blocks")
def get_by_school(request: Request, school_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                  school_context: Optional[uuid.UUID] = Depends(get_school_context),
                  _=Depends(require_permission(RESOURCE, "read"))):
    ensure_school_access(school_context, school_id)
    return responses.success(block_service.get_blocks_by_school(db, school_id), "Blocks retrieved successfully", request=request)


# --- INDIVIDUAL BLOCK ENDPOINTS (/api/v1/blocks/{block_id}) ---

@router.get("/{block_id}", response_model=ApiResponse[block_model.Block], summary="Get a Block")
def get_block(request: Request, block_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
              school_context: Optional[uuid.UUID] = Depends(get_school_context),
              _=Depends(require_permission(RESOURCE, "read"))):
    block = block_service.get_block_by_id(db, block_id)
    ensure_school_access(school_context, block["school_id"])
    return responses.success(block, "Block retrieved successfully", request=request)


@router.put("/{block_id}", response_model=ApiResponse[block_model.Block], summary="Update a Block")
def update_block(request: Request, block_id: uuid.UUID, block_in: block_model.BlockUpdate,
                 db: DatabaseService = Depends(get_db_service),
                 school_context: Optional[uuid.UUID] = Depends(get_school_context),
                 _=Depends(require_permission(RESOURCE, "update"))):
    ensure_school_access(school_context, block_service.get_block_by_id(db, block_id)["school_id"])
    ensure_school_access(school_context, block_in.school_id)
    return responses.success(block_service.update_block(db, block_id, block_in), "Block updated successfully", request=request)


@router.delete("/{block_id}", response_model=ApiResponse[None], summary="Delete a Block")
def delete_block(request: Request, block_id: uuid.UUID, db: DatabaseService = Depends(get_db_service),
                 school_context: Optional[uuid.UUID] = Depends(get_school_context),
                 _=Depends(require_permission(RESOURCE, "delete"))):
    ensure_school_access(school_context, block_service.get_block_by_id(db, block_id)["school_id"])
    block_service.delete_block(db, block_id)
    return responses.success(None, "Block deleted successfully", request=request)
