# /school-backend/app/core/responses.py

"""
Builders for the standard response envelopes.

Success: {success: true, code, message, data, meta: {timestamp, requestId?, pagination?}}
Error:   {success: false, code, message, error, meta: {timestamp, requestId?}}
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request


def _meta(request: Optional[Request] = None, **extra) -> Dict[str, Any]:
    meta = {"timestamp": datetime.now(timezone.utc).isoformat()}
    request_id = getattr(getattr(request, "state", None), "request_id", None) if request else None
    if request_id:
        meta["requestId"] = request_id
    meta.update({k: v for k, v in extra.items() if v is not None})
    return meta


def create_pagination_meta(page: int, limit: int, total_items: int) -> Dict[str, Any]:
    """
    Builds pagination metadata that is always internally consistent:
    totalPages = ceil(totalItems / limit), hasNextPage = page < totalPages,
    hasPrevPage = page > 1.
    """
    total_pages = math.ceil(total_items / limit) if limit > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "totalItems": total_items,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def success(
    data: Any = None,
    message: str = "Operation successful",
    status_code: int = 200,
    request: Optional[Request] = None,
    pagination: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "success": True,
        "code": status_code,
        "message": message,
        "data": data,
        "meta": _meta(request, pagination=pagination),
    }


def paginated(
    items: Any,
    page: int,
    limit: int,
    total_items: int,
    message: str = "Operation successful",
    request: Optional[Request] = None,
) -> Dict[str, Any]:
    return success(
        data=items,
        message=message,
        request=request,
        pagination=create_pagination_meta(page, limit, total_items),
    )


def error(
    message: str = "An error occurred",
    status_code: int = 500,
    error_detail: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> Dict[str, Any]:
    return {
        "success": False,
        "code": status_code,
        "message": message,
        "error": error_detail,
        "meta": _meta(request),
    }
