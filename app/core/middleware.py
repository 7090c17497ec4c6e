# /school-backend/app/core/middleware.py

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import get_logger

logger = get_logger("app.access")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    - Accepts an inbound X-Request-Id (if present) or generates a UUIDv4.
    - Stores it in request.state.request_id so envelopes can echo it.
    - Always returns it in the X-Request-Id response header.
    - Logs one access line per request.
    """

    header_name = "X-Request-Id"

    async def dispatch(self, request: Request, call_next):
        inbound = request.headers.get(self.header_name)
        request_id = (inbound.strip() if inbound else "") or str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[self.header_name] = request_id
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms rid={request_id}")
        return response
