# /school-backend/app/services/service_helpers.py

"""
Small building blocks shared by every feature service: cache read-through,
multi-key invalidation, ORM-to-JSON serialization and the error boundary
that turns unexpected failures into an `AppError`.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Type

from pydantic import BaseModel

from app.core.cache import get_cache
from app.core.errors import AppError
from app.core.logging_config import get_logger

logger = get_logger(__name__)


def serialize(schema: Type[BaseModel], instance: Any) -> dict:
    """Converts an ORM row into the JSON-compatible dict the API and the cache share."""
    return schema.model_validate(instance).model_dump(mode="json")


def serialize_many(schema: Type[BaseModel], instances: Iterable[Any]) -> List[dict]:
    return [serialize(schema, instance) for instance in instances]


def read_through(key: str, loader: Callable[[], Any], ttl: Optional[int] = None) -> Any:
    """
    Returns the cached value for `key` when present; otherwise calls `loader`,
    caches what it returns and hands it back. `loader` must return JSON data.
    """
    cache = get_cache()
    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"Cache hit: {key}")
        return cached
    value = loader()
    cache.set(key, value, ttl)
    return value


def invalidate(*keys: Optional[str]) -> None:
    """Drops every derived key that may hold a stale copy. `None` entries are skipped."""
    unique_keys = list(dict.fromkeys(key for key in keys if key))
    if unique_keys:
        get_cache().delete(*unique_keys)


def invalidate_pattern(pattern: str) -> None:
    get_cache().invalidate_pattern(pattern)


@contextmanager
def service_errors(action: str, **context):
    """
    Re-raises `AppError`s untouched and wraps anything else into
    `AppError("Failed to <action>")`, logging the original failure.
    """
    try:
        yield
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        info = {k: str(v) for k, v in context.items() if v is not None}
        raise AppError(f"Failed to {action}", additional_info=info or None) from e


def to_record(payload: BaseModel, **dump_kwargs) -> dict:
    """Dumps a request model into column values, unwrapping enums to their stored strings."""
    return {
        key: (value.value if isinstance(value, Enum) else value)
        for key, value in payload.model_dump(**dump_kwargs).items()
    }
