# /tests/test_core.py

import pytest
import redis
from unittest.mock import MagicMock

from app.core import responses
from app.core.cache import CacheManager
from app.core.errors import AppError, ConflictError, ErrorCode, NotFoundError
from app.services.service_helpers import invalidate, read_through, service_errors


# --- Pagination & Envelopes ---

@pytest.mark.parametrize("page,limit,total,pages,has_next,has_prev", [
    (1, 10, 0, 0, False, False),
    (1, 10, 25, 3, True, False),
    (3, 10, 25, 3, False, True),
    (2, 5, 10, 2, False, True),
])
def test_pagination_meta_is_consistent(page, limit, total, pages, has_next, has_prev):
    meta = responses.create_pagination_meta(page, limit, total)
    assert meta["totalPages"] == pages
    assert meta["hasNextPage"] is has_next
    assert meta["hasPrevPage"] is has_prev
    assert meta["totalItems"] == total


def test_success_envelope_without_request_has_no_request_id():
    body = responses.success({"id": 1}, "Done", 201)
    assert body["success"] is True
    assert body["code"] == 201
    assert body["data"] == {"id": 1}
    assert "requestId" not in body["meta"]
    assert "pagination" not in body["meta"]


def test_error_to_dict_carries_code_and_info():
    err = NotFoundError("Block with ID 1 not found", additional_info={"blockId": "1"})
    payload = err.to_dict()
    assert err.status_code == 404
    assert payload["code"] == ErrorCode.RES_NOT_FOUND.value
    assert payload["severity"] == "warning"
    assert payload["additionalInfo"] == {"blockId": "1"}


# --- Cache ---

def test_read_through_returns_cached_value_verbatim(cache, fake_redis):
    loader = MagicMock(return_value={"name": "first"})
    assert read_through("thing:1", loader) == {"name": "first"}
    assert read_through("thing:1", loader) == {"name": "first"}
    loader.assert_called_once()
    assert cache.hits == 1


def test_read_through_uses_given_ttl(fake_redis):
    read_through("stats", lambda: {"total": 3}, 300)
    assert fake_redis.ttls["stats"] == 300


def test_read_through_does_not_cache_failures(fake_redis):
    def failing():
        raise NotFoundError("missing")

    with pytest.raises(NotFoundError):
        read_through("thing:missing", failing)
    assert "thing:missing" not in fake_redis.store


def test_invalidate_skips_empty_keys_and_dedups(fake_redis):
    fake_redis.setex("a", 60, "1")
    fake_redis.delete = MagicMock(return_value=1)
    invalidate("a", None, "a", "")
    fake_redis.delete.assert_called_once_with("a")


def test_cache_errors_are_swallowed():
    broken = MagicMock()
    broken.get.side_effect = redis.ConnectionError("down")
    broken.setex.side_effect = redis.ConnectionError("down")
    manager = CacheManager(broken)
    assert manager.get("key") is None
    assert manager.set("key", {"a": 1}) is False


def test_cache_errors_count_as_misses():
    broken = MagicMock()
    broken.get.side_effect = redis.ConnectionError("down")
    broken.dbsize.side_effect = redis.ConnectionError("down")
    manager = CacheManager(broken)
    manager.get("key")
    manager.get("other")
    assert manager.stats() == {"enabled": True, "hits": 0, "misses": 2, "keys": 0}


def test_disabled_cache_is_a_permanent_miss():
    manager = CacheManager(None)
    assert manager.enabled is False
    assert manager.set("key", 1) is False
    assert manager.get("key") is None


def test_invalidate_pattern(cache, fake_redis):
    cache.set("permissions:1", [])
    cache.set("permissions:2", [])
    cache.set("project:1", {})
    assert cache.invalidate_pattern("permissions:*") == 2
    assert list(fake_redis.store) == ["project:1"]


# --- Service error boundary ---

def test_service_errors_passes_app_errors_through():
    with pytest.raises(ConflictError):
        with service_errors("create thing"):
            raise ConflictError("taken")


def test_service_errors_wraps_unexpected_failures():
    with pytest.raises(AppError) as exc_info:
        with service_errors("create thing", thing_id=7):
            raise RuntimeError("boom")
    assert exc_info.value.message == "Failed to create thing"
    assert exc_info.value.status_code == 500
    assert exc_info.value.additional_info == {"thing_id": "7"}
