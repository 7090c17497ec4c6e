# /school-backend/app/services/database_helpers/base_repository_sql.py

"""
The shared foundation for every SQL repository.

A repository is the only place that talks to the ORM. Each public method runs
inside `_guard`, which turns any SQLAlchemy failure into a `DatabaseError`
carrying the action that failed and the ids involved, so driver errors never
leak past this layer.

Write methods take a `commit` flag. Single-entity writes commit immediately;
multi-step service operations pass `commit=False` and let
`DatabaseService.transaction()` commit or roll back the whole unit.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd
from sqlalchemy import asc, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.core.errors import AppError, DatabaseError, ErrorCode
from app.core.logging_config import get_logger

logger = get_logger(__name__)


def classify_database_error(exc: Exception) -> Tuple[int, ErrorCode, str]:
    """
    Maps a driver error to (http_status, error_code, description).
    Unique violations (SQLSTATE 23505) are conflicts, foreign-key violations
    (SQLSTATE 23503) are bad requests, everything else is a failed query.
    """
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    text = str(orig if orig is not None else exc).lower()
    if pgcode == "23505" or "unique" in text or "duplicate" in text:
        return 409, ErrorCode.DB_CONSTRAINT_VIOLATION, "Unique constraint violation"
    if pgcode == "23503" or "foreign key" in text:
        return 400, ErrorCode.DB_CONSTRAINT_VIOLATION, "Foreign key constraint violation"
    return 500, ErrorCode.DB_QUERY_FAILED, "Database query failed"


def rows_as_dataframe(rows: Iterable[Any], columns: List[str]) -> pd.DataFrame:
    """Flattens ORM rows into a DataFrame with exactly `columns`, even when empty."""
    records = [{c: getattr(row, c) for c in columns} for row in rows]
    return pd.DataFrame(records, columns=columns)


class BaseRepositorySQL:
    model = None
    entity_name = "record"

    def __init__(self, db_session: Session):
        self.db = db_session

    @contextmanager
    def _guard(self, action: str, **context):
        try:
            yield
        except AppError:
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            status_code, code, description = classify_database_error(e)
            logger.error(f"Database error while {action}: {description}: {e}")
            info = {"code": code.value, **{k: str(v) for k, v in context.items() if v is not None}}
            raise DatabaseError(
                f"Database error while {action}",
                status_code=status_code,
                code=code,
                additional_info=info,
            ) from e

    def _save(self, instance, commit: bool):
        if commit:
            self.db.commit()
            self.db.refresh(instance)
        else:
            self.db.flush()
        return instance

    # --- Generic CRUD ---

    def get_by_id(self, record_id) -> Optional[Any]:
        with self._guard(f"fetching {self.entity_name}", id=record_id):
            return self.db.get(self.model, record_id)

    def get_by_ids(self, record_ids: List[Any]) -> List[Any]:
        if not record_ids:
            return []
        with self._guard(f"fetching {self.entity_name} records", ids=",".join(map(str, record_ids))):
            return self.db.query(self.model).filter(self.model.id.in_(record_ids)).all()

    def create(self, record: Dict, commit: bool = True):
        with self._guard(f"creating {self.entity_name}"):
            instance = self.model(**record)
            self.db.add(instance)
            return self._save(instance, commit)

    def bulk_create(self, records: List[Dict], commit: bool = True) -> List[Any]:
        """Inserts all records in one batched flush."""
        with self._guard(f"bulk creating {self.entity_name} records", count=len(records)):
            instances = [self.model(**record) for record in records]
            self.db.add_all(instances)
            self.db.flush()
            if commit:
                self.db.commit()
                for instance in instances:
                    self.db.refresh(instance)
            return instances

    def update(self, instance, data: Dict, commit: bool = True):
        with self._guard(f"updating {self.entity_name}", id=getattr(instance, "id", None)):
            for key, value in data.items():
                setattr(instance, key, value)
            return self._save(instance, commit)

    def delete(self, instance, commit: bool = True) -> bool:
        with self._guard(f"deleting {self.entity_name}", id=getattr(instance, "id", None)):
            self.db.delete(instance)
            if commit:
                self.db.commit()
            else:
                self.db.flush()
            return True

    # --- Listing ---

    def _paginate(self, query: Query, page: int, limit: int, sort_by: str, sort_order: str) -> Tuple[List[Any], int]:
        total = query.order_by(None).count()
        column = getattr(self.model, sort_by)
        ordering = asc(column) if sort_order == "asc" else desc(column)
        items = query.order_by(ordering, self.model.id).offset((page - 1) * limit).limit(limit).all()
        return items, total
