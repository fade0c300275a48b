"""
Persistence gateway: entity-scoped insert / update / find over a SQLAlchemy session.
Every call commits on its own; there is no transaction spanning two calls.
Errors are returned in GatewayResult.error, never raised.
"""
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass
class GatewayError:
    code: str  # "integrity" | "database"
    message: str


@dataclass
class GatewayResult:
    data: Any = None
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _failure(db: Session, model, action: str, exc: SQLAlchemyError) -> GatewayResult:
    db.rollback()
    code = "integrity" if isinstance(exc, IntegrityError) else "database"
    logger.warning("%s on %s failed (%s): %s", action, model.__tablename__, code, exc)
    return GatewayResult(error=GatewayError(code=code, message=str(exc.orig if hasattr(exc, "orig") else exc)))


def insert(db: Session, model, values: dict) -> GatewayResult:
    """Insert one row and return the refreshed record."""
    try:
        record = model(**values)
        db.add(record)
        db.commit()
        db.refresh(record)
        return GatewayResult(data=record)
    except SQLAlchemyError as e:
        return _failure(db, model, "insert", e)


def update(db: Session, model, key: dict, patch: dict) -> GatewayResult:
    """
    Single-statement UPDATE ... WHERE <key>. `key` must contain "id"; any extra
    fields make the update conditional (e.g. {"id": ..., "status": "PENDING"}).
    data is the refreshed record, or None when no row matched the key.
    """
    if "id" not in key:
        raise ValueError("update key must include 'id'")
    try:
        matched = db.query(model).filter_by(**key).update(patch, synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        return _failure(db, model, "update", e)
    if not matched:
        return GatewayResult(data=None)
    return find_one(db, model, {"id": key["id"]})


def find(
    db: Session,
    model,
    filters: dict | None = None,
    order_by: str | None = None,
    descending: bool = False,
    offset: int | None = None,
    limit: int | None = None,
) -> GatewayResult:
    """Equality-filtered select, optionally ordered and ranged."""
    try:
        q = db.query(model).filter_by(**(filters or {}))
        if order_by:
            column = getattr(model, order_by)
            q = q.order_by(column.desc() if descending else column)
        if offset:
            q = q.offset(offset)
        if limit:
            q = q.limit(limit)
        return GatewayResult(data=q.all())
    except SQLAlchemyError as e:
        return _failure(db, model, "find", e)


def find_one(db: Session, model, filters: dict) -> GatewayResult:
    try:
        return GatewayResult(data=db.query(model).filter_by(**filters).first())
    except SQLAlchemyError as e:
        return _failure(db, model, "find_one", e)


class PersistenceGateway:
    """Session-bound wrapper for dependency injection; delegates to module functions."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, model, values: dict) -> GatewayResult:
        return insert(self.db, model, values)

    def update(self, model, key: dict, patch: dict) -> GatewayResult:
        return update(self.db, model, key, patch)

    def find(
        self,
        model,
        filters: dict | None = None,
        order_by: str | None = None,
        descending: bool = False,
        offset: int | None = None,
        limit: int | None = None,
    ) -> GatewayResult:
        return find(self.db, model, filters, order_by, descending, offset, limit)

    def find_one(self, model, filters: dict) -> GatewayResult:
        return find_one(self.db, model, filters)
