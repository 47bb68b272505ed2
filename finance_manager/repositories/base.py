"""
Shared pieces of the SQLAlchemy repositories.

Repositories never commit. They add, flush and query inside the
session owned by the current unit of work; the unit of work
decides whether everything is committed or rolled back.
"""

import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from finance_manager.errors import ValidationError
from finance_manager.schemas.common import QueryParams

ModelT = TypeVar("ModelT")


class SqlRepository(Generic[ModelT]):
    """Base repository exposing the SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, instance: ModelT) -> ModelT:
        self.session.add(instance)
        self.session.flush()
        return instance


def apply_sorting(
    stmt: Select, query: QueryParams, sortable: dict, default
) -> Select:
    """Order by a whitelisted column, falling back to ``default``."""
    column = sortable.get(query.sort_by) if query.sort_by else None
    if column is None:
        return stmt.order_by(default)
    if query.sort_type == "asc":
        return stmt.order_by(column.asc())
    return stmt.order_by(column.desc())


def apply_pagination(stmt: Select, query: QueryParams) -> Select:
    return stmt.offset(query.offset).limit(query.limit)


# --- Filter value parsing ---
# Filters arrive as raw strings from the query string.

def parse_uuid(key: str, value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ValidationError(f"filter '{key}' must be a UUID", value)


def parse_decimal(key: str, value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValidationError(f"filter '{key}' must be a number", value)


def parse_datetime(key: str, value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"filter '{key}' must be an ISO datetime", value)
