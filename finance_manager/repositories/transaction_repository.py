"""Transaction store."""

import uuid
from datetime import datetime
from typing import Protocol, Sequence

from sqlalchemy import select, update, func, or_, cast, String
from sqlalchemy.orm import selectinload

from finance_manager.errors import NotFoundError, ValidationError
from finance_manager.models.enums import TransactionType
from finance_manager.models.transaction import Transaction
from finance_manager.models.types import numeric
from finance_manager.repositories.base import (
    SqlRepository, apply_sorting, apply_pagination,
    parse_uuid, parse_decimal, parse_datetime,
)
from finance_manager.schemas.common import QueryParams


SORTABLE_COLUMNS = {
    "name": Transaction.name,
    "cost": numeric(Transaction.cost),
    "t_category": Transaction.t_category,
    "created_at": Transaction.created_at,
    "updated_at": Transaction.updated_at,
}


class TransactionRepository(Protocol):
    def get_by_id(
        self, transaction_id: uuid.UUID, include_deleted: bool = False
    ) -> Transaction | None:
        ...

    def create(self, transaction: Transaction) -> Transaction:
        ...

    def update(self, transaction: Transaction) -> Transaction:
        ...

    def soft_delete(self, transaction_id: uuid.UUID) -> None:
        ...

    def restore(self, transaction_id: uuid.UUID) -> None:
        ...

    def list_by_wallet(self, wallet_id: uuid.UUID) -> Sequence[Transaction]:
        ...

    def list_by_user(
        self, user_id: uuid.UUID, include_deleted: bool = False
    ) -> Sequence[Transaction]:
        ...

    def list(self, query: QueryParams) -> Sequence[Transaction]:
        ...

    def count(self, query: QueryParams) -> int:
        ...


class SqlTransactionRepository(SqlRepository[Transaction]):

    def get_by_id(
        self, transaction_id: uuid.UUID, include_deleted: bool = False
    ) -> Transaction | None:
        """Load a transaction with its user and wallet."""
        stmt = (
            select(Transaction)
            .options(
                selectinload(Transaction.user),
                selectinload(Transaction.wallet),
            )
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        if not include_deleted:
            stmt = stmt.where(Transaction.is_active)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, transaction: Transaction) -> Transaction:
        return self.add(transaction)

    def update(self, transaction: Transaction) -> Transaction:
        self.session.add(transaction)
        self.session.flush()
        return transaction

    def soft_delete(self, transaction_id: uuid.UUID) -> None:
        result = self.session.execute(
            update(Transaction)
            .where(Transaction.id == transaction_id, Transaction.is_active)
            .values(is_deleted=True, deleted_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("transaction not found", str(transaction_id))

    def restore(self, transaction_id: uuid.UUID) -> None:
        result = self.session.execute(
            update(Transaction)
            .where(Transaction.id == transaction_id)
            .values(is_deleted=False, deleted_at=None)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("transaction not found", str(transaction_id))

    def list_by_wallet(self, wallet_id: uuid.UUID) -> Sequence[Transaction]:
        """
        Every transaction recorded against a wallet, deleted ones included.

        Callers filter with ``Transaction.is_active`` themselves; the
        reconciliation job reports how many rows it looked at.
        """
        return self.session.execute(
            select(Transaction)
            .where(Transaction.wallet_id == wallet_id)
            .order_by(Transaction.created_at.asc())
            .execution_options(populate_existing=True)
        ).scalars().all()

    def list_by_user(
        self, user_id: uuid.UUID, include_deleted: bool = False
    ) -> Sequence[Transaction]:
        """A user's transactions across all of their wallets, newest first."""
        stmt = select(Transaction).where(Transaction.user_id == user_id)
        if not include_deleted:
            stmt = stmt.where(Transaction.is_active)
        return self.session.execute(
            stmt.order_by(Transaction.created_at.desc())
        ).scalars().all()

    def _filtered(self, stmt, query: QueryParams):
        if not query.include_deleted:
            stmt = stmt.where(Transaction.is_active)
        if query.logged_user_id is not None:
            stmt = stmt.where(Transaction.user_id == query.logged_user_id)
        if query.search:
            term = f"%{query.search}%"
            stmt = stmt.where(or_(
                Transaction.name.ilike(term),
                Transaction.note.ilike(term),
                Transaction.t_category.ilike(term),
                cast(Transaction.type, String).ilike(term),
            ))
        for key, value in query.filters.items():
            # Only whitelisted columns, anything else is ignored
            if key in ("t_category", "name"):
                column = getattr(Transaction, key)
                stmt = stmt.where(func.lower(column) == value.lower())
            elif key == "type":
                try:
                    transaction_type = TransactionType(value.lower())
                except ValueError:
                    raise ValidationError(
                        "filter 'type' must be income or expense", value
                    )
                stmt = stmt.where(Transaction.type == transaction_type)
            elif key in ("wallet_id", "user_id"):
                column = getattr(Transaction, key)
                stmt = stmt.where(column == parse_uuid(key, value))
            elif key == "cost_min":
                stmt = stmt.where(numeric(Transaction.cost) >= parse_decimal(key, value))
            elif key == "cost_max":
                stmt = stmt.where(numeric(Transaction.cost) <= parse_decimal(key, value))
            elif key == "created_after":
                stmt = stmt.where(
                    Transaction.created_at >= parse_datetime(key, value)
                )
            elif key == "created_before":
                stmt = stmt.where(
                    Transaction.created_at <= parse_datetime(key, value)
                )
        return stmt

    def list(self, query: QueryParams) -> Sequence[Transaction]:
        stmt = self._filtered(
            select(Transaction).options(
                selectinload(Transaction.user),
                selectinload(Transaction.wallet),
            ),
            query,
        )
        stmt = apply_sorting(
            stmt, query, SORTABLE_COLUMNS, Transaction.created_at.desc()
        )
        stmt = apply_pagination(stmt, query)
        return self.session.execute(stmt).scalars().all()

    def count(self, query: QueryParams) -> int:
        stmt = self._filtered(select(func.count(Transaction.id)), query)
        return self.session.execute(stmt).scalar_one()
