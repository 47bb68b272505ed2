"""
Wallet store.

Balance changes made on behalf of a transaction go through
adjust_balance(). It writes to the wallet row before reading the
balance, so the row is locked for the rest of the unit of work and
a concurrent adjustment waits instead of overwriting this one.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Protocol, Sequence

from sqlalchemy import select, update, func, and_, or_

from finance_manager.errors import NotFoundError
from finance_manager.models.types import numeric
from finance_manager.models.wallet import Wallet
from finance_manager.repositories.base import (
    SqlRepository, apply_sorting, apply_pagination, parse_uuid,
)
from finance_manager.schemas.common import QueryParams


SORTABLE_COLUMNS = {
    "name": Wallet.name,
    "type": Wallet.type,
    "category": Wallet.category,
    "balance": numeric(Wallet.balance),
    "created_at": Wallet.created_at,
    "updated_at": Wallet.updated_at,
}


class WalletRepository(Protocol):
    def get_by_id(
        self, wallet_id: uuid.UUID, include_deleted: bool = False
    ) -> Wallet | None:
        ...

    def get_by_name(self, user_id: uuid.UUID, name: str) -> Wallet | None:
        ...

    def create(self, wallet: Wallet) -> Wallet:
        ...

    def update(self, wallet: Wallet) -> Wallet:
        ...

    def adjust_balance(self, wallet_id: uuid.UUID, delta: Decimal) -> Wallet:
        ...

    def soft_delete(self, wallet_id: uuid.UUID) -> None:
        ...

    def restore(self, wallet_id: uuid.UUID) -> None:
        ...

    def list(self, query: QueryParams) -> Sequence[Wallet]:
        ...

    def count(self, query: QueryParams) -> int:
        ...

    def list_batch(
        self,
        limit: int,
        after: tuple[datetime, uuid.UUID] | None = None,
        include_deleted: bool = False,
    ) -> Sequence[Wallet]:
        ...


class SqlWalletRepository(SqlRepository[Wallet]):

    def get_by_id(
        self, wallet_id: uuid.UUID, include_deleted: bool = False
    ) -> Wallet | None:
        stmt = select(Wallet).where(Wallet.id == wallet_id)
        if not include_deleted:
            stmt = stmt.where(Wallet.is_active)
        # Always refresh: adjust_balance() bypasses the identity map
        return self.session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_by_name(self, user_id: uuid.UUID, name: str) -> Wallet | None:
        return self.session.execute(
            select(Wallet).where(
                Wallet.user_id == user_id,
                func.lower(Wallet.name) == name.lower(),
                Wallet.is_active,
            )
        ).scalar_one_or_none()

    def create(self, wallet: Wallet) -> Wallet:
        return self.add(wallet)

    def update(self, wallet: Wallet) -> Wallet:
        self.session.add(wallet)
        self.session.flush()
        return wallet

    def adjust_balance(self, wallet_id: uuid.UUID, delta: Decimal) -> Wallet:
        """
        Add ``delta`` to the wallet balance.

        The sum is done on Decimal values, never in SQL, so it is
        exact on every backend. Deleted wallets are adjusted too: a
        transaction that still points at a deleted wallet must keep
        that wallet's stored balance consistent for when it is
        restored.
        """
        # Take the row lock first, then read the committed balance
        result = self.session.execute(
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("wallet not found", str(wallet_id))

        wallet = self.get_by_id(wallet_id, include_deleted=True)
        wallet.balance = wallet.balance + Decimal(delta)
        self.session.flush()
        return wallet

    def soft_delete(self, wallet_id: uuid.UUID) -> None:
        result = self.session.execute(
            update(Wallet)
            .where(Wallet.id == wallet_id, Wallet.is_active)
            .values(is_deleted=True, deleted_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("wallet not found", str(wallet_id))

    def restore(self, wallet_id: uuid.UUID) -> None:
        result = self.session.execute(
            update(Wallet)
            .where(Wallet.id == wallet_id)
            .values(is_deleted=False, deleted_at=None)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("wallet not found", str(wallet_id))

    def _filtered(self, stmt, query: QueryParams):
        if not query.include_deleted:
            stmt = stmt.where(Wallet.is_active)
        if query.logged_user_id is not None:
            stmt = stmt.where(Wallet.user_id == query.logged_user_id)
        if query.search:
            term = f"%{query.search}%"
            stmt = stmt.where(or_(
                Wallet.name.ilike(term),
                Wallet.type.ilike(term),
                Wallet.category.ilike(term),
            ))
        for key, value in query.filters.items():
            # Only whitelisted columns, anything else is ignored
            if key in ("name", "type", "category", "currency"):
                column = getattr(Wallet, key)
                stmt = stmt.where(func.lower(column) == value.lower())
            elif key == "user_id":
                stmt = stmt.where(Wallet.user_id == parse_uuid(key, value))
        return stmt

    def list(self, query: QueryParams) -> Sequence[Wallet]:
        stmt = self._filtered(select(Wallet), query)
        stmt = apply_sorting(
            stmt, query, SORTABLE_COLUMNS, Wallet.created_at.desc()
        )
        stmt = apply_pagination(stmt, query)
        return self.session.execute(stmt).scalars().all()

    def count(self, query: QueryParams) -> int:
        stmt = self._filtered(select(func.count(Wallet.id)), query)
        return self.session.execute(stmt).scalar_one()

    def list_batch(
        self,
        limit: int,
        after: tuple[datetime, uuid.UUID] | None = None,
        include_deleted: bool = False,
    ) -> Sequence[Wallet]:
        """
        A page of wallets for batch jobs, in (created_at, id) order.

        ``after`` is the (created_at, id) of the last wallet of the
        previous page. Paging by key instead of offset means a wallet
        deleted between two pages does not shift the next page and
        make the job skip a wallet.
        """
        stmt = select(Wallet)
        if not include_deleted:
            stmt = stmt.where(Wallet.is_active)
        if after is not None:
            created_at, wallet_id = after
            stmt = stmt.where(or_(
                Wallet.created_at > created_at,
                and_(Wallet.created_at == created_at, Wallet.id > wallet_id),
            ))
        stmt = (
            stmt.order_by(Wallet.created_at.asc(), Wallet.id.asc())
            .limit(limit)
        )
        return self.session.execute(stmt).scalars().all()
