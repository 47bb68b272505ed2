"""Read-only aggregates over transactions for the dashboard."""

import uuid
from typing import Protocol, Sequence

from sqlalchemy import Row, select, func

from finance_manager.models.transaction import Transaction
from finance_manager.models.types import money_sum, year_month
from finance_manager.models.wallet import Wallet
from finance_manager.repositories.base import SqlRepository


class DashboardRepository(Protocol):
    def monthly_sum_by_user(self, user_id: uuid.UUID) -> Sequence[Row]:
        ...


class SqlDashboardRepository(SqlRepository[Transaction]):

    def monthly_sum_by_user(self, user_id: uuid.UUID) -> Sequence[Row]:
        """
        Per wallet and calendar month: how many active transactions the
        user recorded and the sum of their costs. Newest month first.
        """
        month = year_month(Transaction.created_at).label("month")
        stmt = (
            select(
                Transaction.user_id,
                Transaction.wallet_id,
                Wallet.name.label("wallet_name"),
                month,
                func.count(Transaction.id).label("transaction_count"),
                money_sum(Transaction.cost).label("total_cost"),
            )
            .join(Wallet, Wallet.id == Transaction.wallet_id)
            .where(Transaction.user_id == user_id, Transaction.is_active)
            .group_by(
                Transaction.user_id,
                Transaction.wallet_id,
                Wallet.name,
                month,
            )
            .order_by(month.desc(), Wallet.name.asc())
        )
        return self.session.execute(stmt).all()
