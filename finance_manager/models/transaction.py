"""
Transaction model.

An income or expense recorded against one wallet. The cost is
always a magnitude; the direction comes from the type. A
transaction's contribution to its wallet balance is computed by
wallet_impact() and nowhere else.
"""

import uuid
from decimal import Decimal

from sqlalchemy import (
    String, Text, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_manager.models.base import Base, SoftDeleteMixin, TimestampMixin
from finance_manager.models.types import Money
from finance_manager.models.enums import TransactionType


def wallet_impact(transaction_type: TransactionType, cost: Decimal) -> Decimal:
    """
    Return the signed amount a transaction adds to its wallet balance.

    Income adds abs(cost), expense subtracts abs(cost). Creation,
    update deltas, reversals, restores and reconciliation all go
    through this function.
    """
    magnitude = abs(Decimal(cost))
    if TransactionType(transaction_type) == TransactionType.INCOME:
        return magnitude
    return -magnitude


class Transaction(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cost: Mapped[Decimal] = mapped_column(
        Money(), nullable=False
    )
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="transaction_type_enum",
            create_constraint=True,
            values_callable=lambda types: [t.value for t in types],
        ),
        nullable=False,
    )
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    t_category: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    wallet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("wallets.id"), nullable=False, index=True
    )

    # Relationships
    user: Mapped["User"] = relationship()
    wallet: Mapped["Wallet"] = relationship()

    @property
    def wallet_impact(self) -> Decimal:
        return wallet_impact(self.type, self.cost)

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.type.value} "
            f"{self.cost} ({self.name})>"
        )
