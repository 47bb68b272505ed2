"""
Wallet model.

A wallet stores its balance instead of deriving it on every read.
The stored value must always equal the signed sum of the wallet's
active transactions. Only TransactionService and BalanceSyncService
write to it; BalanceSyncService also repairs it when it drifts.
"""

import uuid
from decimal import Decimal

from sqlalchemy import String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_manager.models.base import Base, SoftDeleteMixin, TimestampMixin
from finance_manager.models.types import Money


class Wallet(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "wallets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Money(), nullable=False, default=Decimal("0")
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="IDR"
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="wallets")

    def __repr__(self) -> str:
        return f"<Wallet {self.name} {self.balance} {self.currency}>"
