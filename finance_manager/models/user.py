"""
User model.

Represents a wallet owner. A user can have multiple wallets
and every transaction is attributed to exactly one user.
"""

import uuid

from sqlalchemy import String, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_manager.models.base import Base, SoftDeleteMixin, TimestampMixin
from finance_manager.models.enums import UserRole


class User(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role_enum",
            create_constraint=True,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.USER,
    )

    # A user can have many wallets
    wallets: Mapped[list["Wallet"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User {self.name} ({self.role.value})>"
