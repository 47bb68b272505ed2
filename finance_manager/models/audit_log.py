"""
Audit log model.

One row per balance correction made by the reconciliation job.
A correction means a wallet drifted away from its transactions,
so each one is kept with the before/after amounts as JSON.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from finance_manager.models.base import Base


class AuditLog(Base):
    """Append-only. Rows are never updated or deleted."""

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_type: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, index=True
    )
    details: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.event_type} {self.entity_type}:{self.entity_id}>"
