"""Audit log store. Append-only."""

import uuid
from typing import Sequence

from sqlalchemy import select

from finance_manager.models.audit_log import AuditLog
from finance_manager.repositories.base import SqlRepository


class SqlAuditLogRepository(SqlRepository[AuditLog]):

    def record(
        self,
        event_type: str,
        entity_type: str,
        entity_id: uuid.UUID,
        details: str,
    ) -> AuditLog:
        return self.add(AuditLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        ))

    def list_for_entity(
        self, entity_type: str, entity_id: uuid.UUID
    ) -> Sequence[AuditLog]:
        return self.session.execute(
            select(AuditLog)
            .where(
                AuditLog.entity_type == entity_type,
                AuditLog.entity_id == entity_id,
            )
            .order_by(AuditLog.created_at.asc(), AuditLog.id.asc())
        ).scalars().all()
