"""
Unit of work.

One unit of work is one database transaction. The stores it
exposes all share its session, so a transaction insert and the
wallet balance adjustment it causes are committed together or
rolled back together:

    with uow_factory() as uow:
        uow.transactions.create(txn)
        uow.wallets.adjust_balance(wallet_id, delta)
        uow.commit()

Leaving the block without commit() (including by exception)
rolls everything back.
"""

import logging
from typing import Callable

from sqlalchemy.orm import Session, sessionmaker

from finance_manager.repositories import (
    SqlUserRepository,
    SqlWalletRepository,
    SqlTransactionRepository,
    SqlAuditLogRepository,
    SqlDashboardRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:

    # Store implementations are class attributes so tests can
    # swap one for a faulty double without touching the services.
    user_repository_cls = SqlUserRepository
    wallet_repository_cls = SqlWalletRepository
    transaction_repository_cls = SqlTransactionRepository
    audit_log_repository_cls = SqlAuditLogRepository
    dashboard_repository_cls = SqlDashboardRepository

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> "UnitOfWork":
        self.session = self.session_factory()
        self.users = self.user_repository_cls(self.session)
        self.wallets = self.wallet_repository_cls(self.session)
        self.transactions = self.transaction_repository_cls(self.session)
        self.audit_logs = self.audit_log_repository_cls(self.session)
        self.dashboard = self.dashboard_repository_cls(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                logger.debug(
                    "rolling back unit of work",
                    extra={"error": repr(exc)},
                )
            # No-op after a successful commit()
            self.session.rollback()
        finally:
            self.session.close()

    def commit(self) -> None:
        self.session.commit()


UnitOfWorkFactory = Callable[[], UnitOfWork]


def unit_of_work_factory(session_factory: sessionmaker) -> UnitOfWorkFactory:
    """Bind a session factory once; every call opens a fresh unit of work."""
    def factory() -> UnitOfWork:
        return UnitOfWork(session_factory)
    return factory
