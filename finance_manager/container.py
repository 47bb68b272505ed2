"""Dependency container wiring settings, sessions, services and the worker."""

from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from finance_manager.config import Settings, get_settings
from finance_manager.models.base import SessionLocal
from finance_manager.services import (
    UserService,
    WalletService,
    TransactionService,
    BalanceSyncService,
    DashboardService,
)
from finance_manager.unit_of_work import unit_of_work_factory
from finance_manager.workers.balance_sync_worker import BalanceSyncWorker


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    session_factory: sessionmaker
    users: UserService
    wallets: WalletService
    transactions: TransactionService
    balance_sync: BalanceSyncService
    dashboard: DashboardService
    worker: BalanceSyncWorker


def build_container(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
) -> ApplicationContainer:
    """
    Build every service around one session factory.

    Tests pass their own session factory to point the whole
    application at the test database.
    """
    settings = settings or get_settings()
    session_factory = session_factory or SessionLocal
    uow_factory = unit_of_work_factory(session_factory)

    balance_sync = BalanceSyncService(
        uow_factory, batch_size=settings.BALANCE_SYNC_BATCH_SIZE
    )

    return ApplicationContainer(
        settings=settings,
        session_factory=session_factory,
        users=UserService(uow_factory),
        wallets=WalletService(uow_factory),
        transactions=TransactionService(uow_factory),
        balance_sync=balance_sync,
        dashboard=DashboardService(uow_factory),
        worker=BalanceSyncWorker(
            balance_sync,
            interval_seconds=settings.BALANCE_SYNC_INTERVAL_SECONDS,
            timeout_seconds=settings.BALANCE_SYNC_TIMEOUT_SECONDS,
            enabled=settings.BALANCE_SYNC_ENABLED,
        ),
    )
