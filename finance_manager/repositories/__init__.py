"""Persistence stores."""

from finance_manager.repositories.user_repository import (
    UserRepository,
    SqlUserRepository,
)
from finance_manager.repositories.wallet_repository import (
    WalletRepository,
    SqlWalletRepository,
)
from finance_manager.repositories.transaction_repository import (
    TransactionRepository,
    SqlTransactionRepository,
)
from finance_manager.repositories.audit_log_repository import SqlAuditLogRepository
from finance_manager.repositories.dashboard_repository import (
    DashboardRepository,
    SqlDashboardRepository,
)

__all__ = [
    "UserRepository",
    "SqlUserRepository",
    "WalletRepository",
    "SqlWalletRepository",
    "TransactionRepository",
    "SqlTransactionRepository",
    "SqlAuditLogRepository",
    "DashboardRepository",
    "SqlDashboardRepository",
]
