"""Business logic services."""

from finance_manager.services.user_service import UserService
from finance_manager.services.wallet_service import WalletService
from finance_manager.services.transaction_service import TransactionService
from finance_manager.services.balance_sync_service import BalanceSyncService
from finance_manager.services.dashboard_service import DashboardService

__all__ = [
    "UserService",
    "WalletService",
    "TransactionService",
    "BalanceSyncService",
    "DashboardService",
]
