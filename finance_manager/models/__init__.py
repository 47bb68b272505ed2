"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from finance_manager.models.base import Base
from finance_manager.models.enums import TransactionType, UserRole
from finance_manager.models.audit_log import AuditLog
from finance_manager.models.user import User
from finance_manager.models.wallet import Wallet
from finance_manager.models.transaction import Transaction, wallet_impact

__all__ = [
    "Base",
    "TransactionType",
    "UserRole",
    "AuditLog",
    "User",
    "Wallet",
    "Transaction",
    "wallet_impact",
]
