"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class TransactionType(str, enum.Enum):
    """Direction of a transaction relative to its wallet."""
    INCOME = "income"
    EXPENSE = "expense"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
