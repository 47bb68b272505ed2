"""
Pydantic schemas for transaction operations.

Cost and type are validated here, at the boundary. The services
trust these shapes and only perform referential checks.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from finance_manager.models.enums import TransactionType
from finance_manager.schemas.user import UserSummary
from finance_manager.schemas.wallet import WalletSummary


class TransactionCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    cost: Decimal = Field(ge=0, max_digits=20, decimal_places=8)
    type: TransactionType
    note: str = Field(default="", max_length=1000)
    t_category: str = Field(min_length=2, max_length=100)
    user_id: uuid.UUID
    wallet_id: uuid.UUID


class TransactionUpdate(BaseModel):
    """Partial update. Fields left as None are not changed."""
    name: str | None = Field(default=None, min_length=2, max_length=255)
    cost: Decimal | None = Field(default=None, ge=0, max_digits=20, decimal_places=8)
    type: TransactionType | None = None
    note: str | None = Field(default=None, max_length=1000)
    t_category: str | None = Field(default=None, min_length=2, max_length=100)
    user_id: uuid.UUID | None = None
    wallet_id: uuid.UUID | None = None


class TransactionView(BaseModel):
    id: uuid.UUID
    name: str
    cost: Decimal
    type: TransactionType
    note: str
    t_category: str
    user_id: uuid.UUID
    wallet_id: uuid.UUID
    user: UserSummary | None = None
    wallet: WalletSummary | None = None
    is_deleted: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
