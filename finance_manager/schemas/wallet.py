"""
Pydantic schemas for wallet operations.

The balance is read-only after creation: WalletUpdate has no
balance field, so the only writers stay the transaction and
reconciliation services.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from finance_manager.config import get_settings


def _default_currency() -> str:
    return get_settings().DEFAULT_CURRENCY


class WalletCreate(BaseModel):
    """Request to create a wallet. A non-zero balance is an opening balance."""
    name: str = Field(min_length=2, max_length=255)
    type: str = Field(min_length=2, max_length=50)
    category: str = Field(min_length=2, max_length=100)
    balance: Decimal = Field(default=Decimal("0"), max_digits=20, decimal_places=8)
    currency: str = Field(default_factory=_default_currency, min_length=3, max_length=3)
    user_id: uuid.UUID

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        return v.upper()


class WalletUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=255)
    type: str | None = Field(default=None, min_length=2, max_length=50)
    category: str | None = Field(default=None, min_length=2, max_length=100)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str | None) -> str | None:
        return v.upper() if v is not None else v


class WalletSummary(BaseModel):
    """Wallet embedded in transaction responses."""
    id: uuid.UUID
    name: str
    type: str
    currency: str

    model_config = {"from_attributes": True}


class WalletView(BaseModel):
    id: uuid.UUID
    name: str
    type: str
    category: str
    balance: Decimal
    currency: str
    user_id: uuid.UUID
    is_deleted: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
