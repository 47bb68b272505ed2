"""
Schemas for the dashboard summaries.
"""

import uuid
from decimal import Decimal

from pydantic import BaseModel


class MonthlyWalletSummary(BaseModel):
    """One wallet's activity in one calendar month."""
    user_id: uuid.UUID
    wallet_id: uuid.UUID
    wallet_name: str
    month: str
    transaction_count: int
    total_cost: Decimal

    model_config = {"from_attributes": True}
