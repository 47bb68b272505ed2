"""
Schemas for balance reconciliation results.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class BalanceCorrection(BaseModel):
    """A wallet whose stored balance was overwritten by the sync."""
    wallet_id: uuid.UUID
    wallet_name: str
    old_balance: Decimal
    new_balance: Decimal
    difference: Decimal
    transaction_count: int


class WalletSyncError(BaseModel):
    wallet_id: uuid.UUID
    message: str


class SyncResult(BaseModel):
    """
    Outcome of a reconciliation run.

    A run never stops at the first failing wallet. ``errors``
    lists the wallets that could not be synced so an operator
    can re-run exactly those.
    """
    total: int = 0
    synced: int = 0
    corrected: int = 0
    failed: int = 0
    stopped: bool = False
    errors: list[WalletSyncError] = Field(default_factory=list)
    corrections: list[BalanceCorrection] = Field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None


class SyncRequest(BaseModel):
    """Optional subset of wallets to reconcile (e.g. previous failures)."""
    wallet_ids: list[uuid.UUID] | None = None


class WorkerStatus(BaseModel):
    is_running: bool
    enabled: bool
    interval_seconds: float
    next_run_at: datetime | None = None
    last_run: SyncResult | None = None
    last_error: str | None = None
