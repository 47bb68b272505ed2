"""
Balance sync service: detects and repairs wallet balance drift.

A wallet's stored balance must equal the sum of wallet_impact()
over its active transactions. TransactionService keeps that true
for every mutation it performs; this service repairs drift that
came from anywhere else, such as a manual edit of the wallets table.

Unlike TransactionService, a full run is best-effort. Each wallet is
synced in its own unit of work and a failing wallet does not stop
the run. The result lists the failures so an operator can re-run
only those wallets.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Iterator

from finance_manager.errors import NotFoundError
from finance_manager.models.transaction import Transaction
from finance_manager.schemas.balance_sync import (
    BalanceCorrection,
    SyncResult,
    WalletSyncError,
)
from finance_manager.services.common import store_errors
from finance_manager.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)

BALANCE_CORRECTED_EVENT = "wallet_balance_corrected"


def calculate_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Sum the wallet impact of the active transactions."""
    return sum(
        (t.wallet_impact for t in transactions if t.is_active),
        Decimal("0"),
    )


class BalanceSyncService:

    def __init__(self, uow_factory: UnitOfWorkFactory, batch_size: int = 1000):
        self.uow_factory = uow_factory
        self.batch_size = batch_size

    def sync_wallet_balance(self, wallet_id: uuid.UUID) -> BalanceCorrection | None:
        """
        Recompute one wallet's balance from its transactions.

        Returns the correction that was applied, or None when the
        stored balance was already right. Amounts are exact decimals,
        so the comparison is exact too.
        """
        operation = "BalanceSyncService.sync_wallet_balance"

        with store_errors(
            operation, "failed to sync wallet balance", wallet_id=str(wallet_id)
        ):
            with self.uow_factory() as uow:
                wallet = uow.wallets.get_by_id(wallet_id, include_deleted=True)
                if not wallet:
                    raise NotFoundError("wallet not found", str(wallet_id))

                transactions = uow.transactions.list_by_wallet(wallet.id)
                calculated = calculate_balance(transactions)

                if wallet.balance == calculated:
                    logger.debug("wallet balance already correct", extra={
                        "operation": operation,
                        "wallet_id": str(wallet.id),
                        "balance": wallet.balance,
                    })
                    return None

                old_balance = wallet.balance
                wallet.balance = calculated
                uow.wallets.update(wallet)

                correction = BalanceCorrection(
                    wallet_id=wallet.id,
                    wallet_name=wallet.name,
                    old_balance=old_balance,
                    new_balance=calculated,
                    difference=calculated - old_balance,
                    transaction_count=len(transactions),
                )
                uow.audit_logs.record(
                    BALANCE_CORRECTED_EVENT,
                    "wallet",
                    wallet.id,
                    correction.model_dump_json(),
                )
                uow.commit()

                logger.warning("wallet balance corrected", extra={
                    "operation": operation,
                    "wallet_id": str(correction.wallet_id),
                    "wallet_name": correction.wallet_name,
                    "old_balance": correction.old_balance,
                    "new_balance": correction.new_balance,
                    "difference": correction.difference,
                    "transaction_count": correction.transaction_count,
                })
                return correction

    def _iter_wallet_ids(self) -> Iterator[uuid.UUID]:
        """Page through active wallets, batch_size at a time."""
        after = None
        while True:
            with store_errors(
                "BalanceSyncService.sync_all_wallet_balances",
                "failed to get wallets",
                after=str(after[1]) if after else None,
            ):
                with self.uow_factory() as uow:
                    batch = [
                        (w.created_at, w.id)
                        for w in uow.wallets.list_batch(self.batch_size, after)
                    ]
            for _, wallet_id in batch:
                yield wallet_id
            if len(batch) < self.batch_size:
                return
            after = batch[-1]

    def sync_all_wallet_balances(
        self,
        wallet_ids: list[uuid.UUID] | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> SyncResult:
        """
        Sync every active wallet, or only ``wallet_ids`` when given.

        Running it twice with no mutation in between corrects
        nothing the second time.

        ``should_stop`` is checked before each wallet. Once it returns
        True the run ends early with ``stopped`` set; wallets already
        synced keep their corrections.
        """
        operation = "BalanceSyncService.sync_all_wallet_balances"
        result = SyncResult(started_at=datetime.utcnow())

        logger.info("starting wallet balance sync", extra={
            "operation": operation,
            "requested_wallets": len(wallet_ids) if wallet_ids is not None else None,
        })

        ids = wallet_ids if wallet_ids is not None else self._iter_wallet_ids()
        for wallet_id in ids:
            if should_stop is not None and should_stop():
                result.stopped = True
                logger.warning("wallet balance sync stopped early", extra={
                    "operation": operation,
                    "synced_count": result.synced,
                })
                break

            result.total += 1
            try:
                correction = self.sync_wallet_balance(wallet_id)
            except Exception as e:
                logger.error("failed to sync wallet balance", exc_info=True, extra={
                    "operation": operation,
                    "wallet_id": str(wallet_id),
                })
                result.failed += 1
                result.errors.append(
                    WalletSyncError(wallet_id=wallet_id, message=str(e))
                )
                continue

            result.synced += 1
            if correction is not None:
                result.corrected += 1
                result.corrections.append(correction)

        result.finished_at = datetime.utcnow()
        logger.info("completed wallet balance sync", extra={
            "operation": operation,
            "total_wallets": result.total,
            "synced_count": result.synced,
            "corrected_count": result.corrected,
            "error_count": result.failed,
            "stopped": result.stopped,
        })
        return result
