"""
Transaction service: create, update, delete and restore transactions.

This is the only sanctioned writer of transactions. Every
balance-affecting operation runs in one unit of work:
1. Loads and checks the entities it touches (inside the unit of work,
   so the checks and the writes see the same state)
2. Writes the transaction record
3. Adjusts the affected wallet balance(s) by wallet_impact()
4. Commits

Any failure before the commit rolls back both the transaction
record and the wallet balance.
"""

import logging
import uuid

from finance_manager.errors import NotFoundError, ForbiddenError
from finance_manager.models.transaction import Transaction, wallet_impact
from finance_manager.schemas.common import QueryParams, Page, PaginationMeta
from finance_manager.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionView,
)
from finance_manager.services.common import store_errors
from finance_manager.unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)


class TransactionService:

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    def _view(self, uow: UnitOfWork, transaction_id: uuid.UUID) -> TransactionView:
        """Reload a transaction with its user and wallet for the caller."""
        transaction = uow.transactions.get_by_id(
            transaction_id, include_deleted=True
        )
        if not transaction:
            raise NotFoundError("transaction not found", str(transaction_id))
        return TransactionView.model_validate(transaction)

    def create_transaction(self, request: TransactionCreate) -> TransactionView:
        """
        Record a transaction and apply its impact to the wallet.

        The wallet must belong to the user the transaction is
        recorded for.
        """
        operation = "TransactionService.create_transaction"

        with store_errors(
            operation, "failed to create transaction",
            user_id=str(request.user_id), wallet_id=str(request.wallet_id),
        ):
            with self.uow_factory() as uow:
                if not uow.users.exists(request.user_id):
                    logger.warning("user not found", extra={
                        "operation": operation,
                        "user_id": str(request.user_id),
                    })
                    raise NotFoundError("user not found")

                wallet = uow.wallets.get_by_id(request.wallet_id)
                if not wallet:
                    logger.warning("wallet not found", extra={
                        "operation": operation,
                        "wallet_id": str(request.wallet_id),
                    })
                    raise NotFoundError("wallet not found")

                if wallet.user_id != request.user_id:
                    logger.warning("wallet does not belong to user", extra={
                        "operation": operation,
                        "wallet_id": str(wallet.id),
                        "wallet_user_id": str(wallet.user_id),
                        "request_user_id": str(request.user_id),
                    })
                    raise ForbiddenError(
                        "wallet does not belong to the specified user"
                    )

                transaction = Transaction(
                    name=request.name,
                    cost=request.cost,
                    type=request.type,
                    note=request.note,
                    t_category=request.t_category,
                    user_id=request.user_id,
                    wallet_id=request.wallet_id,
                )
                uow.transactions.create(transaction)

                impact = transaction.wallet_impact
                uow.wallets.adjust_balance(wallet.id, impact)
                uow.commit()

                logger.info("transaction created", extra={
                    "operation": operation,
                    "transaction_id": str(transaction.id),
                    "wallet_id": str(wallet.id),
                    "wallet_impact": impact,
                })
                return self._view(uow, transaction.id)

    def get_transaction(
        self, transaction_id: uuid.UUID, caller_user_id: uuid.UUID
    ) -> TransactionView:
        """
        Get a transaction owned by the caller.

        Another user's transaction is reported as not found rather
        than forbidden, so ids cannot be enumerated.
        """
        operation = "TransactionService.get_transaction"

        with store_errors(
            operation, "failed to get transaction",
            transaction_id=str(transaction_id),
        ):
            with self.uow_factory() as uow:
                transaction = uow.transactions.get_by_id(transaction_id)
                if not transaction:
                    raise NotFoundError("transaction not found")

                if transaction.user_id != caller_user_id:
                    logger.warning("unauthorized access to transaction", extra={
                        "operation": operation,
                        "transaction_id": str(transaction_id),
                        "transaction_user_id": str(transaction.user_id),
                        "caller_user_id": str(caller_user_id),
                    })
                    raise NotFoundError("transaction not found")

                return TransactionView.model_validate(transaction)

    def list_transactions(self, query: QueryParams) -> Page[TransactionView]:
        """Paginated, filtered and sorted transactions."""
        with store_errors(
            "TransactionService.list_transactions",
            "failed to get transactions",
        ):
            with self.uow_factory() as uow:
                transactions = uow.transactions.list(query)
                total = uow.transactions.count(query)
                return Page[TransactionView](
                    data=[TransactionView.model_validate(t) for t in transactions],
                    meta=PaginationMeta.build(query.page, query.limit, total),
                )

    def update_transaction(
        self, transaction_id: uuid.UUID, patch: TransactionUpdate
    ) -> TransactionView:
        """
        Apply a partial update and keep wallet balances consistent.

        Balance handling, in priority order:
        - wallet changed: the original impact is reversed on the
          original wallet and the new impact (post-patch cost and
          type) is applied to the new wallet
        - cost or type changed: the difference between the new and
          the original impact is applied to the wallet
        - otherwise balances are untouched

        Descriptive fields and user reassignment never affect balances.
        """
        operation = "TransactionService.update_transaction"

        with store_errors(
            operation, "failed to update transaction",
            transaction_id=str(transaction_id),
        ):
            with self.uow_factory() as uow:
                transaction = uow.transactions.get_by_id(transaction_id)
                if not transaction:
                    logger.warning("transaction not found", extra={
                        "operation": operation,
                        "transaction_id": str(transaction_id),
                    })
                    raise NotFoundError("transaction not found")

                # Original values for the balance calculation
                original_wallet_id = transaction.wallet_id
                original_impact = wallet_impact(
                    transaction.type, transaction.cost
                )

                if patch.name is not None:
                    transaction.name = patch.name
                if patch.note is not None:
                    transaction.note = patch.note
                if patch.t_category is not None:
                    transaction.t_category = patch.t_category

                cost_changed = (
                    patch.cost is not None and patch.cost != transaction.cost
                )
                if cost_changed:
                    transaction.cost = patch.cost

                type_changed = (
                    patch.type is not None and patch.type != transaction.type
                )
                if type_changed:
                    transaction.type = patch.type

                if patch.user_id is not None and patch.user_id != transaction.user_id:
                    if not uow.users.exists(patch.user_id):
                        logger.warning("new user not found", extra={
                            "operation": operation,
                            "user_id": str(patch.user_id),
                        })
                        raise NotFoundError("new user not found")
                    transaction.user_id = patch.user_id

                wallet_changed = (
                    patch.wallet_id is not None
                    and patch.wallet_id != original_wallet_id
                )
                if wallet_changed:
                    new_wallet = uow.wallets.get_by_id(patch.wallet_id)
                    if not new_wallet:
                        logger.warning("new wallet not found", extra={
                            "operation": operation,
                            "wallet_id": str(patch.wallet_id),
                        })
                        raise NotFoundError("new wallet not found")

                    if new_wallet.user_id != transaction.user_id:
                        logger.warning("new wallet does not belong to user", extra={
                            "operation": operation,
                            "wallet_id": str(new_wallet.id),
                            "wallet_user_id": str(new_wallet.user_id),
                            "transaction_user_id": str(transaction.user_id),
                        })
                        raise ForbiddenError(
                            "new wallet does not belong to the transaction user"
                        )
                    transaction.wallet_id = new_wallet.id

                new_impact = wallet_impact(transaction.type, transaction.cost)

                if wallet_changed:
                    uow.wallets.adjust_balance(original_wallet_id, -original_impact)
                    uow.wallets.adjust_balance(transaction.wallet_id, new_impact)
                    logger.info("transaction moved between wallets", extra={
                        "operation": operation,
                        "transaction_id": str(transaction_id),
                        "from_wallet_id": str(original_wallet_id),
                        "to_wallet_id": str(transaction.wallet_id),
                        "impact_reversed": original_impact,
                        "impact_applied": new_impact,
                    })
                elif cost_changed or type_changed:
                    difference = new_impact - original_impact
                    uow.wallets.adjust_balance(transaction.wallet_id, difference)
                    logger.info("transaction impact changed", extra={
                        "operation": operation,
                        "transaction_id": str(transaction_id),
                        "wallet_id": str(transaction.wallet_id),
                        "impact_difference": difference,
                    })

                uow.transactions.update(transaction)
                uow.commit()
                return self._view(uow, transaction_id)

    def delete_transaction(self, transaction_id: uuid.UUID) -> None:
        """
        Soft delete a transaction and reverse its impact.

        The row stays in the table for audit and restore, but no
        longer counts towards its wallet balance.
        """
        operation = "TransactionService.delete_transaction"

        with store_errors(
            operation, "failed to delete transaction",
            transaction_id=str(transaction_id),
        ):
            with self.uow_factory() as uow:
                transaction = uow.transactions.get_by_id(transaction_id)
                if not transaction:
                    logger.warning("transaction not found", extra={
                        "operation": operation,
                        "transaction_id": str(transaction_id),
                    })
                    raise NotFoundError("transaction not found")

                impact = transaction.wallet_impact
                uow.wallets.adjust_balance(transaction.wallet_id, -impact)
                uow.transactions.soft_delete(transaction.id)
                uow.commit()

                logger.info("transaction deleted", extra={
                    "operation": operation,
                    "transaction_id": str(transaction_id),
                    "wallet_id": str(transaction.wallet_id),
                    "impact_reversed": impact,
                })

    def restore_transaction(self, transaction_id: uuid.UUID) -> TransactionView:
        """
        Restore a soft-deleted transaction and re-apply its impact.

        Restoring an active transaction changes nothing.
        """
        operation = "TransactionService.restore_transaction"

        with store_errors(
            operation, "failed to restore transaction",
            transaction_id=str(transaction_id),
        ):
            with self.uow_factory() as uow:
                transaction = uow.transactions.get_by_id(
                    transaction_id, include_deleted=True
                )
                if not transaction:
                    raise NotFoundError("transaction not found")

                if transaction.is_active:
                    return TransactionView.model_validate(transaction)

                impact = transaction.wallet_impact
                uow.transactions.restore(transaction.id)
                uow.wallets.adjust_balance(transaction.wallet_id, impact)
                uow.commit()

                logger.info("transaction restored", extra={
                    "operation": operation,
                    "transaction_id": str(transaction_id),
                    "wallet_id": str(transaction.wallet_id),
                    "impact_applied": impact,
                })
                return self._view(uow, transaction_id)
