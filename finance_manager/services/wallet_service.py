"""
Wallet service: manages wallets and their lifecycle.

This service never changes a balance after creation. Descriptive
fields can be edited here; the balance only moves through
TransactionService and BalanceSyncService.
"""

import logging
import uuid

from finance_manager.errors import NotFoundError, ConflictError
from finance_manager.models.enums import TransactionType
from finance_manager.models.transaction import Transaction
from finance_manager.models.wallet import Wallet
from finance_manager.schemas.common import QueryParams, Page, PaginationMeta
from finance_manager.schemas.wallet import WalletCreate, WalletUpdate, WalletView
from finance_manager.services.common import store_errors
from finance_manager.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)

OPENING_BALANCE_NAME = "Opening balance"
OPENING_BALANCE_CATEGORY = "opening_balance"


class WalletService:

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    def create_wallet(self, request: WalletCreate) -> WalletView:
        """
        Create a wallet for a user.

        A non-zero starting balance is recorded as an "Opening balance"
        transaction in the same unit of work. The stored balance then
        equals the sum of the wallet's transactions from the start, and
        the reconciliation job has nothing to correct.
        """
        operation = "WalletService.create_wallet"

        with store_errors(
            operation, "failed to create wallet", user_id=str(request.user_id)
        ):
            with self.uow_factory() as uow:
                if not uow.users.exists(request.user_id):
                    raise NotFoundError("user not found")

                if uow.wallets.get_by_name(request.user_id, request.name):
                    logger.warning("wallet already exists", extra={
                        "operation": operation,
                        "wallet_name": request.name,
                        "user_id": str(request.user_id),
                    })
                    raise ConflictError(
                        "wallet with this name already exists for this user"
                    )

                wallet = uow.wallets.create(Wallet(
                    name=request.name,
                    type=request.type,
                    category=request.category,
                    currency=request.currency,
                    user_id=request.user_id,
                ))

                if request.balance:
                    opening = uow.transactions.create(Transaction(
                        name=OPENING_BALANCE_NAME,
                        cost=abs(request.balance),
                        type=(
                            TransactionType.INCOME if request.balance > 0
                            else TransactionType.EXPENSE
                        ),
                        note="",
                        t_category=OPENING_BALANCE_CATEGORY,
                        user_id=request.user_id,
                        wallet_id=wallet.id,
                    ))
                    uow.wallets.adjust_balance(wallet.id, opening.wallet_impact)

                uow.commit()

                logger.info("wallet created", extra={
                    "operation": operation,
                    "wallet_id": str(wallet.id),
                    "opening_balance": request.balance,
                })
                return WalletView.model_validate(
                    uow.wallets.get_by_id(wallet.id)
                )

    def get_wallet(
        self, wallet_id: uuid.UUID, caller_user_id: uuid.UUID
    ) -> WalletView:
        """Get a wallet owned by the caller."""
        with store_errors(
            "WalletService.get_wallet", "failed to get wallet",
            wallet_id=str(wallet_id),
        ):
            with self.uow_factory() as uow:
                wallet = uow.wallets.get_by_id(wallet_id)
                if not wallet or wallet.user_id != caller_user_id:
                    raise NotFoundError("wallet not found")
                return WalletView.model_validate(wallet)

    def list_wallets(self, query: QueryParams) -> Page[WalletView]:
        with store_errors("WalletService.list_wallets", "failed to get wallets"):
            with self.uow_factory() as uow:
                wallets = uow.wallets.list(query)
                total = uow.wallets.count(query)
                return Page[WalletView](
                    data=[WalletView.model_validate(w) for w in wallets],
                    meta=PaginationMeta.build(query.page, query.limit, total),
                )

    def update_wallet(
        self, wallet_id: uuid.UUID, patch: WalletUpdate
    ) -> WalletView:
        operation = "WalletService.update_wallet"

        with store_errors(
            operation, "failed to update wallet", wallet_id=str(wallet_id)
        ):
            with self.uow_factory() as uow:
                wallet = uow.wallets.get_by_id(wallet_id)
                if not wallet:
                    raise NotFoundError("wallet not found")

                if patch.name is not None and patch.name.lower() != wallet.name.lower():
                    if uow.wallets.get_by_name(wallet.user_id, patch.name):
                        raise ConflictError(
                            "wallet with this name already exists for this user"
                        )

                for field, value in patch.model_dump(exclude_none=True).items():
                    setattr(wallet, field, value)

                uow.wallets.update(wallet)
                uow.commit()
                return WalletView.model_validate(
                    uow.wallets.get_by_id(wallet_id)
                )

    def delete_wallet(self, wallet_id: uuid.UUID) -> None:
        """
        Soft delete a wallet.

        Its transactions are left untouched and keep counting towards
        its stored balance, so restoring the wallet needs no repair.
        """
        operation = "WalletService.delete_wallet"

        with store_errors(
            operation, "failed to delete wallet", wallet_id=str(wallet_id)
        ):
            with self.uow_factory() as uow:
                uow.wallets.soft_delete(wallet_id)
                uow.commit()
                logger.info("wallet deleted", extra={
                    "operation": operation,
                    "wallet_id": str(wallet_id),
                })

    def restore_wallet(self, wallet_id: uuid.UUID) -> WalletView:
        """
        Restore a soft-deleted wallet.

        Names are unique per user among active wallets, so a wallet
        cannot come back while another active wallet has its name.
        """
        operation = "WalletService.restore_wallet"

        with store_errors(
            operation, "failed to restore wallet", wallet_id=str(wallet_id)
        ):
            with self.uow_factory() as uow:
                wallet = uow.wallets.get_by_id(wallet_id, include_deleted=True)
                if not wallet:
                    raise NotFoundError("wallet not found")

                if not wallet.is_active:
                    existing = uow.wallets.get_by_name(wallet.user_id, wallet.name)
                    if existing:
                        logger.warning("wallet name taken, cannot restore", extra={
                            "operation": operation,
                            "wallet_id": str(wallet_id),
                            "conflicting_wallet_id": str(existing.id),
                        })
                        raise ConflictError(
                            "wallet with this name already exists for this user"
                        )

                uow.wallets.restore(wallet_id)
                uow.commit()
                logger.info("wallet restored", extra={
                    "operation": operation,
                    "wallet_id": str(wallet_id),
                })
                return WalletView.model_validate(
                    uow.wallets.get_by_id(wallet_id)
                )
