"""
Tests for the WalletService and UserService.
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import select

from finance_manager.errors import NotFoundError, ConflictError
from finance_manager.models.enums import TransactionType
from finance_manager.models.transaction import Transaction
from finance_manager.schemas.common import QueryParams
from finance_manager.schemas.transaction import TransactionCreate
from finance_manager.schemas.user import UserCreate
from finance_manager.schemas.wallet import WalletCreate, WalletUpdate


class TestUserService:

    def test_create_user(self, user_service):
        user = user_service.create_user(UserCreate(name="Alice", email="alice@test.com"))

        assert user.email == "alice@test.com"
        assert user_service.get_user(user.id).name == "Alice"

    def test_duplicate_email_rejected(self, user_service, user):
        with pytest.raises(ConflictError):
            user_service.create_user(UserCreate(name="Again", email=user.email))

    def test_missing_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.get_user(uuid.UUID(int=0))


class TestCreateWallet:

    def test_starts_at_zero(self, wallet_service, db_session, user):
        wallet = wallet_service.create_wallet(WalletCreate(
            name="Cash", type="cash", category="daily", user_id=user.id,
        ))

        assert wallet.balance == Decimal("0")
        assert wallet.currency == "IDR"
        assert db_session.execute(select(Transaction)).scalars().all() == []

    def test_opening_balance_recorded_as_transaction(self, wallet_service, db_session, user):
        wallet = wallet_service.create_wallet(WalletCreate(
            name="Bank", type="bank", category="main",
            balance=Decimal("1500.00"), user_id=user.id,
        ))

        opening = db_session.execute(select(Transaction)).scalar_one()
        assert wallet.balance == Decimal("1500.00")
        assert opening.wallet_id == wallet.id
        assert opening.type == TransactionType.INCOME
        assert opening.cost == Decimal("1500.00")
        assert opening.t_category == "opening_balance"

    def test_negative_opening_balance_is_expense(self, wallet_service, db_session, user):
        wallet = wallet_service.create_wallet(WalletCreate(
            name="Credit card", type="credit", category="cards",
            balance=Decimal("-250.00"), user_id=user.id,
        ))

        opening = db_session.execute(select(Transaction)).scalar_one()
        assert wallet.balance == Decimal("-250.00")
        assert opening.type == TransactionType.EXPENSE
        assert opening.cost == Decimal("250.00")

    def test_opening_balance_needs_no_sync(self, wallet_service, balance_sync_service, user):
        wallet = wallet_service.create_wallet(WalletCreate(
            name="Bank", type="bank", category="main",
            balance=Decimal("42.00"), user_id=user.id,
        ))

        assert balance_sync_service.sync_wallet_balance(wallet.id) is None

    def test_duplicate_name_rejected_case_insensitive(self, wallet_service, user, wallet):
        with pytest.raises(ConflictError):
            wallet_service.create_wallet(WalletCreate(
                name="CASH", type="cash", category="daily", user_id=user.id,
            ))

    def test_same_name_for_other_user_allowed(self, wallet_service, other_user, wallet):
        other = wallet_service.create_wallet(WalletCreate(
            name=wallet.name, type="cash", category="daily", user_id=other_user.id,
        ))
        assert other.user_id == other_user.id

    def test_unknown_user_rejected(self, wallet_service):
        with pytest.raises(NotFoundError):
            wallet_service.create_wallet(WalletCreate(
                name="Cash", type="cash", category="daily", user_id=uuid.UUID(int=0),
            ))


class TestReadWallets:

    def test_other_user_gets_not_found(self, wallet_service, other_user, wallet):
        with pytest.raises(NotFoundError):
            wallet_service.get_wallet(wallet.id, other_user.id)

    def test_list_scoped_and_filtered(self, wallet_service, user, other_user, wallet):
        wallet_service.create_wallet(WalletCreate(
            name="Bank", type="bank", category="main", user_id=user.id,
        ))
        wallet_service.create_wallet(WalletCreate(
            name="Other", type="bank", category="main", user_id=other_user.id,
        ))

        page = wallet_service.list_wallets(QueryParams(
            logged_user_id=user.id, filters={"type": "bank"},
        ))

        assert page.meta.total == 1
        assert page.data[0].name == "Bank"


class TestUpdateAndDeleteWallet:

    def test_rename(self, wallet_service, user, wallet):
        updated = wallet_service.update_wallet(wallet.id, WalletUpdate(name="Pocket"))
        assert updated.name == "Pocket"

    def test_rename_to_existing_rejected(self, wallet_service, user, wallet):
        wallet_service.create_wallet(WalletCreate(
            name="Bank", type="bank", category="main", user_id=user.id,
        ))

        with pytest.raises(ConflictError):
            wallet_service.update_wallet(wallet.id, WalletUpdate(name="bank"))

    def test_delete_and_restore_keep_balance(
        self, wallet_service, transaction_service, user, wallet
    ):
        transaction_service.create_transaction(TransactionCreate(
            name="Salary", cost=Decimal("900.00"), type=TransactionType.INCOME,
            t_category="work", user_id=user.id, wallet_id=wallet.id,
        ))

        wallet_service.delete_wallet(wallet.id)
        with pytest.raises(NotFoundError):
            wallet_service.get_wallet(wallet.id, user.id)

        restored = wallet_service.restore_wallet(wallet.id)
        assert restored.is_deleted is False
        assert restored.balance == Decimal("900.00")

    def test_restore_rejected_when_name_taken(self, wallet_service, user, wallet):
        wallet_service.delete_wallet(wallet.id)
        replacement = wallet_service.create_wallet(WalletCreate(
            name="cash", type="cash", category="daily", user_id=user.id,
        ))

        with pytest.raises(ConflictError):
            wallet_service.restore_wallet(wallet.id)

        wallets = wallet_service.list_wallets(QueryParams(logged_user_id=user.id))
        assert [w.id for w in wallets.data] == [replacement.id]

    def test_restore_missing(self, wallet_service):
        with pytest.raises(NotFoundError):
            wallet_service.restore_wallet(uuid.UUID(int=0))

    def test_delete_missing(self, wallet_service):
        with pytest.raises(NotFoundError):
            wallet_service.delete_wallet(uuid.UUID(int=0))


def test_currency_is_normalised(wallet_service, user):
    wallet = wallet_service.create_wallet(WalletCreate(
        name="Travel", type="cash", category="travel", currency="usd", user_id=user.id,
    ))
    assert wallet.currency == "USD"
