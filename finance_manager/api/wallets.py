"""
Wallet API endpoints.

The balance is read-only here. It moves through the transaction
endpoints and is repaired by the sync endpoint.
"""

import uuid

from fastapi import APIRouter, Depends, Response

from finance_manager.api.deps import (
    get_container, get_caller_id, get_optional_caller_id, list_query,
)
from finance_manager.api.errors import to_http_exception
from finance_manager.container import ApplicationContainer
from finance_manager.errors import AppError
from finance_manager.schemas.balance_sync import BalanceCorrection
from finance_manager.schemas.common import QueryParams, Page
from finance_manager.schemas.wallet import WalletCreate, WalletUpdate, WalletView

router = APIRouter(prefix="/wallets", tags=["Wallets"])


@router.post("", response_model=WalletView, status_code=201)
def create_wallet(
    request: WalletCreate,
    container: ApplicationContainer = Depends(get_container),
):
    """Create a wallet. A non-zero balance becomes an opening balance transaction."""
    try:
        return container.wallets.create_wallet(request)
    except AppError as e:
        raise to_http_exception(e)


@router.get("", response_model=Page[WalletView])
def list_wallets(
    query: QueryParams = Depends(list_query),
    name: str | None = None,
    type: str | None = None,
    category: str | None = None,
    currency: str | None = None,
    caller_id: uuid.UUID | None = Depends(get_optional_caller_id),
    container: ApplicationContainer = Depends(get_container),
):
    """List wallets, scoped to the caller when X-User-ID is sent."""
    filters = {
        "name": name, "type": type, "category": category, "currency": currency,
    }
    query.filters = {k: v for k, v in filters.items() if v is not None}
    query.logged_user_id = caller_id
    try:
        return container.wallets.list_wallets(query)
    except AppError as e:
        raise to_http_exception(e)


@router.get("/{wallet_id}", response_model=WalletView)
def get_wallet(
    wallet_id: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.wallets.get_wallet(wallet_id, caller_id)
    except AppError as e:
        raise to_http_exception(e)


@router.patch("/{wallet_id}", response_model=WalletView)
def update_wallet(
    wallet_id: uuid.UUID,
    request: WalletUpdate,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.wallets.update_wallet(wallet_id, request)
    except AppError as e:
        raise to_http_exception(e)


@router.delete("/{wallet_id}", status_code=204)
def delete_wallet(
    wallet_id: uuid.UUID,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        container.wallets.delete_wallet(wallet_id)
    except AppError as e:
        raise to_http_exception(e)
    return Response(status_code=204)


@router.post("/{wallet_id}/restore", response_model=WalletView)
def restore_wallet(
    wallet_id: uuid.UUID,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.wallets.restore_wallet(wallet_id)
    except AppError as e:
        raise to_http_exception(e)


@router.post("/{wallet_id}/sync", response_model=BalanceCorrection | None)
def sync_wallet(
    wallet_id: uuid.UUID,
    container: ApplicationContainer = Depends(get_container),
):
    """
    Recompute one wallet's balance from its transactions.

    Returns the correction that was applied, or null when the
    stored balance was already right.
    """
    try:
        return container.balance_sync.sync_wallet_balance(wallet_id)
    except AppError as e:
        raise to_http_exception(e)
