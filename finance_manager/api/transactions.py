"""
Transaction API endpoints.

Every write goes through TransactionService, which applies the
wallet balance change in the same database transaction.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Response

from finance_manager.api.deps import (
    get_container, get_caller_id, get_optional_caller_id, list_query,
)
from finance_manager.api.errors import to_http_exception
from finance_manager.container import ApplicationContainer
from finance_manager.errors import AppError
from finance_manager.models.enums import TransactionType
from finance_manager.schemas.common import QueryParams, Page
from finance_manager.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionView,
)

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionView, status_code=201)
def create_transaction(
    request: TransactionCreate,
    container: ApplicationContainer = Depends(get_container),
):
    """Record an income or expense and apply it to the wallet."""
    try:
        return container.transactions.create_transaction(request)
    except AppError as e:
        raise to_http_exception(e)


@router.get("", response_model=Page[TransactionView])
def list_transactions(
    query: QueryParams = Depends(list_query),
    name: str | None = None,
    t_category: str | None = None,
    type: TransactionType | None = None,
    wallet_id: uuid.UUID | None = None,
    cost_min: Decimal | None = None,
    cost_max: Decimal | None = None,
    created_after: datetime | None = None,
    created_before: datetime | None = None,
    caller_id: uuid.UUID | None = Depends(get_optional_caller_id),
    container: ApplicationContainer = Depends(get_container),
):
    """List transactions, scoped to the caller when X-User-ID is sent."""
    filters = {
        "name": name,
        "t_category": t_category,
        "type": type.value if type else None,
        "wallet_id": str(wallet_id) if wallet_id else None,
        "cost_min": str(cost_min) if cost_min is not None else None,
        "cost_max": str(cost_max) if cost_max is not None else None,
        "created_after": created_after.isoformat() if created_after else None,
        "created_before": created_before.isoformat() if created_before else None,
    }
    query.filters = {k: v for k, v in filters.items() if v is not None}
    query.logged_user_id = caller_id
    try:
        return container.transactions.list_transactions(query)
    except AppError as e:
        raise to_http_exception(e)


@router.get("/{transaction_id}", response_model=TransactionView)
def get_transaction(
    transaction_id: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    container: ApplicationContainer = Depends(get_container),
):
    """Get a transaction owned by the caller."""
    try:
        return container.transactions.get_transaction(transaction_id, caller_id)
    except AppError as e:
        raise to_http_exception(e)


@router.patch("/{transaction_id}", response_model=TransactionView)
def update_transaction(
    transaction_id: uuid.UUID,
    request: TransactionUpdate,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.transactions.update_transaction(transaction_id, request)
    except AppError as e:
        raise to_http_exception(e)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: uuid.UUID,
    container: ApplicationContainer = Depends(get_container),
):
    """Soft delete a transaction and reverse its wallet impact."""
    try:
        container.transactions.delete_transaction(transaction_id)
    except AppError as e:
        raise to_http_exception(e)
    return Response(status_code=204)


@router.post("/{transaction_id}/restore", response_model=TransactionView)
def restore_transaction(
    transaction_id: uuid.UUID,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.transactions.restore_transaction(transaction_id)
    except AppError as e:
        raise to_http_exception(e)
