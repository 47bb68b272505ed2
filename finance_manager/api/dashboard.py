"""
Dashboard API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends

from finance_manager.api.deps import get_caller_id, get_container
from finance_manager.api.errors import to_http_exception
from finance_manager.container import ApplicationContainer
from finance_manager.errors import AppError
from finance_manager.schemas.dashboard import MonthlyWalletSummary

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/users/{user_id}/monthly-summary",
    response_model=list[MonthlyWalletSummary],
)
def get_monthly_summary(
    user_id: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.dashboard.get_monthly_sum_by_user(user_id, caller_id)
    except AppError as e:
        raise to_http_exception(e)
