"""Dashboard service: monthly activity per wallet."""

import uuid

from finance_manager.errors import NotFoundError, ForbiddenError
from finance_manager.models.enums import UserRole
from finance_manager.schemas.dashboard import MonthlyWalletSummary
from finance_manager.services.common import store_errors
from finance_manager.unit_of_work import UnitOfWorkFactory


class DashboardService:

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    def get_monthly_sum_by_user(
        self, user_id: uuid.UUID, caller_user_id: uuid.UUID
    ) -> list[MonthlyWalletSummary]:
        """
        Summarise a user's active transactions by wallet and month.

        Users see their own summary; admins can see anyone's. Deleted
        transactions are left out, like they are from balances.
        """
        with store_errors(
            "DashboardService.get_monthly_sum_by_user",
            "failed to get dashboard data",
            user_id=str(user_id),
        ):
            with self.uow_factory() as uow:
                if caller_user_id != user_id:
                    caller = uow.users.get_by_id(caller_user_id)
                    if not caller or caller.role != UserRole.ADMIN:
                        raise ForbiddenError("you do not have permission")

                if not uow.users.exists(user_id):
                    raise NotFoundError("user not found")

                rows = uow.dashboard.monthly_sum_by_user(user_id)
                return [MonthlyWalletSummary.model_validate(row) for row in rows]
