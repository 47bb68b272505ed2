"""User service. Users only matter to the ledger as wallet owners."""

import uuid

from finance_manager.errors import NotFoundError, ConflictError
from finance_manager.models.user import User
from finance_manager.schemas.user import UserCreate, UserView
from finance_manager.services.common import store_errors
from finance_manager.unit_of_work import UnitOfWorkFactory


class UserService:

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    def create_user(self, request: UserCreate) -> UserView:
        with store_errors("UserService.create_user", "failed to create user"):
            with self.uow_factory() as uow:
                if uow.users.get_by_email(request.email):
                    raise ConflictError(
                        f"user with email '{request.email}' already exists"
                    )

                user = uow.users.create(User(
                    name=request.name,
                    email=request.email,
                    role=request.role,
                ))
                uow.commit()
                return UserView.model_validate(user)

    def get_user(self, user_id: uuid.UUID) -> UserView:
        with store_errors(
            "UserService.get_user", "failed to get user", user_id=str(user_id)
        ):
            with self.uow_factory() as uow:
                user = uow.users.get_by_id(user_id)
                if not user:
                    raise NotFoundError("user not found")
                return UserView.model_validate(user)
