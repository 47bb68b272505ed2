"""User store."""

import uuid
from typing import Protocol

from sqlalchemy import select

from finance_manager.models.user import User
from finance_manager.repositories.base import SqlRepository


class UserRepository(Protocol):
    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        ...

    def get_by_email(self, email: str) -> User | None:
        ...

    def exists(self, user_id: uuid.UUID) -> bool:
        ...

    def create(self, user: User) -> User:
        ...


class SqlUserRepository(SqlRepository[User]):

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.session.execute(
            select(User).where(User.id == user_id, User.is_active)
        ).scalar_one_or_none()

    def get_by_email(self, email: str) -> User | None:
        return self.session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def exists(self, user_id: uuid.UUID) -> bool:
        return self.get_by_id(user_id) is not None

    def create(self, user: User) -> User:
        return self.add(user)
