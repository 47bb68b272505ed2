"""
User API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends

from finance_manager.api.deps import get_container
from finance_manager.api.errors import to_http_exception
from finance_manager.container import ApplicationContainer
from finance_manager.errors import AppError
from finance_manager.schemas.user import UserCreate, UserView

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserView, status_code=201)
def create_user(
    request: UserCreate,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.users.create_user(request)
    except AppError as e:
        raise to_http_exception(e)


@router.get("/{user_id}", response_model=UserView)
def get_user(
    user_id: uuid.UUID,
    container: ApplicationContainer = Depends(get_container),
):
    try:
        return container.users.get_user(user_id)
    except AppError as e:
        raise to_http_exception(e)
