"""
Shared FastAPI dependencies.
"""

import uuid

from fastapi import Header, Query, Request

from finance_manager.container import ApplicationContainer
from finance_manager.schemas.common import QueryParams


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_caller_id(x_user_id: uuid.UUID = Header(...)) -> uuid.UUID:
    """
    Identity of the caller for ownership-checked reads.

    Authentication happens upstream; by the time a request reaches
    the ledger the gateway has put the user id in ``X-User-ID``.
    """
    return x_user_id


def get_optional_caller_id(
    x_user_id: uuid.UUID | None = Header(default=None),
) -> uuid.UUID | None:
    return x_user_id


def list_query(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None, max_length=255),
    sort_by: str | None = None,
    sort_type: str = Query(default="desc", pattern="^(asc|desc)$"),
    include_deleted: bool = False,
) -> QueryParams:
    """Pagination, search and sorting shared by every list endpoint."""
    return QueryParams(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_type=sort_type,
        include_deleted=include_deleted,
    )
