"""
Pagination and filtering schemas shared by list endpoints.
"""

import math
import uuid
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class QueryParams(BaseModel):
    """Pagination, search, filters and sorting for a list query."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: str | None = Field(default=None, max_length=255)
    sort_by: str | None = None
    sort_type: Literal["asc", "desc"] = "desc"
    filters: dict[str, str] = Field(default_factory=dict)
    # Restricts results to one owner; None means every user (admin view)
    logged_user_id: uuid.UUID | None = None
    include_deleted: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


class Page(BaseModel, Generic[T]):
    data: list[T]
    meta: PaginationMeta
