"""
Pydantic schemas for user operations.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, EmailStr

from finance_manager.models.enums import UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    role: UserRole = UserRole.USER


class UserSummary(BaseModel):
    """User embedded in transaction responses."""
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserView(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
