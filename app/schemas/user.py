"""User schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import PaginationMeta


class UserBase(BaseModel):
    """Base user schema"""

    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=255)


class UserCreate(UserBase):
    """Schema for creating a new user"""

    password: str = Field(..., min_length=8, max_length=72)


class UserUpdate(BaseModel):
    """Schema for updating user information"""

    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(default=None, min_length=2, max_length=255)


class UserSummary(BaseModel):
    """Minimal user projection embedded in debt responses"""

    id: UUID
    full_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserBase):
    """Schema for user response (no password)"""

    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(PaginationMeta):
    """Response schema for user list"""

    items: List[UserResponse]
