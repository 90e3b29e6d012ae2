"""Debt schemas"""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.debt import DebtStatus, Priority
from app.schemas.common import PaginationMeta
from app.schemas.user import UserSummary
from app.utils.decimal_utils import to_amount


class DebtCreate(BaseModel):
    """Schema for creating a debt"""

    description: str = Field(..., min_length=3, max_length=500)
    amount: Decimal = Field(..., gt=0)
    currency: Optional[str] = Field(default="USD", max_length=3)
    creditor_id: UUID
    debtor_id: UUID
    due_date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, max_length=50)
    priority: Optional[Priority] = Priority.MEDIUM

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        """Convert amount to a 2-place Decimal"""
        return to_amount(v)


class DebtUpdate(BaseModel):
    """Partial update of a debt; only the fields sent are applied"""

    description: Optional[str] = Field(default=None, min_length=3, max_length=500)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, max_length=3)
    due_date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, max_length=50)
    priority: Optional[Priority] = None
    status: Optional[DebtStatus] = None
    is_paid: Optional[bool] = None
    paid_at: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        """Convert amount to a 2-place Decimal"""
        return to_amount(v)


class DebtFilterParams(BaseModel):
    """Filters shared by listing and exporting"""

    status: Optional[DebtStatus] = None
    is_paid: Optional[bool] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    creditor_id: Optional[UUID] = None
    debtor_id: Optional[UUID] = None
    search: Optional[str] = None


class DebtQueryParams(DebtFilterParams):
    """Query string of the debt list endpoint"""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: str = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class DebtResponse(BaseModel):
    """Complete debt response schema"""

    id: UUID
    description: str
    amount: Decimal
    currency: str
    status: DebtStatus
    is_paid: bool
    creditor_id: UUID
    debtor_id: UUID
    creditor: UserSummary
    debtor: UserSummary
    created_at: datetime
    updated_at: datetime
    due_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    category: Optional[str] = None
    priority: Priority

    model_config = ConfigDict(from_attributes=True)


class DebtListResponse(PaginationMeta):
    """Response schema for debt list"""

    items: List[DebtResponse]
