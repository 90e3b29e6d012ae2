"""Debt data access"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.debt import Debt, DebtStatus, Priority
from app.utils.datetime_utils import to_naive_utc

PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.URGENT: 3,
}

# Accepted sort keys, camelCase spellings kept for older clients
SORTABLE_COLUMNS = {
    "created_at": Debt.created_at,
    "createdAt": Debt.created_at,
    "amount": Debt.amount,
    "due_date": Debt.due_date,
    "dueDate": Debt.due_date,
    "priority": case(
        *[(Debt.priority == priority, rank) for priority, rank in PRIORITY_RANK.items()],
        else_=len(PRIORITY_RANK),
    ),
}


def visible_to(user_id: UUID):
    """Clause matching debts where the user is creditor or debtor"""
    return or_(Debt.creditor_id == user_id, Debt.debtor_id == user_id)


@dataclass
class DebtFilter:
    """
    Recognized debt filters, AND-combined.

    Unset (None) fields add no condition. Build one from any schema carrying
    the same field names with `DebtFilter.from_params`.
    """

    status: Optional[DebtStatus] = None
    is_paid: Optional[bool] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    creditor_id: Optional[UUID] = None
    debtor_id: Optional[UUID] = None
    search: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None

    @classmethod
    def from_params(cls, params: Any, **overrides: Any) -> "DebtFilter":
        """
        Copy matching attributes from a request schema.

        Args:
            params: Object with some of the filter attribute names
            **overrides: Values that take precedence over `params`

        Returns:
            DebtFilter instance
        """
        values = {
            f.name: getattr(params, f.name)
            for f in fields(cls)
            if hasattr(params, f.name)
        }
        values.update(overrides)
        return cls(**values)

    def clauses(self) -> List[Any]:
        """SQLAlchemy conditions for every field that is set"""
        conditions = []
        if self.status is not None:
            conditions.append(Debt.status == self.status)
        if self.is_paid is not None:
            conditions.append(Debt.is_paid.is_(self.is_paid))
        if self.priority is not None:
            conditions.append(Debt.priority == self.priority)
        if self.category:
            conditions.append(Debt.category == self.category)
        if self.creditor_id is not None:
            conditions.append(Debt.creditor_id == self.creditor_id)
        if self.debtor_id is not None:
            conditions.append(Debt.debtor_id == self.debtor_id)
        if self.search:
            conditions.append(Debt.description.ilike(f"%{self.search}%"))
        if self.created_from is not None:
            conditions.append(Debt.created_at >= to_naive_utc(self.created_from))
        if self.created_to is not None:
            conditions.append(Debt.created_at <= to_naive_utc(self.created_to))
        return conditions

    def where(self, user_id: UUID):
        """Visibility rule for `user_id` combined with the filters"""
        return and_(visible_to(user_id), *self.clauses())


def _with_users(query):
    return query.options(selectinload(Debt.creditor), selectinload(Debt.debtor))


def resolve_order_by(sort_by: Optional[str], sort_order: Optional[str]) -> List[Any]:
    """
    Build ORDER BY terms for a listing.

    Unknown sort keys fall back to created_at descending. Debt id is appended
    as a tie-breaker so pages don't overlap.
    """
    column = SORTABLE_COLUMNS.get(sort_by or "")
    if column is None:
        primary = Debt.created_at.desc()
    elif sort_order == "asc":
        primary = column.asc()
    else:
        primary = column.desc()
    return [primary, Debt.id.asc()]


class DebtRepository:
    """Repository for Debt database operations"""

    @staticmethod
    async def create(db: AsyncSession, debt: Debt) -> Debt:
        """
        Create a new debt.

        Args:
            db: Database session
            debt: Debt object to create

        Returns:
            Created debt
        """
        db.add(debt)
        await db.flush()
        await db.refresh(debt)
        return debt

    @staticmethod
    async def get_by_id(db: AsyncSession, debt_id: UUID) -> Optional[Debt]:
        """
        Get debt by ID.

        Args:
            db: Database session
            debt_id: Debt UUID

        Returns:
            Debt if found, None otherwise
        """
        result = await db.execute(select(Debt).where(Debt.id == debt_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_with_users(db: AsyncSession, debt_id: UUID) -> Optional[Debt]:
        """
        Get debt with creditor and debtor eagerly loaded.

        Args:
            db: Database session
            debt_id: Debt UUID

        Returns:
            Debt with users if found, None otherwise
        """
        result = await db.execute(
            _with_users(select(Debt).where(Debt.id == debt_id)).execution_options(
                populate_existing=True
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_many(
        db: AsyncSession,
        user_id: UUID,
        debt_filter: Optional[DebtFilter] = None,
        order_by: Optional[List[Any]] = None,
        skip: Optional[int] = None,
        limit: Optional[int] = None,
        with_users: bool = True,
    ) -> List[Debt]:
        """
        Get debts visible to a user.

        Args:
            db: Database session
            user_id: User UUID (creditor or debtor)
            debt_filter: Optional filters
            order_by: ORDER BY terms, newest first when omitted
            skip: Number of records to skip
            limit: Maximum number of records to return
            with_users: Eager load creditor and debtor

        Returns:
            List of debts
        """
        debt_filter = debt_filter or DebtFilter()
        query = select(Debt).where(debt_filter.where(user_id))
        query = query.order_by(*(order_by or resolve_order_by(None, None)))

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        if with_users:
            query = _with_users(query)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(
        db: AsyncSession, user_id: UUID, debt_filter: Optional[DebtFilter] = None
    ) -> int:
        """
        Count debts visible to a user with filters.

        Args:
            db: Database session
            user_id: User UUID
            debt_filter: Optional filters

        Returns:
            Total count of debts
        """
        debt_filter = debt_filter or DebtFilter()
        result = await db.execute(
            select(func.count(Debt.id)).where(debt_filter.where(user_id))
        )
        return result.scalar_one()

    @staticmethod
    async def update(db: AsyncSession, debt: Debt, data: Dict[str, Any]) -> Debt:
        """
        Apply field changes to a debt.

        Args:
            db: Database session
            debt: Loaded debt
            data: Column name to new value

        Returns:
            Updated debt
        """
        for field, value in data.items():
            setattr(debt, field, value)
        await db.flush()
        return debt

    @staticmethod
    async def delete(db: AsyncSession, debt: Debt) -> None:
        """Delete a loaded debt"""
        await db.delete(debt)
        await db.flush()
