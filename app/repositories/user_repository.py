"""User data access"""
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.debt import Debt
from app.models.user import User


class UserRepository:
    """Repository for User database operations"""

    @staticmethod
    async def create(db: AsyncSession, user: User) -> User:
        """
        Create a new user.

        Args:
            db: Database session
            user: User object to create

        Returns:
            Created user
        """
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            User if found, None otherwise
        """
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """
        Get user by email.

        Args:
            db: Database session
            email: User email

        Returns:
            User if found, None otherwise
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def check_email_exists(db: AsyncSession, email: str) -> bool:
        """
        Check if email already exists.

        Args:
            db: Database session
            email: Email to check

        Returns:
            True if exists, False otherwise
        """
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    def _search_clause(search: str):
        search_pattern = f"%{search}%"
        return or_(
            User.full_name.ilike(search_pattern),
            User.email.ilike(search_pattern),
        )

    @staticmethod
    async def get_all(
        db: AsyncSession, skip: int = 0, limit: int = 10, search: Optional[str] = None
    ) -> list[User]:
        """
        Get all users with pagination and optional search.

        Args:
            db: Database session
            skip: Number of records to skip
            limit: Maximum number of records to return
            search: Optional search term for name or email

        Returns:
            List of users, newest first
        """
        query = select(User)

        if search:
            query = query.where(UserRepository._search_clause(search))

        query = query.order_by(User.created_at.desc(), User.id).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(db: AsyncSession, search: Optional[str] = None) -> int:
        """
        Count total users with optional search filter.

        Args:
            db: Database session
            search: Optional search term

        Returns:
            Total count of users
        """
        query = select(func.count(User.id))

        if search:
            query = query.where(UserRepository._search_clause(search))

        result = await db.execute(query)
        return result.scalar_one()

    @staticmethod
    async def update(db: AsyncSession, user: User, data: Dict[str, Any]) -> User:
        """
        Apply field changes to a user.

        Args:
            db: Database session
            user: Loaded user
            data: Column name to new value

        Returns:
            Updated user
        """
        for field, value in data.items():
            setattr(user, field, value)
        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def delete(db: AsyncSession, user: User) -> None:
        """Delete a loaded user"""
        await db.delete(user)
        await db.flush()

    @staticmethod
    async def has_unpaid_debts(db: AsyncSession, user_id: UUID) -> bool:
        """
        Check whether the user is creditor or debtor of any unpaid debt.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            True if at least one unpaid debt references the user
        """
        result = await db.execute(
            select(func.count(Debt.id)).where(
                Debt.is_paid.is_(False),
                or_(Debt.creditor_id == user_id, Debt.debtor_id == user_id),
            )
        )
        return result.scalar_one() > 0
