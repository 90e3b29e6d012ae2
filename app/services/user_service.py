"""User business logic"""
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from app.core.security import hash_password
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import UserCreate, UserUpdate
from app.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations"""

    @staticmethod
    async def create_user(user_data: UserCreate, db: AsyncSession) -> User:
        """
        Create a new user with a hashed password.

        Args:
            user_data: User registration data
            db: Database session

        Returns:
            Created user

        Raises:
            ConflictError: If email already exists
        """
        logger.info("Creating user with email %s", user_data.email)

        if await UserRepository.check_email_exists(db, user_data.email):
            logger.warning("User with email %s already exists", user_data.email)
            raise ConflictError("User with this email already exists")

        new_user = User(
            email=user_data.email,
            hashed_password=hash_password(user_data.password),
            full_name=user_data.full_name,
            is_active=True
        )

        created_user = await UserRepository.create(db, new_user)
        await db.commit()

        logger.info("User created successfully with ID %s", created_user.id)
        return created_user

    @staticmethod
    async def list_users(
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None
    ) -> Tuple[List[User], int]:
        """
        Get list of users with pagination and search.

        Args:
            db: Database session
            page: Page number (1-indexed)
            limit: Items per page
            search: Optional search query (searches email and full_name)

        Returns:
            Tuple of (users list, total count)
        """
        skip = (page - 1) * limit

        users = await UserRepository.get_all(db, skip=skip, limit=limit, search=search)
        total_count = await UserRepository.count(db, search=search)

        return users, total_count

    @staticmethod
    async def get_user_by_id(
        db: AsyncSession,
        user_id: UUID
    ) -> User:
        """
        Get user by ID.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            User object

        Raises:
            NotFoundError: If user not found
        """
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """Look up a user by email, None when unknown"""
        return await UserRepository.get_by_email(db, email)

    @staticmethod
    async def update_user(
        user_id: UUID,
        user_data: UserUpdate,
        db: AsyncSession
    ) -> User:
        """
        Update profile fields of a user.

        Args:
            user_id: User UUID
            user_data: Fields to change
            db: Database session

        Returns:
            Updated user

        Raises:
            NotFoundError: If user not found
            ConflictError: If the new email belongs to another user
        """
        logger.info("Updating user %s", user_id)
        user = await UserService.get_user_by_id(db, user_id)

        changes = user_data.model_dump(exclude_unset=True, exclude_none=True)

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            if await UserRepository.check_email_exists(db, new_email):
                logger.warning("Email %s is already taken", new_email)
                raise ConflictError("Email is already taken")

        updated_user = await UserRepository.update(db, user, changes)
        await db.commit()

        logger.info("User updated successfully with ID %s", user_id)
        return updated_user

    @staticmethod
    async def delete_user(user_id: UUID, db: AsyncSession) -> bool:
        """
        Delete a user that holds no unpaid debt.

        Args:
            user_id: User UUID
            db: Database session

        Returns:
            True if deleted

        Raises:
            NotFoundError: If user not found
            InvalidStateError: If the user is creditor or debtor of an unpaid debt
        """
        logger.info("Deleting user %s", user_id)
        user = await UserService.get_user_by_id(db, user_id)

        if await UserRepository.has_unpaid_debts(db, user_id):
            logger.warning("Cannot delete user %s with active debts", user_id)
            raise InvalidStateError("Cannot delete user with active debts")

        await UserRepository.delete(db, user)
        await db.commit()
        # Settled debts are removed with the user
        await DashboardService.invalidate_all_summaries()

        logger.info("User deleted successfully with ID %s", user_id)
        return True

    @staticmethod
    async def update_refresh_token(
        user_id: UUID, refresh_token: str, db: AsyncSession
    ) -> None:
        """
        Store the latest refresh token, replacing the previous one.

        Args:
            user_id: User UUID
            refresh_token: Newly issued refresh token
            db: Database session
        """
        user = await UserService.get_user_by_id(db, user_id)
        await UserRepository.update(db, user, {"refresh_token": refresh_token})
        await db.commit()

    @staticmethod
    async def remove_refresh_token(user_id: UUID, db: AsyncSession) -> None:
        """Clear the stored refresh token of a user"""
        user = await UserService.get_user_by_id(db, user_id)
        await UserRepository.update(db, user, {"refresh_token": None})
        await db.commit()
