"""Debt business logic"""
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (AuthorizationError, InvalidStateError,
                                 NotFoundError)
from app.models.debt import Debt, DebtStatus, Priority
from app.repositories.debt_repository import (DebtFilter, DebtRepository,
                                              resolve_order_by)
from app.repositories.user_repository import UserRepository
from app.schemas.common import count_pages
from app.schemas.dashboard import DashboardSummary
from app.schemas.debt import (DebtCreate, DebtListResponse, DebtQueryParams,
                              DebtResponse, DebtUpdate)
from app.services.dashboard_service import DashboardService
from app.utils.datetime_utils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"
PAID_IMMUTABLE_FIELDS = ("amount", "description")
REQUIRED_FIELDS = ("description", "amount", "currency", "priority", "status", "is_paid")


class DebtService:
    """Service for debt operations"""

    @staticmethod
    async def _get_existing(db: AsyncSession, debt_id: UUID) -> Debt:
        debt = await DebtRepository.get_with_users(db, debt_id)
        if not debt:
            raise NotFoundError("Debt not found")
        return debt

    @staticmethod
    def _require_creditor(debt: Debt, user_id: UUID, message: str) -> None:
        if debt.creditor_id != user_id:
            logger.warning("User %s refused on debt %s: %s", user_id, debt.id, message)
            raise AuthorizationError(message)

    @staticmethod
    async def create_debt(
        debt_data: DebtCreate,
        user_id: UUID,
        db: AsyncSession
    ) -> Debt:
        """
        Create a new debt owed to the acting user.

        Args:
            debt_data: Debt creation data
            user_id: ID of user creating the debt
            db: Database session

        Returns:
            Created debt with creditor and debtor loaded

        Raises:
            InvalidStateError: If creditor and debtor are the same user
            AuthorizationError: If the acting user is not the creditor
            NotFoundError: If creditor or debtor doesn't exist
        """
        logger.info("Creating debt '%s' for user %s", debt_data.description, user_id)

        if debt_data.creditor_id == debt_data.debtor_id:
            raise InvalidStateError("Creditor and debtor cannot be the same person")

        if debt_data.creditor_id != user_id:
            raise AuthorizationError("You can only create debts where you are the creditor")

        creditor = await UserRepository.get_by_id(db, debt_data.creditor_id)
        debtor = await UserRepository.get_by_id(db, debt_data.debtor_id)
        if not creditor or not debtor:
            raise NotFoundError("Creditor or debtor not found")

        debt = Debt(
            description=debt_data.description,
            amount=debt_data.amount,
            currency=debt_data.currency or DEFAULT_CURRENCY,
            creditor_id=debt_data.creditor_id,
            debtor_id=debt_data.debtor_id,
            due_date=to_naive_utc(debt_data.due_date),
            notes=debt_data.notes,
            category=debt_data.category,
            priority=debt_data.priority or Priority.MEDIUM,
            status=DebtStatus.PENDING,
            is_paid=False,
        )

        created_debt = await DebtRepository.create(db, debt)
        await db.commit()

        await DashboardService.invalidate_all_summaries()

        logger.info("Debt created successfully: %s", created_debt.id)
        return await DebtRepository.get_with_users(db, created_debt.id)

    @staticmethod
    async def get_all_debts(
        query: DebtQueryParams,
        user_id: UUID,
        db: AsyncSession
    ) -> DebtListResponse:
        """
        Get debts visible to a user with filters, sorting and pagination.

        Args:
            query: Filters, page, limit and sort options
            user_id: User ID (creditor or debtor of every returned debt)
            db: Database session

        Returns:
            Page of debts with total count and page metadata
        """
        logger.info("Listing debts for user %s with %s", user_id, query.model_dump(exclude_none=True))

        skip = (query.page - 1) * query.limit
        debt_filter = DebtFilter.from_params(query)

        debts = await DebtRepository.get_many(
            db,
            user_id,
            debt_filter=debt_filter,
            order_by=resolve_order_by(query.sort_by, query.sort_order),
            skip=skip,
            limit=query.limit,
        )
        total = await DebtRepository.count(db, user_id, debt_filter)

        return DebtListResponse(
            items=[DebtResponse.model_validate(debt) for debt in debts],
            total=total,
            page=query.page,
            limit=query.limit,
            total_pages=count_pages(total, query.limit),
        )

    @staticmethod
    async def get_debt_by_id(
        debt_id: UUID,
        user_id: UUID,
        db: AsyncSession
    ) -> Debt:
        """
        Get a debt the user is party to.

        Args:
            debt_id: Debt ID
            user_id: User ID requesting the debt
            db: Database session

        Returns:
            Debt with creditor and debtor loaded

        Raises:
            NotFoundError: If debt not found
            AuthorizationError: If user is neither creditor nor debtor
        """
        debt = await DebtService._get_existing(db, debt_id)

        if user_id not in (debt.creditor_id, debt.debtor_id):
            raise AuthorizationError("You do not have access to this debt")

        return debt

    @staticmethod
    async def update_debt(
        debt_id: UUID,
        debt_data: DebtUpdate,
        user_id: UUID,
        db: AsyncSession
    ) -> Debt:
        """
        Update a debt (creditor only).

        Args:
            debt_id: Debt ID
            debt_data: Fields to change
            user_id: User ID making the update
            db: Database session

        Returns:
            Updated debt

        Raises:
            NotFoundError: If debt not found
            AuthorizationError: If user is not the creditor
            InvalidStateError: If amount or description of a paid debt would change
        """
        logger.info("Updating debt %s for user %s", debt_id, user_id)
        debt = await DebtService._get_existing(db, debt_id)
        DebtService._require_creditor(debt, user_id, "Only the creditor can modify this debt")

        changes = {
            field: value
            for field, value in debt_data.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }

        if debt.is_paid and any(field in changes for field in PAID_IMMUTABLE_FIELDS):
            raise InvalidStateError("Cannot modify paid debts")

        if changes.get("status") == DebtStatus.PAID and not debt.is_paid:
            changes["is_paid"] = True
            changes["paid_at"] = utcnow()

        for field in ("due_date", "paid_at"):
            if field in changes:
                changes[field] = to_naive_utc(changes[field])

        await DebtRepository.update(db, debt, changes)
        await db.commit()

        await DashboardService.invalidate_all_summaries()

        logger.info("Debt updated successfully: %s", debt_id)
        return await DebtRepository.get_with_users(db, debt_id)

    @staticmethod
    async def mark_as_paid(
        debt_id: UUID,
        user_id: UUID,
        db: AsyncSession
    ) -> Debt:
        """
        Mark a debt as paid (creditor only).

        Args:
            debt_id: Debt ID
            user_id: User ID making the change
            db: Database session

        Returns:
            Updated debt

        Raises:
            NotFoundError: If debt not found
            AuthorizationError: If user is not the creditor
            InvalidStateError: If the debt is already paid
        """
        logger.info("Marking debt %s as paid for user %s", debt_id, user_id)
        debt = await DebtService._get_existing(db, debt_id)
        DebtService._require_creditor(debt, user_id, "Only the creditor can mark this debt as paid")

        if debt.is_paid:
            raise InvalidStateError("Debt is already marked as paid")

        await DebtRepository.update(
            db,
            debt,
            {"is_paid": True, "status": DebtStatus.PAID, "paid_at": utcnow()},
        )
        await db.commit()

        await DashboardService.invalidate_all_summaries()

        logger.info("Debt marked as paid: %s", debt_id)
        return await DebtRepository.get_with_users(db, debt_id)

    @staticmethod
    async def delete_debt(
        debt_id: UUID,
        user_id: UUID,
        db: AsyncSession
    ) -> bool:
        """
        Delete an unpaid debt (creditor only).

        Args:
            debt_id: Debt ID
            user_id: User ID making the deletion
            db: Database session

        Returns:
            True if deleted

        Raises:
            NotFoundError: If debt not found
            AuthorizationError: If user is not the creditor
            InvalidStateError: If the debt is paid
        """
        logger.info("Deleting debt %s for user %s", debt_id, user_id)
        debt = await DebtRepository.get_by_id(db, debt_id)

        if not debt:
            raise NotFoundError("Debt not found")

        DebtService._require_creditor(debt, user_id, "Only the creditor can delete this debt")

        if debt.is_paid:
            raise InvalidStateError("Cannot delete paid debts")

        await DebtRepository.delete(db, debt)
        await db.commit()

        await DashboardService.invalidate_all_summaries()

        logger.info("Debt deleted successfully: %s", debt_id)
        return True

    @staticmethod
    async def get_dashboard_summary(user_id: UUID, db: AsyncSession) -> DashboardSummary:
        """Dashboard summary over every debt the user is party to"""
        return await DashboardService.get_dashboard_summary(user_id, db)
