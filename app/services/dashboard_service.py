"""Dashboard aggregation and caching"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.debt import Debt, DebtStatus
from app.repositories.debt_repository import DebtRepository
from app.schemas.dashboard import (ActivitySummary, CategorySummary,
                                   CountAmount, CurrencyTotal,
                                   DashboardSummary)
from app.services.cache_service import CacheService
from app.utils.datetime_utils import utcnow
from app.utils.decimal_utils import round_decimal

settings = get_settings()
logger = logging.getLogger(__name__)

DASHBOARD_CACHE_PREFIX = "dashboard_summary:"
ACTIVITY_WINDOW = timedelta(days=30)
TOP_CATEGORIES_LIMIT = 5
UNCATEGORIZED = "uncategorized"
# Totals are summed across currencies without conversion
SUMMARY_CURRENCY = "USD"


class _Bucket:
    """Running count and amount while aggregating"""

    __slots__ = ("count", "total_amount")

    def __init__(self):
        self.count = 0
        self.total_amount = Decimal("0")

    def add(self, amount: Decimal) -> None:
        self.count += 1
        self.total_amount += Decimal(amount)

    def to_count_amount(self) -> CountAmount:
        return CountAmount(count=self.count, total_amount=round_decimal(self.total_amount))

    def to_currency_total(self) -> CurrencyTotal:
        return CurrencyTotal(
            count=self.count,
            total_amount=round_decimal(self.total_amount),
            currency=SUMMARY_CURRENCY,
        )


class DashboardService:
    """Service for per-user dashboard summaries"""

    @staticmethod
    def cache_key(user_id: UUID) -> str:
        """Cache key of a user's summary"""
        return f"{DASHBOARD_CACHE_PREFIX}{user_id}"

    @staticmethod
    def calculate_summary(
        debts: Iterable[Debt], now: Optional[datetime] = None
    ) -> DashboardSummary:
        """
        Aggregate debts into a dashboard summary in a single pass.

        Args:
            debts: Every debt visible to the user
            now: Reference time for the 30-day window (defaults to now, UTC)

        Returns:
            DashboardSummary
        """
        now = now or utcnow()
        window_start = now - ACTIVITY_WINDOW

        total = _Bucket()
        pending = _Bucket()
        paid = _Bucket()
        by_status: Dict[DebtStatus, _Bucket] = {status: _Bucket() for status in DebtStatus}
        recent_new = _Bucket()
        recent_paid = _Bucket()
        overdue = _Bucket()
        by_currency: Dict[str, _Bucket] = defaultdict(_Bucket)
        by_category: Dict[str, _Bucket] = defaultdict(_Bucket)

        for debt in debts:
            amount = debt.amount
            status = DebtStatus(debt.status)

            total.add(amount)
            (paid if debt.is_paid else pending).add(amount)
            by_status[status].add(amount)

            if debt.created_at and debt.created_at >= window_start:
                recent_new.add(amount)
            if debt.paid_at and debt.paid_at >= window_start:
                recent_paid.add(amount)
            if status == DebtStatus.OVERDUE:
                overdue.add(amount)

            by_currency[debt.currency or SUMMARY_CURRENCY].add(amount)
            by_category[debt.category or UNCATEGORIZED].add(amount)

        top_categories = sorted(
            by_category.items(), key=lambda item: item[1].total_amount, reverse=True
        )[:TOP_CATEGORIES_LIMIT]

        return DashboardSummary(
            total_debts=total.to_currency_total(),
            pending_debts=pending.to_currency_total(),
            paid_debts=paid.to_currency_total(),
            debts_by_status={
                status: bucket.to_count_amount() for status, bucket in by_status.items()
            },
            last_30_days_activity=ActivitySummary(
                new_debts=recent_new.to_count_amount(),
                paid_debts=recent_paid.to_count_amount(),
                overdue_debts=overdue.to_count_amount(),
            ),
            debts_by_currency={
                currency: bucket.to_count_amount()
                for currency, bucket in by_currency.items()
            },
            top_categories=[
                CategorySummary(
                    category=category,
                    count=bucket.count,
                    total_amount=round_decimal(bucket.total_amount),
                )
                for category, bucket in top_categories
            ],
            generated_at=now,
        )

    @staticmethod
    async def get_dashboard_summary(
        user_id: UUID, db: AsyncSession, use_cache: bool = True
    ) -> DashboardSummary:
        """
        Get the dashboard summary for a user.

        Args:
            user_id: User ID
            db: Database session
            use_cache: Whether to use cache (default: True)

        Returns:
            DashboardSummary, from cache when present
        """
        cache_key = DashboardService.cache_key(user_id)

        if use_cache:
            cached_data = await CacheService.get(cache_key)
            if cached_data:
                try:
                    return DashboardSummary.model_validate_json(cached_data)
                except PydanticValidationError:
                    logger.warning("Discarding unreadable dashboard cache entry %s", cache_key)

        logger.info("Calculating dashboard summary for user %s", user_id)
        debts = await DebtRepository.get_many(db, user_id, with_users=False)
        summary = DashboardService.calculate_summary(debts)

        if use_cache:
            await CacheService.set(
                cache_key, summary.model_dump_json(), ttl=settings.dashboard_cache_ttl
            )

        return summary

    @staticmethod
    async def invalidate_all_summaries() -> int:
        """
        Drop every cached dashboard summary.

        A debt change affects both parties' summaries, so all users' entries
        are cleared rather than only the acting user's.

        Returns:
            Number of entries removed
        """
        return await CacheService.invalidate_all(DASHBOARD_CACHE_PREFIX)
