"""Dashboard summary schemas"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel

from app.models.debt import DebtStatus


class CountAmount(BaseModel):
    """Number of debts and their summed amount"""
    count: int = 0
    total_amount: Decimal = Decimal("0")


class CurrencyTotal(CountAmount):
    """Count and amount labelled with a currency"""
    currency: str = "USD"


class ActivitySummary(BaseModel):
    """Debt activity over the trailing 30 days"""
    new_debts: CountAmount
    paid_debts: CountAmount
    overdue_debts: CountAmount


class CategorySummary(CountAmount):
    """Totals for one category"""
    category: str


class DashboardSummary(BaseModel):
    """Aggregated debt statistics for one user"""
    total_debts: CurrencyTotal
    pending_debts: CurrencyTotal
    paid_debts: CurrencyTotal
    debts_by_status: Dict[DebtStatus, CountAmount]
    last_30_days_activity: ActivitySummary
    debts_by_currency: Dict[str, CountAmount]
    top_categories: List[CategorySummary]
    generated_at: datetime
