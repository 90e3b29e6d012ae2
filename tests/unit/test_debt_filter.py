"""Unit tests for debt query building"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from app.models.debt import Debt, DebtStatus, Priority
from app.repositories.debt_repository import DebtFilter, resolve_order_by
from app.schemas.debt import DebtQueryParams
from app.schemas.export import ExportFormat, ExportRequest


def compiled(clause) -> str:
    return str(clause.compile(compile_kwargs={"literal_binds": False}))


class TestDebtFilter:
    """Test filter construction"""

    def test_empty_filter_has_no_clauses(self):
        assert DebtFilter().clauses() == []

    def test_from_query_params(self):
        creditor_id = uuid4()
        params = DebtQueryParams(
            status=DebtStatus.PENDING,
            priority=Priority.HIGH,
            creditor_id=creditor_id,
            search="dinner",
            page=3,
        )

        debt_filter = DebtFilter.from_params(params)

        assert debt_filter.status == DebtStatus.PENDING
        assert debt_filter.priority == Priority.HIGH
        assert debt_filter.creditor_id == creditor_id
        assert debt_filter.search == "dinner"
        assert debt_filter.is_paid is None
        assert len(debt_filter.clauses()) == 4

    def test_is_paid_false_is_a_filter(self):
        assert len(DebtFilter(is_paid=False).clauses()) == 1

    def test_empty_strings_add_nothing(self):
        assert DebtFilter(category="", search="").clauses() == []

    def test_from_export_request_with_range(self):
        start = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=2)))
        request = ExportRequest(format=ExportFormat.CSV, category="food", start_date=start)

        debt_filter = DebtFilter.from_params(
            request, created_from=request.start_date, created_to=request.end_date
        )

        assert debt_filter.category == "food"
        assert debt_filter.created_from == start
        assert debt_filter.created_to is None
        assert len(debt_filter.clauses()) == 2

    def test_where_always_applies_visibility(self):
        sql = compiled(DebtFilter().where(uuid4()))

        assert "debts.creditor_id" in sql
        assert "debts.debtor_id" in sql
        assert " OR " in sql


class TestResolveOrderBy:
    """Test sort key handling"""

    def test_default_is_newest_first_with_tiebreak(self):
        primary, tiebreak = resolve_order_by(None, None)

        assert compiled(primary) == compiled(Debt.created_at.desc())
        assert compiled(tiebreak) == compiled(Debt.id.asc())

    def test_unknown_key_falls_back(self):
        primary, _ = resolve_order_by("hashed_password", "asc")

        assert compiled(primary) == compiled(Debt.created_at.desc())

    def test_camel_case_alias(self):
        primary, _ = resolve_order_by("dueDate", "asc")

        assert compiled(primary) == compiled(Debt.due_date.asc())

    def test_priority_uses_rank(self):
        primary, _ = resolve_order_by("priority", "desc")

        sql = compiled(primary)
        assert "CASE" in sql
        assert sql.endswith("DESC")
