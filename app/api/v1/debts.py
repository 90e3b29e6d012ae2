"""Debt endpoints"""
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.background import BackgroundTask

from app.database import get_db
from app.schemas.dashboard import DashboardSummary
from app.schemas.debt import (
    DebtCreate,
    DebtUpdate,
    DebtResponse,
    DebtListResponse,
    DebtQueryParams
)
from app.schemas.export import ExportRequest, ExportStats
from app.services.debt_service import DebtService
from app.services.export_service import ExportService
from app.api.deps import get_current_user
from app.models.user import User
from app.core.exceptions import (
    AppException,
    NotFoundError,
    AuthorizationError,
    InvalidStateError
)

router = APIRouter(prefix="/debts", tags=["Debts"])


def _to_http(e: AppException) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=DebtResponse, status_code=status.HTTP_201_CREATED)
async def create_debt(
    debt_data: DebtCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a debt owed to the current user.

    Args:
        debt_data: Debt creation data
        current_user: Current authenticated user (must be the creditor)
        db: Database session

    Returns:
        Created debt with creditor and debtor

    Raises:
        400: If creditor and debtor are the same user
        403: If the current user is not the creditor
        404: If creditor or debtor doesn't exist
    """
    try:
        debt = await DebtService.create_debt(debt_data, current_user.id, db)
        return DebtResponse.model_validate(debt)
    except (InvalidStateError, AuthorizationError, NotFoundError) as e:
        raise _to_http(e)


@router.get("", response_model=DebtListResponse)
async def list_debts(
    query: Annotated[DebtQueryParams, Query()],
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List debts where the current user is creditor or debtor.

    Supports filters (status, is_paid, priority, category, creditor_id,
    debtor_id, search), sorting (created_at, amount, due_date, priority)
    and pagination.

    Returns:
        Paginated list of debts with metadata
    """
    return await DebtService.get_all_debts(query, current_user.id, db)


@router.get("/dashboard/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get totals by status, currency and category plus 30-day activity.

    Results are cached for a few minutes and dropped whenever a debt changes.
    """
    return await DebtService.get_dashboard_summary(current_user.id, db)


@router.get("/export/stats", response_model=ExportStats)
async def get_export_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Number of exportable debts, supported filters and formats"""
    return await ExportService.get_export_stats(current_user.id, db)


@router.post("/export", response_class=FileResponse)
async def export_debts(
    export_request: ExportRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Download the current user's debts as a JSON or CSV file.

    The temporary file is removed once the response has been sent.

    Args:
        export_request: Format, filters and optional created_at range
        current_user: Current authenticated user
        db: Database session

    Returns:
        File attachment named debts_export_<date>.<format>
    """
    result = await ExportService.export_debts(export_request, current_user.id, db)
    return FileResponse(
        result.file_path,
        media_type=result.content_type,
        filename=result.filename,
        background=BackgroundTask(ExportService.cleanup_temp_file, result.file_path),
    )


@router.get("/{debt_id}", response_model=DebtResponse)
async def get_debt(
    debt_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a single debt.

    Raises:
        404: If debt not found
        403: If the current user is neither creditor nor debtor
    """
    try:
        debt = await DebtService.get_debt_by_id(debt_id, current_user.id, db)
        return DebtResponse.model_validate(debt)
    except (NotFoundError, AuthorizationError) as e:
        raise _to_http(e)


@router.put("/{debt_id}", response_model=DebtResponse)
async def update_debt(
    debt_id: UUID,
    debt_data: DebtUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a debt.

    Only the creditor can update it; amount and description of a paid debt
    are frozen.

    Raises:
        400: If a frozen field of a paid debt is changed
        403: If the current user is not the creditor
        404: If debt not found
    """
    try:
        debt = await DebtService.update_debt(debt_id, debt_data, current_user.id, db)
        return DebtResponse.model_validate(debt)
    except (InvalidStateError, AuthorizationError, NotFoundError) as e:
        raise _to_http(e)


@router.put("/{debt_id}/mark-as-paid", response_model=DebtResponse)
async def mark_debt_as_paid(
    debt_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Mark a debt as paid (creditor only).

    Raises:
        400: If the debt is already paid
        403: If the current user is not the creditor
        404: If debt not found
    """
    try:
        debt = await DebtService.mark_as_paid(debt_id, current_user.id, db)
        return DebtResponse.model_validate(debt)
    except (InvalidStateError, AuthorizationError, NotFoundError) as e:
        raise _to_http(e)


@router.delete("/{debt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_debt(
    debt_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete an unpaid debt (creditor only).

    Returns:
        No content (204)

    Raises:
        400: If the debt is paid
        403: If the current user is not the creditor
        404: If debt not found
    """
    try:
        await DebtService.delete_debt(debt_id, current_user.id, db)
        return None
    except (InvalidStateError, AuthorizationError, NotFoundError) as e:
        raise _to_http(e)
