"""Debt export to downloadable files"""
import csv
import json
import logging
import os
import tempfile
from datetime import date
from typing import List, Sequence
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.debt import Debt
from app.repositories.debt_repository import DebtFilter, DebtRepository
from app.schemas.debt import DebtResponse
from app.schemas.export import (ExportFormat, ExportRequest, ExportResult,
                                ExportStats)
from app.utils.datetime_utils import isoformat_or_empty, utcnow

settings = get_settings()
logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "ID",
    "Description",
    "Amount",
    "Currency",
    "Status",
    "Is Paid",
    "Creditor ID",
    "Creditor Name",
    "Creditor Email",
    "Debtor ID",
    "Debtor Name",
    "Debtor Email",
    "Created At",
    "Updated At",
    "Due Date",
    "Paid At",
    "Notes",
    "Category",
    "Priority",
]

AVAILABLE_FILTERS = [
    "status",
    "priority",
    "category",
    "search",
    "creditor_id",
    "debtor_id",
    "is_paid",
    "start_date",
    "end_date",
]

CONTENT_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
}


def _export_filename(export_format: ExportFormat, day: date) -> str:
    return f"debts_export_{day.isoformat()}.{export_format.value}"


def _csv_row(debt: Debt) -> List[str]:
    return [
        str(debt.id),
        debt.description,
        str(debt.amount),
        debt.currency,
        debt.status.value,
        str(debt.is_paid).lower(),
        str(debt.creditor_id),
        debt.creditor.full_name,
        debt.creditor.email,
        str(debt.debtor_id),
        debt.debtor.full_name,
        debt.debtor.email,
        isoformat_or_empty(debt.created_at),
        isoformat_or_empty(debt.updated_at),
        isoformat_or_empty(debt.due_date),
        isoformat_or_empty(debt.paid_at),
        debt.notes or "",
        debt.category or "",
        debt.priority.value,
    ]


class ExportService:
    """Service for exporting debts to JSON or CSV files"""

    @staticmethod
    def _open_temp_file(export_format: ExportFormat, day: date):
        """Create a uniquely named file in the export directory"""
        directory = settings.export_dir or tempfile.gettempdir()
        os.makedirs(directory, exist_ok=True)
        fd, file_path = tempfile.mkstemp(
            prefix=f"debts_export_{day.isoformat()}_",
            suffix=f".{export_format.value}",
            dir=directory,
        )
        return fd, file_path

    @staticmethod
    async def export_debts(
        export_request: ExportRequest,
        user_id: UUID,
        db: AsyncSession
    ) -> ExportResult:
        """
        Write the user's matching debts to a temporary file.

        Args:
            export_request: Format, filters and created_at range
            user_id: User ID (creditor or debtor of every exported debt)
            db: Database session

        Returns:
            ExportResult with the file path, download filename and content type
        """
        logger.info(
            "Exporting debts for user %s in format %s",
            user_id,
            export_request.format.value,
        )

        debt_filter = DebtFilter.from_params(
            export_request,
            created_from=export_request.start_date,
            created_to=export_request.end_date,
        )
        debts = await DebtRepository.get_many(db, user_id, debt_filter=debt_filter)

        # Blocking file IO stays off the event loop
        if export_request.format == ExportFormat.CSV:
            result = await run_in_threadpool(ExportService._export_to_csv, debts)
        else:
            result = await run_in_threadpool(ExportService._export_to_json, debts)

        logger.info("Exported %d debts to %s", len(debts), result.file_path)
        return result

    @staticmethod
    def _export_to_json(debts: Sequence[Debt]) -> ExportResult:
        now = utcnow()
        export_data = {
            "export_date": now.isoformat(),
            "total_debts": len(debts),
            "debts": [
                DebtResponse.model_validate(debt).model_dump(mode="json")
                for debt in debts
            ],
        }

        fd, file_path = ExportService._open_temp_file(ExportFormat.JSON, now.date())
        with os.fdopen(fd, "w", encoding="utf-8") as export_file:
            json.dump(export_data, export_file, indent=2)

        return ExportResult(
            file_path=file_path,
            filename=_export_filename(ExportFormat.JSON, now.date()),
            content_type=CONTENT_TYPES[ExportFormat.JSON],
        )

    @staticmethod
    def _export_to_csv(debts: Sequence[Debt]) -> ExportResult:
        today = utcnow().date()

        fd, file_path = ExportService._open_temp_file(ExportFormat.CSV, today)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as export_file:
            writer = csv.writer(export_file)
            writer.writerow(CSV_HEADERS)
            writer.writerows(_csv_row(debt) for debt in debts)

        return ExportResult(
            file_path=file_path,
            filename=_export_filename(ExportFormat.CSV, today),
            content_type=CONTENT_TYPES[ExportFormat.CSV],
        )

    @staticmethod
    def cleanup_temp_file(file_path: str) -> None:
        """
        Remove an export file once it has been sent.

        Args:
            file_path: Path returned in ExportResult
        """
        try:
            os.remove(file_path)
            logger.info("Cleaned up export file %s", file_path)
        except FileNotFoundError:
            logger.warning("Export file %s was already removed", file_path)
        except OSError:
            logger.exception("Failed to clean up export file %s", file_path)

    @staticmethod
    async def get_export_stats(user_id: UUID, db: AsyncSession) -> ExportStats:
        """
        Describe what the user can export.

        Args:
            user_id: User ID
            db: Database session

        Returns:
            ExportStats with the visible debt count, filters and formats
        """
        total = await DebtRepository.count(db, user_id)
        return ExportStats(
            total_debts=total,
            available_filters=list(AVAILABLE_FILTERS),
            supported_formats=[export_format.value for export_format in ExportFormat],
        )
