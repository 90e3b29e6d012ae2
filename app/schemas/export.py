"""Export schemas"""
import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, model_validator

from app.schemas.debt import DebtFilterParams
from app.utils.datetime_utils import to_naive_utc


class ExportFormat(str, enum.Enum):
    """Supported export file formats"""
    JSON = "json"
    CSV = "csv"


class ExportRequest(DebtFilterParams):
    """Body of the export endpoint"""
    format: ExportFormat
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_date_range(self):
        """Reject a range that ends before it starts"""
        if (
            self.start_date
            and self.end_date
            and to_naive_utc(self.start_date) > to_naive_utc(self.end_date)
        ):
            raise ValueError("start_date must be before end_date")
        return self


class ExportResult(BaseModel):
    """Location and metadata of a written export file"""
    file_path: str
    filename: str
    content_type: str


class ExportStats(BaseModel):
    """What can be exported for the current user"""
    total_debts: int
    available_filters: List[str]
    supported_formats: List[str]
