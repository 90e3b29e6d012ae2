"""Debt model"""
import enum
import uuid

from sqlalchemy import (CheckConstraint, Column, DateTime, Enum, ForeignKey,
                        Numeric, String, Boolean, Uuid)
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.datetime_utils import utcnow


class DebtStatus(str, enum.Enum):
    """Lifecycle status of a debt"""
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class Priority(str, enum.Enum):
    """Debt priority, ordered from lowest to highest"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Debt(Base):
    """Money owed by a debtor to a creditor"""

    __tablename__ = "debts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    status = Column(Enum(DebtStatus), default=DebtStatus.PENDING, nullable=False, index=True)
    is_paid = Column(Boolean, default=False, nullable=False, index=True)
    creditor_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    debtor_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    due_date = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    notes = Column(String(1000), nullable=True)
    category = Column(String(50), nullable=True, index=True)
    priority = Column(Enum(Priority), default=Priority.MEDIUM, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Constraints
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_debt_amount_positive'),
        CheckConstraint('creditor_id <> debtor_id', name='check_debt_not_self'),
    )

    # Relationships
    creditor = relationship("User", back_populates="debts_as_creditor", foreign_keys=[creditor_id])
    debtor = relationship("User", back_populates="debts_as_debtor", foreign_keys=[debtor_id])

    def __repr__(self) -> str:
        return f"<Debt(id={self.id}, description={self.description}, amount={self.amount}, status={self.status})>"
