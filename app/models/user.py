"""User model"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.datetime_utils import utcnow


class User(Base):
    """User model for authentication and identification"""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    refresh_token = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships (settled debts go with the user; unpaid ones block deletion)
    debts_as_creditor = relationship(
        "Debt", back_populates="creditor", foreign_keys="Debt.creditor_id", cascade="all"
    )
    debts_as_debtor = relationship(
        "Debt", back_populates="debtor", foreign_keys="Debt.debtor_id", cascade="all"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
