"""SQLAlchemy models"""
from app.models.user import User
from app.models.debt import Debt, DebtStatus, Priority

__all__ = ["User", "Debt", "DebtStatus", "Priority"]
