"""ORM models for the worksheet store and payment ledger."""

from worksync.models.base import Base, TimestampMixin
from worksync.models.payments import PaymentRecord, PaymentRecordEntry
from worksync.models.worksheet import WorksheetEntry

__all__ = [
    "Base",
    "TimestampMixin",
    "PaymentRecord",
    "PaymentRecordEntry",
    "WorksheetEntry",
]
