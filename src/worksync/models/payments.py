"""Payment ledger models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from worksync.models.base import Base, TimestampMixin


class PaymentRecord(Base, TimestampMixin):
    """A payment for a batch of worksheet entries.

    ``entries`` holds snapshots of the settled worksheet entries; the
    originals no longer exist in ``worksheet_entry``.
    """

    __tablename__ = "payment_record"

    payment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_email: Mapped[str] = mapped_column(String(320), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    approver_id: Mapped[str] = mapped_column(String, nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    entries: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("amount > 0", name="payment_record_amount_check"),
        CheckConstraint(
            "status IN ('pending', 'paid')",
            name="payment_record_status_check",
        ),
        Index("ix_payment_record_employee_email", "employee_email"),
        Index("ix_payment_record_status", "status"),
    )

    # Relationships
    settled_entries: Mapped[list[PaymentRecordEntry]] = relationship(
        back_populates="payment",
        cascade="all, delete-orphan",
    )

    @property
    def entry_ids(self) -> list[str]:
        """Worksheet entry ids settled by this record."""
        return [snap["worksheet_entry_id"] for snap in self.entries]


class PaymentRecordEntry(Base):
    """Link from a payment record to one worksheet entry it settled.

    The unique constraint on ``worksheet_entry_id`` means a worksheet
    entry can be settled by at most one payment record, across every
    writer of the store.
    """

    __tablename__ = "payment_record_entry"

    payment_record_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payment_id: Mapped[UUID] = mapped_column(
        ForeignKey("payment_record.payment_id", ondelete="CASCADE"),
        nullable=False,
    )
    worksheet_entry_id: Mapped[UUID] = mapped_column(nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("worksheet_entry_id", name="payment_record_entry_settled_once"),
    )

    # Relationships
    payment: Mapped[PaymentRecord] = relationship(back_populates="settled_entries")
