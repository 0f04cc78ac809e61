"""Worksheet (hours worked) model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from worksync.models.base import Base, TimestampMixin


class WorksheetEntry(Base, TimestampMixin):
    """Hours an employee worked on one date, not yet settled.

    Rows are deleted when a payment record settles them, so presence in
    this table means the hours are still unpaid.
    """

    __tablename__ = "worksheet_entry"

    worksheet_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_email: Mapped[str] = mapped_column(String(320), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    task: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("hours_worked >= 0", name="worksheet_entry_hours_check"),
        Index("ix_worksheet_entry_employee_email", "employee_email"),
    )

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe copy embedded in the payment record that settles this entry."""
        return {
            "worksheet_entry_id": str(self.worksheet_entry_id),
            "employee_email": self.employee_email,
            "work_date": self.work_date.isoformat(),
            "hours_worked": str(self.hours_worked),
            "task": self.task,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
