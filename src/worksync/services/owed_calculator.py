"""Owed-amount calculator.

Reconciles the worksheet store against the payment ledger for one
employee. Read-only: nothing here writes to either table.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import exists, select

from worksync.config import HOURS_BASIS_ALL, HOURS_BASIS_UNPAID
from worksync.errors import NotFoundError, ValidationError
from worksync.models import PaymentRecord, WorksheetEntry
from worksync.services.state_machine import PaymentStatus
from worksync.validation import normalize_email, quantize_money

if TYPE_CHECKING:
    from worksync.database import Database

ZERO = Decimal("0")


@dataclass(frozen=True)
class OwedSnapshot:
    """Derived view of what an employee is owed. Never persisted."""

    employee_email: str
    total_owed: Decimal
    total_hours: Decimal
    total_paid: Decimal
    salary: Decimal
    has_pending_payment: bool
    unpaid_entries: tuple[WorksheetEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_email": self.employee_email,
            "total_owed": str(self.total_owed),
            "total_hours": str(self.total_hours),
            "total_paid": str(self.total_paid),
            "salary": str(self.salary),
            "has_pending_payment": self.has_pending_payment,
            "unpaid_entries": [e.snapshot() for e in self.unpaid_entries],
        }


def compute_snapshot(
    employee_email: str,
    entries: Sequence[WorksheetEntry],
    payments: Iterable[PaymentRecord],
    hourly_rate: Decimal,
    hours_basis: str = HOURS_BASIS_UNPAID,
) -> OwedSnapshot:
    """Build an OwedSnapshot from already-fetched rows.

    ``unpaid_entries`` excludes any worksheet entry already referenced by
    a paid record. Settled entries normally leave the worksheet store, so
    the only paid amounts subtracted from what was earned are those of
    records whose entries are still present in it.
    """
    payments = list(payments)
    paid_records = [p for p in payments if p.status == PaymentStatus.PAID]
    pending = any(p.status == PaymentStatus.PENDING for p in payments)

    paid_entry_ids = {eid for p in paid_records for eid in p.entry_ids}
    unpaid = tuple(e for e in entries if str(e.worksheet_entry_id) not in paid_entry_ids)

    hours_source = entries if hours_basis == HOURS_BASIS_ALL else unpaid
    total_hours = sum((e.hours_worked for e in hours_source), ZERO)

    total_paid = sum((p.amount for p in paid_records), ZERO)

    present_ids = {str(e.worksheet_entry_id) for e in entries}
    unconsumed_paid = sum(
        (p.amount for p in paid_records if present_ids.intersection(p.entry_ids)),
        ZERO,
    )

    earned = sum((e.hours_worked * hourly_rate for e in unpaid), ZERO)

    return OwedSnapshot(
        employee_email=employee_email,
        total_owed=quantize_money(earned - unconsumed_paid),
        total_hours=total_hours,
        total_paid=quantize_money(total_paid),
        salary=quantize_money(_latest_salary(paid_records)),
        has_pending_payment=pending,
        unpaid_entries=unpaid,
    )


def _latest_salary(paid_records: list[PaymentRecord]) -> Decimal:
    if not paid_records:
        return ZERO
    # Records without paid_at (written before it was stamped) sort first
    latest = max(
        paid_records,
        key=lambda p: (p.paid_at is not None, p.paid_at or datetime.min, p.payment_date),
    )
    return latest.amount


class OwedCalculator:
    """Computes OwedSnapshots against a Database.

    Constraints:
    - Read-only
    - An employee with no rows yields a zeroed snapshot, never NotFoundError
    """

    def __init__(
        self,
        db: Database,
        hourly_rate: Decimal,
        hours_basis: str = HOURS_BASIS_UNPAID,
    ):
        self.db = db
        self.hourly_rate = hourly_rate
        self.hours_basis = hours_basis

    async def compute_owed(self, employee_email: str) -> OwedSnapshot:
        """Compute the owed snapshot for an employee.

        Raises:
            NotFoundError: If the employee identifier is empty or malformed
        """
        try:
            email = normalize_email(employee_email)
        except ValidationError as exc:
            raise NotFoundError(str(exc)) from None

        entries, payments = await self._fetch(email)
        return compute_snapshot(
            email, entries, payments, self.hourly_rate, self.hours_basis
        )

    async def list_unpaid_entries(self, employee_email: str) -> list[WorksheetEntry]:
        """List the employee's worksheet entries not referenced by a paid record."""
        email = normalize_email(employee_email)
        entries, payments = await self._fetch(email)
        snapshot = compute_snapshot(
            email, entries, payments, self.hourly_rate, self.hours_basis
        )
        return list(snapshot.unpaid_entries)

    async def has_pending_payment(self, employee_email: str) -> bool:
        """Check whether any pending payment record exists for the employee."""
        email = normalize_email(employee_email)
        async with self.db.session() as session:
            result = await session.execute(
                select(
                    exists().where(
                        PaymentRecord.employee_email == email,
                        PaymentRecord.status == PaymentStatus.PENDING.value,
                    )
                )
            )
            return bool(result.scalar())

    async def _fetch(
        self, email: str
    ) -> tuple[list[WorksheetEntry], list[PaymentRecord]]:
        """Load both collections for one employee in a single session."""
        async with self.db.session() as session:
            entry_result = await session.execute(
                select(WorksheetEntry)
                .where(WorksheetEntry.employee_email == email)
                .order_by(WorksheetEntry.work_date, WorksheetEntry.created_at)
            )
            payment_result = await session.execute(
                select(PaymentRecord).where(PaymentRecord.employee_email == email)
            )
            return (
                list(entry_result.scalars().all()),
                list(payment_result.scalars().all()),
            )
