"""Payment ledger service.

Read access to payment records plus the approval step. Status changes
go through PaymentStateMachine and touch only the payment_record
table: worksheet entries were already consumed when the record was
created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select

from worksync.errors import NotFoundError, ValidationError
from worksync.models import PaymentRecord
from worksync.models.base import utcnow
from worksync.services.state_machine import PaymentStateMachine, PaymentStatus
from worksync.validation import normalize_email, parse_uuid

if TYPE_CHECKING:
    from worksync.database import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryPoint:
    """One paid record in an employee's salary history."""

    period: str  # "October 2026"
    amount: Decimal
    paid_at: datetime | None
    payment_id: UUID


class LedgerService:
    """Payment record queries and status transitions."""

    def __init__(self, db: Database):
        self.db = db

    async def get_payment(self, payment_id: UUID | str) -> PaymentRecord:
        """Get a payment record by id.

        Raises:
            NotFoundError: If no record has this id
        """
        pid = _payment_uuid(payment_id)
        async with self.db.session() as session:
            payment = await session.get(PaymentRecord, pid)
        if payment is None:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    async def list_payments(
        self,
        employee_email: str,
        status: PaymentStatus | str | None = None,
    ) -> list[PaymentRecord]:
        """List an employee's payment records, newest first."""
        email = normalize_email(employee_email)
        query = select(PaymentRecord).where(PaymentRecord.employee_email == email)
        if status is not None:
            query = query.where(PaymentRecord.status == PaymentStatus.parse(status).value)
        query = query.order_by(PaymentRecord.payment_date.desc(), PaymentRecord.created_at.desc())

        async with self.db.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def list_by_status(self, status: PaymentStatus | str) -> list[PaymentRecord]:
        """List every payment record in a status, oldest first (approval queue)."""
        parsed = PaymentStatus.parse(status)
        async with self.db.session() as session:
            result = await session.execute(
                select(PaymentRecord)
                .where(PaymentRecord.status == parsed.value)
                .order_by(PaymentRecord.created_at)
            )
            return list(result.scalars().all())

    async def salary_history(self, employee_email: str) -> list[SalaryPoint]:
        """Paid amounts over time for charting, oldest first."""
        paid = await self.list_payments(employee_email, PaymentStatus.PAID)
        paid.sort(key=lambda p: (p.paid_at is not None, p.paid_at or datetime.min, p.payment_date))
        return [
            SalaryPoint(
                period=(p.paid_at or p.payment_date).strftime("%B %Y"),
                amount=p.amount,
                paid_at=p.paid_at,
                payment_id=p.payment_id,
            )
            for p in paid
        ]

    async def set_status(
        self,
        payment_id: UUID | str,
        new_status: PaymentStatus | str,
        changed_by: str | None = None,
    ) -> PaymentRecord:
        """Move a payment record to a new status.

        The record is read under a row lock and the transition checked
        against PaymentStateMachine before the write. Setting the current
        status again returns the record unchanged.

        Raises:
            ValidationError: If new_status is not a known status literal
            NotFoundError: If no record has this id
            InvalidTransitionError: If the transition is not allowed
        """
        target = PaymentStatus.parse(new_status)
        pid = _payment_uuid(payment_id)

        async with self.db.transaction() as session:
            payment = await session.get(PaymentRecord, pid, with_for_update=True)
            if payment is None:
                raise NotFoundError(f"Payment {payment_id} not found")

            current = payment.status
            PaymentStateMachine.validate_transition(current, target)
            if PaymentStateMachine.is_noop(current, target):
                return payment

            payment.status = target.value
            if PaymentStateMachine.is_settled(target):
                payment.paid_at = utcnow()
            await session.flush()

        logger.info(
            "Payment %s for %s moved %s -> %s (by %s)",
            payment.payment_id,
            payment.employee_email,
            current,
            target.value,
            changed_by or "unknown",
        )
        return payment


def _payment_uuid(payment_id: UUID | str) -> UUID:
    # Malformed ids cannot reference an existing record
    try:
        return parse_uuid(payment_id, "payment id")
    except ValidationError:
        raise NotFoundError(f"Payment {payment_id} not found") from None
