"""Payment processor: settles worksheet entries into a payment record.

The ledger insert and the worksheet delete happen in one transaction.
Key invariants:
1. A worksheet entry is settled by at most one payment record
   (payment_record_entry.worksheet_entry_id is unique)
2. The delete must match every requested entry, otherwise the whole
   settlement rolls back with ConflictError
3. New records always start in PaymentStateMachine.INITIAL_STATUS
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from worksync.errors import ConflictError, ValidationError
from worksync.models import PaymentRecord, PaymentRecordEntry, WorksheetEntry
from worksync.models.base import utcnow
from worksync.services.locking_service import EmployeeLocks
from worksync.services.state_machine import PaymentStateMachine
from worksync.validation import normalize_email, parse_uuid, quantize_money, to_decimal

if TYPE_CHECKING:
    from worksync.database import Database

logger = logging.getLogger(__name__)

EntryRef = UUID | str | WorksheetEntry | dict[str, Any]


class PaymentProcessor:
    """Service converting unpaid worksheet entries into a payment record.

    This is the only writer that moves data between the worksheet store
    and the payment ledger.
    """

    def __init__(self, db: Database, locks: EmployeeLocks | None = None):
        self.db = db
        self.locks = locks if locks is not None else EmployeeLocks()

    async def process_payment(
        self,
        employee_email: str,
        amount: Decimal | int | str,
        approver_id: str,
        entries: Sequence[EntryRef],
        payment_date: date | None = None,
    ) -> PaymentRecord:
        """Create a payment record for entries and remove them from the worksheet store.

        Args:
            employee_email: Employee being paid
            amount: Positive payment amount
            approver_id: Authenticated identifier of the payer/approver
            entries: Worksheet entries (ids, entry objects or entry dicts) to settle
            payment_date: Defaults to today (UTC)

        Returns:
            The new PaymentRecord

        Raises:
            ValidationError: Bad email, amount, approver, empty or duplicate
                entry list, or an entry that belongs to another employee
            ConflictError: An entry no longer exists (already settled)
            StorageError: The transaction could not commit
        """
        email = normalize_email(employee_email)
        money = _check_amount(amount)
        approver = _check_approver(approver_id)
        entry_ids = _entry_ids(entries)

        async with self.locks.hold(email):
            try:
                async with self.db.transaction() as session:
                    rows = await self._lock_entries(session, entry_ids)
                    _check_rows(email, entry_ids, rows)

                    payment = PaymentRecord(
                        employee_email=email,
                        amount=money,
                        approver_id=approver,
                        payment_date=payment_date or utcnow().date(),
                        status=PaymentStateMachine.INITIAL_STATUS.value,
                        entries=[row.snapshot() for row in rows],
                        settled_entries=[
                            PaymentRecordEntry(
                                worksheet_entry_id=row.worksheet_entry_id,
                                hours_worked=row.hours_worked,
                            )
                            for row in rows
                        ],
                    )
                    session.add(payment)
                    await self._insert_payment(session)

                    deleted = await self._delete_entries(session, email, entry_ids)
                    if deleted != len(entry_ids):
                        raise ConflictError(
                            f"Expected to settle {len(entry_ids)} entries for {email}, "
                            f"matched {deleted}"
                        )
            except ConflictError as exc:
                logger.warning("Settlement for %s rolled back: %s", email, exc)
                raise

        logger.info(
            "Payment %s created for %s: %s over %d entries (approver %s)",
            payment.payment_id,
            email,
            money,
            len(entry_ids),
            approver,
        )
        return payment

    async def _lock_entries(
        self, session: AsyncSession, entry_ids: list[UUID]
    ) -> list[WorksheetEntry]:
        """Read the requested entries, row-locking them where the backend supports it."""
        result = await session.execute(
            select(WorksheetEntry)
            .where(WorksheetEntry.worksheet_entry_id.in_(entry_ids))
            .order_by(WorksheetEntry.work_date, WorksheetEntry.created_at)
            .with_for_update()
        )
        return list(result.scalars().all())

    async def _insert_payment(self, session: AsyncSession) -> None:
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                "One or more worksheet entries were already settled by another payment"
            ) from exc

    async def _delete_entries(
        self, session: AsyncSession, email: str, entry_ids: list[UUID]
    ) -> int:
        """Delete settled entries, returning the matched row count."""
        result = await session.execute(
            delete(WorksheetEntry)
            .where(
                WorksheetEntry.worksheet_entry_id.in_(entry_ids),
                WorksheetEntry.employee_email == email,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


def _check_amount(amount: Any) -> Decimal:
    value = to_decimal(amount, "amount")
    if value <= 0:
        raise ValidationError("amount must be positive")
    quantized = quantize_money(value)
    if quantized <= 0:
        raise ValidationError("amount must be at least 0.01")
    return quantized


def _check_approver(approver_id: Any) -> str:
    approver = str(approver_id).strip() if approver_id is not None else ""
    if not approver:
        raise ValidationError("approver_id is required")
    return approver


def _entry_ids(entries: Iterable[EntryRef]) -> list[UUID]:
    if isinstance(entries, (str, bytes)):
        raise ValidationError("entries must be a list of worksheet entry references")

    ids: list[UUID] = []
    for ref in entries:
        if isinstance(ref, WorksheetEntry):
            raw = ref.worksheet_entry_id
        elif isinstance(ref, dict):
            raw = ref.get("worksheet_entry_id", ref.get("id"))
        else:
            raw = ref
        ids.append(parse_uuid(raw, "worksheet entry id"))

    if not ids:
        raise ValidationError("entries must not be empty")
    if len(set(ids)) != len(ids):
        raise ValidationError("entries contain duplicate worksheet entry ids")
    return ids


def _check_rows(email: str, entry_ids: list[UUID], rows: list[WorksheetEntry]) -> None:
    foreign = [str(r.worksheet_entry_id) for r in rows if r.employee_email != email]
    if foreign:
        raise ValidationError(
            f"Worksheet entries do not belong to {email}: {', '.join(foreign)}"
        )

    found = {r.worksheet_entry_id for r in rows}
    missing = [str(eid) for eid in entry_ids if eid not in found]
    if missing:
        raise ConflictError(
            f"Worksheet entries no longer unpaid: {', '.join(missing)}"
        )
