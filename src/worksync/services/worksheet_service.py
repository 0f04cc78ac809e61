"""Worksheet entry service: employees logging and correcting hours."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import select

from worksync.errors import NotFoundError, ValidationError
from worksync.models import WorksheetEntry
from worksync.validation import CENTS, normalize_email, parse_uuid, to_decimal

if TYPE_CHECKING:
    from worksync.database import Database

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = frozenset({"work_date", "hours_worked", "task", "notes"})

# Upper bound of WorksheetEntry.hours_worked, Numeric(8, 2)
MAX_HOURS = Decimal("999999.99")


class WorksheetService:
    """Service for unpaid worksheet entries.

    Entries can be edited until a payment settles them; after that they
    no longer exist here and updates raise NotFoundError.
    """

    def __init__(self, db: Database):
        self.db = db

    async def add_entry(
        self,
        employee_email: str,
        work_date: date,
        hours_worked: Decimal | int | str,
        task: str | None = None,
        notes: str | None = None,
    ) -> WorksheetEntry:
        """Record hours worked by an employee on a date."""
        entry = WorksheetEntry(
            employee_email=normalize_email(employee_email),
            work_date=_check_date(work_date),
            hours_worked=_check_hours(hours_worked),
            task=task,
            notes=notes,
        )
        async with self.db.transaction() as session:
            session.add(entry)
            await session.flush()

        logger.info(
            "Worksheet entry %s added for %s (%s h)",
            entry.worksheet_entry_id,
            entry.employee_email,
            entry.hours_worked,
        )
        return entry

    async def update_entry(self, entry_id: UUID | str, **fields: Any) -> WorksheetEntry:
        """Update the mutable fields of an unpaid entry.

        Raises:
            ValidationError: If an unknown or immutable field is given
            NotFoundError: If the entry does not exist (or was already settled)
        """
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        if "work_date" in fields:
            fields["work_date"] = _check_date(fields["work_date"])
        if "hours_worked" in fields:
            fields["hours_worked"] = _check_hours(fields["hours_worked"])

        entry_uuid = parse_uuid(entry_id, "worksheet entry id")
        async with self.db.transaction() as session:
            entry = await session.get(WorksheetEntry, entry_uuid, with_for_update=True)
            if entry is None:
                raise NotFoundError(f"Worksheet entry {entry_uuid} not found")
            for name, value in fields.items():
                setattr(entry, name, value)
            await session.flush()

        return entry

    async def get_entry(self, entry_id: UUID | str) -> WorksheetEntry:
        entry_uuid = parse_uuid(entry_id, "worksheet entry id")
        async with self.db.session() as session:
            entry = await session.get(WorksheetEntry, entry_uuid)
        if entry is None:
            raise NotFoundError(f"Worksheet entry {entry_uuid} not found")
        return entry

    async def list_entries(self, employee_email: str) -> list[WorksheetEntry]:
        """List every worksheet entry still stored for an employee."""
        email = normalize_email(employee_email)
        async with self.db.session() as session:
            result = await session.execute(
                select(WorksheetEntry)
                .where(WorksheetEntry.employee_email == email)
                .order_by(WorksheetEntry.work_date, WorksheetEntry.created_at)
            )
            return list(result.scalars().all())


def _check_hours(value: Any) -> Decimal:
    hours = to_decimal(value, "hours_worked")
    if hours < 0:
        raise ValidationError("hours_worked must not be negative")
    if hours > MAX_HOURS:
        raise ValidationError(f"hours_worked must not exceed {MAX_HOURS}")
    quantized = hours.quantize(CENTS)
    if quantized != hours:
        raise ValidationError("hours_worked allows at most two decimal places")
    return quantized


def _check_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid work_date: {value!r}") from None
