"""Payroll facade.

Wires the settlement services to one Database so callers (the HTTP
layer, the CLI, tests) have a single entry point:

    db = Database(settings.database_url)
    payroll = Payroll(db, settings)

    snapshot = await payroll.compute_owed("e@x.com")
    payment = await payroll.process_payment(
        "e@x.com", snapshot.total_owed, "hr-1", snapshot.unpaid_entries
    )
    await payroll.set_payment_status(payment.payment_id, "paid")

    await payroll.close()
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from worksync.config import Settings
from worksync.database import Database
from worksync.models import PaymentRecord, WorksheetEntry
from worksync.services import (
    EmployeeLocks,
    LedgerService,
    OwedCalculator,
    OwedSnapshot,
    PaymentProcessor,
    PaymentStatus,
    SalaryPoint,
    WorksheetService,
)
from worksync.services.payment_processor import EntryRef


class Payroll:
    """Single integration path for worksheet reconciliation and settlement."""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings
        self.locks = EmployeeLocks()
        self.worksheets = WorksheetService(db)
        self.ledger = LedgerService(db)
        self.calculator = OwedCalculator(db, settings.hourly_rate, settings.hours_basis)
        self.processor = PaymentProcessor(db, self.locks)

    @classmethod
    def from_settings(cls, settings: Settings, **engine_kwargs: Any) -> Payroll:
        return cls(Database(settings.database_url, echo=settings.debug, **engine_kwargs), settings)

    async def start(self) -> None:
        if self.settings.create_schema:
            await self.db.create_schema()

    async def close(self) -> None:
        await self.db.dispose()

    # Core operations

    async def compute_owed(self, employee_email: str) -> OwedSnapshot:
        return await self.calculator.compute_owed(employee_email)

    async def list_unpaid_entries(self, employee_email: str) -> list[WorksheetEntry]:
        return await self.calculator.list_unpaid_entries(employee_email)

    async def process_payment(
        self,
        employee_email: str,
        amount: Decimal | int | str,
        approver_id: str,
        entries: Sequence[EntryRef],
        payment_date: date | None = None,
    ) -> PaymentRecord:
        return await self.processor.process_payment(
            employee_email, amount, approver_id, entries, payment_date
        )

    async def set_payment_status(
        self,
        payment_id: UUID | str,
        status: PaymentStatus | str,
        changed_by: str | None = None,
    ) -> PaymentRecord:
        return await self.ledger.set_status(payment_id, status, changed_by)

    async def has_pending_payment(self, employee_email: str) -> bool:
        return await self.calculator.has_pending_payment(employee_email)

    # Worksheet and ledger access

    async def add_entry(
        self,
        employee_email: str,
        work_date: date,
        hours_worked: Decimal | int | str,
        task: str | None = None,
        notes: str | None = None,
    ) -> WorksheetEntry:
        return await self.worksheets.add_entry(employee_email, work_date, hours_worked, task, notes)

    async def update_entry(self, entry_id: UUID | str, **fields: Any) -> WorksheetEntry:
        return await self.worksheets.update_entry(entry_id, **fields)

    async def get_payment(self, payment_id: UUID | str) -> PaymentRecord:
        return await self.ledger.get_payment(payment_id)

    async def list_payments(
        self, employee_email: str, status: PaymentStatus | str | None = None
    ) -> list[PaymentRecord]:
        return await self.ledger.list_payments(employee_email, status)

    async def list_by_status(self, status: PaymentStatus | str) -> list[PaymentRecord]:
        return await self.ledger.list_by_status(status)

    async def salary_history(self, employee_email: str) -> list[SalaryPoint]:
        return await self.ledger.salary_history(employee_email)
