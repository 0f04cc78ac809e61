"""Pytest fixtures for WorkSync tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from worksync.api.app import create_app
from worksync.config import Settings
from worksync.database import Database
from worksync.models import PaymentRecord, PaymentRecordEntry, WorksheetEntry
from worksync.payroll import Payroll

HOURLY_RATE = Decimal("20")
EMPLOYEE = "e@x.com"
OTHER_EMPLOYEE = "other@x.com"
APPROVER = "approver1"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway sqlite file.

    A file (not :memory:) so that every pooled connection sees the same
    database.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'worksync.db'}",
        hourly_rate=HOURLY_RATE,
    )


@pytest.fixture
async def db(settings: Settings) -> AsyncGenerator[Database, None]:
    """Create a Database with the schema in place."""
    database = Database(settings.database_url)
    await database.create_schema()
    yield database
    await database.dispose()


@pytest.fixture
def payroll(db: Database, settings: Settings) -> Payroll:
    return Payroll(db, settings)


@pytest.fixture
async def two_entries(payroll: Payroll) -> list[WorksheetEntry]:
    """Two unpaid entries of 5 and 3 hours for EMPLOYEE."""
    first = await payroll.add_entry(EMPLOYEE, date(2026, 10, 1), Decimal("5"), task="Inventory")
    second = await payroll.add_entry(EMPLOYEE, date(2026, 10, 2), Decimal("3"), task="Shipping")
    return [first, second]


@pytest.fixture
async def client(settings: Settings, db: Database) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app(settings, database=db)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def count_rows(db: Database, model: type) -> int:
    async with db.session() as session:
        return await session.scalar(select(func.count()).select_from(model)) or 0


async def ledger_state(db: Database) -> tuple[int, int, int]:
    """(worksheet entries, payment records, settled-entry links)."""
    return (
        await count_rows(db, WorksheetEntry),
        await count_rows(db, PaymentRecord),
        await count_rows(db, PaymentRecordEntry),
    )
