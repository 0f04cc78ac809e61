"""Property-based tests for owed-amount invariants.

These tests use hypothesis to generate worksheets and settlement
batches and check the reconciliation math against them:
- conservation: owed before = paid amounts + owed after
- repeated computation over the same rows gives the same snapshot
- settled entries never reappear as unpaid
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from hypothesis import given, settings
from hypothesis import strategies as st

from worksync.models import PaymentRecord, WorksheetEntry
from worksync.services.owed_calculator import compute_snapshot
from worksync.validation import quantize_money

EMPLOYEE = "e@x.com"

hours_st = st.decimals(min_value=0, max_value=12, places=2, allow_nan=False, allow_infinity=False)
rate_st = st.decimals(min_value="0.01", max_value=200, places=2, allow_nan=False, allow_infinity=False)


def make_entries(hours: list[Decimal]) -> list[WorksheetEntry]:
    return [
        WorksheetEntry(
            worksheet_entry_id=uuid4(),
            employee_email=EMPLOYEE,
            work_date=date(2026, 10, 1) + timedelta(days=i),
            hours_worked=h,
        )
        for i, h in enumerate(hours)
    ]


def settle(
    entries: list[WorksheetEntry],
    batch_of: list[int],
    batches: int,
    rate: Decimal,
) -> tuple[list[WorksheetEntry], list[PaymentRecord]]:
    """Model the processor: each batch becomes a paid record and leaves the store."""
    payments = []
    remaining = list(entries)
    for batch in range(batches):
        chosen = [e for e, b in zip(entries, batch_of) if b == batch]
        if not chosen:
            continue
        payments.append(
            PaymentRecord(
                payment_id=uuid4(),
                employee_email=EMPLOYEE,
                amount=quantize_money(sum((e.hours_worked * rate for e in chosen), Decimal("0"))),
                approver_id="approver1",
                payment_date=date(2026, 10, 28),
                status="paid",
                paid_at=datetime(2026, 10, 28) + timedelta(minutes=batch),
                entries=[e.snapshot() for e in chosen],
            )
        )
        remaining = [e for e in remaining if e not in chosen]
    return remaining, payments


@st.composite
def worksheets(draw):
    hours = draw(st.lists(hours_st, min_size=0, max_size=12))
    batches = draw(st.integers(min_value=1, max_value=4))
    # batch index == batches means "left unpaid"
    batch_of = draw(
        st.lists(st.integers(min_value=0, max_value=batches), min_size=len(hours), max_size=len(hours))
    )
    return hours, batch_of, batches


@settings(max_examples=200, deadline=None)
@given(worksheets(), rate_st)
def test_conservation(sheet, rate):
    hours, batch_of, batches = sheet
    entries = make_entries(hours)

    before = compute_snapshot(EMPLOYEE, entries, [], rate)
    remaining, payments = settle(entries, batch_of, batches, rate)
    after = compute_snapshot(EMPLOYEE, remaining, payments, rate)

    paid = sum((p.amount for p in payments), Decimal("0"))
    # One cent of rounding per settled batch at most
    tolerance = Decimal("0.01") * (len(payments) + 1)
    assert abs(before.total_owed - (paid + after.total_owed)) <= tolerance
    assert after.total_paid == quantize_money(paid)


@settings(max_examples=100, deadline=None)
@given(worksheets(), rate_st)
def test_repeated_computation_is_identical(sheet, rate):
    hours, batch_of, batches = sheet
    entries = make_entries(hours)
    remaining, payments = settle(entries, batch_of, batches, rate)

    first = compute_snapshot(EMPLOYEE, remaining, payments, rate)
    second = compute_snapshot(EMPLOYEE, remaining, payments, rate)

    assert first == second


@settings(max_examples=100, deadline=None)
@given(worksheets(), rate_st)
def test_settled_entries_never_unpaid(sheet, rate):
    hours, batch_of, batches = sheet
    entries = make_entries(hours)
    _, payments = settle(entries, batch_of, batches, rate)

    # Even if settled rows were never removed from the store
    snapshot = compute_snapshot(EMPLOYEE, entries, payments, rate)

    settled = {eid for p in payments for eid in p.entry_ids}
    unpaid = {str(e.worksheet_entry_id) for e in snapshot.unpaid_entries}
    assert not settled & unpaid
    assert len(settled) + len(unpaid) == len(entries)


@settings(max_examples=100, deadline=None)
@given(st.lists(hours_st, min_size=1, max_size=10), rate_st)
def test_owed_without_payments_is_hours_times_rate(hours, rate):
    entries = make_entries(hours)

    snapshot = compute_snapshot(EMPLOYEE, entries, [], rate)

    assert snapshot.total_hours == sum(hours, Decimal("0"))
    assert snapshot.total_owed == quantize_money(sum(hours, Decimal("0")) * rate)
    assert snapshot.total_owed >= 0
