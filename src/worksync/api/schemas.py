"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Worksheet schemas
# ============================================================================


class WorksheetEntryCreate(BaseModel):
    """Schema for logging hours worked."""

    employee_email: str
    work_date: date
    hours_worked: Decimal = Field(ge=0)
    task: str | None = None
    notes: str | None = None


class WorksheetEntryUpdate(BaseModel):
    """Schema for correcting an unpaid entry. Only set fields are applied."""

    work_date: date | None = None
    hours_worked: Decimal | None = Field(default=None, ge=0)
    task: str | None = None
    notes: str | None = None


class WorksheetEntryResponse(BaseModel):
    """Schema for worksheet entry response."""

    model_config = ConfigDict(from_attributes=True)

    worksheet_entry_id: UUID
    employee_email: str
    work_date: date
    hours_worked: Decimal
    task: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class WorksheetEntryListResponse(BaseModel):
    """Schema for listing worksheet entries."""

    items: list[WorksheetEntryResponse]
    total: int


# ============================================================================
# Owed / reconciliation schemas
# ============================================================================


class OwedResponse(BaseModel):
    """What an employee is owed right now."""

    model_config = ConfigDict(from_attributes=True)

    employee_email: str
    total_owed: Decimal
    total_hours: Decimal
    total_paid: Decimal
    salary: Decimal
    has_pending_payment: bool
    unpaid_entries: list[WorksheetEntryResponse]


class PendingPaymentResponse(BaseModel):
    """Whether an employee has a payment waiting for approval."""

    employee_email: str
    has_pending_payment: bool


class SalaryPointResponse(BaseModel):
    """One point of an employee's salary history."""

    model_config = ConfigDict(from_attributes=True)

    period: str
    amount: Decimal
    paid_at: datetime | None = None
    payment_id: UUID


# ============================================================================
# Payment schemas
# ============================================================================


class PaymentCreate(BaseModel):
    """Schema for settling worksheet entries into a payment."""

    employee_email: str
    amount: Decimal = Field(gt=0)
    entries: list[UUID] = Field(min_length=1)
    payment_date: date | None = None


class PaymentStatusUpdate(BaseModel):
    """Schema for the approval step. The literal is checked by the service."""

    status: str


class PaymentResponse(BaseModel):
    """Schema for payment record response."""

    model_config = ConfigDict(from_attributes=True)

    payment_id: UUID
    employee_email: str
    amount: Decimal
    approver_id: str
    payment_date: date
    status: str
    paid_at: datetime | None = None
    entries: list[dict[str, Any]]
    created_at: datetime
    updated_at: datetime


class PaymentListResponse(BaseModel):
    """Schema for listing payment records."""

    items: list[PaymentResponse]
    total: int


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str
