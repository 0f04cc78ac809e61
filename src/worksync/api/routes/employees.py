"""Per-employee reconciliation endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query

from worksync.api.dependencies import PayrollDep
from worksync.api.schemas import (
    ErrorResponse,
    OwedResponse,
    PaymentListResponse,
    PaymentResponse,
    PendingPaymentResponse,
    SalaryPointResponse,
    WorksheetEntryListResponse,
    WorksheetEntryResponse,
)
from worksync.validation import normalize_email

router = APIRouter(prefix="/employees/{email}", tags=["employees"])

Email = Annotated[str, Path(description="Employee email")]


@router.get(
    "/owed",
    response_model=OwedResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_owed(payroll: PayrollDep, email: Email) -> OwedResponse:
    """Compute what the employee is owed. Zeroed when nothing is recorded."""
    snapshot = await payroll.compute_owed(email)
    return OwedResponse.model_validate(snapshot)


@router.get(
    "/worksheets",
    response_model=WorksheetEntryListResponse,
    responses={422: {"model": ErrorResponse}},
)
async def list_unpaid_worksheets(payroll: PayrollDep, email: Email) -> WorksheetEntryListResponse:
    """List the employee's unpaid worksheet entries."""
    entries = await payroll.list_unpaid_entries(email)
    return WorksheetEntryListResponse(
        items=[WorksheetEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.get(
    "/pending",
    response_model=PendingPaymentResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_pending(payroll: PayrollDep, email: Email) -> PendingPaymentResponse:
    """Check whether a payment is waiting for approval."""
    pending = await payroll.has_pending_payment(email)
    return PendingPaymentResponse(employee_email=normalize_email(email), has_pending_payment=pending)


@router.get(
    "/payments",
    response_model=PaymentListResponse,
    responses={422: {"model": ErrorResponse}},
)
async def list_employee_payments(
    payroll: PayrollDep,
    email: Email,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> PaymentListResponse:
    """List the employee's payment records, newest first."""
    payments = await payroll.list_payments(email, status_filter)
    return PaymentListResponse(
        items=[PaymentResponse.model_validate(p) for p in payments],
        total=len(payments),
    )


@router.get(
    "/salary-history",
    response_model=list[SalaryPointResponse],
    responses={422: {"model": ErrorResponse}},
)
async def get_salary_history(payroll: PayrollDep, email: Email) -> list[SalaryPointResponse]:
    """Paid amounts over time, oldest first."""
    history = await payroll.salary_history(email)
    return [SalaryPointResponse.model_validate(point) for point in history]
