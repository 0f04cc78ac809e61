"""Payment settlement and approval endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from worksync.api.dependencies import PayrollDep, UserId
from worksync.api.schemas import (
    ErrorResponse,
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    PaymentStatusUpdate,
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_payment(
    payroll: PayrollDep,
    approver_id: UserId,
    payload: PaymentCreate,
) -> PaymentResponse:
    """Settle worksheet entries into a pending payment record.

    On 409 the entries were consumed by another settlement: refetch the
    unpaid entries and resubmit.
    """
    payment = await payroll.process_payment(
        payload.employee_email,
        payload.amount,
        approver_id,
        payload.entries,
        payment_date=payload.payment_date,
    )
    return PaymentResponse.model_validate(payment)


@router.get(
    "",
    response_model=PaymentListResponse,
    responses={422: {"model": ErrorResponse}},
)
async def list_payments_by_status(
    payroll: PayrollDep,
    status_filter: Annotated[str, Query(alias="status")] = "pending",
) -> PaymentListResponse:
    """List payment records in a status (defaults to the approval queue)."""
    payments = await payroll.list_by_status(status_filter)
    return PaymentListResponse(
        items=[PaymentResponse.model_validate(p) for p in payments],
        total=len(payments),
    )


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payment(
    payroll: PayrollDep,
    payment_id: Annotated[UUID, Path()],
) -> PaymentResponse:
    """Get a payment record by ID."""
    payment = await payroll.get_payment(payment_id)
    return PaymentResponse.model_validate(payment)


@router.patch(
    "/{payment_id}/status",
    response_model=PaymentResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_payment_status(
    payroll: PayrollDep,
    approver_id: UserId,
    payment_id: Annotated[str, Path()],
    payload: PaymentStatusUpdate,
) -> PaymentResponse:
    """Approve a payment (pending → paid)."""
    payment = await payroll.set_payment_status(payment_id, payload.status, changed_by=approver_id)
    return PaymentResponse.model_validate(payment)
