"""Worksheet entry endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from worksync.api.dependencies import PayrollDep
from worksync.api.schemas import (
    ErrorResponse,
    WorksheetEntryCreate,
    WorksheetEntryResponse,
    WorksheetEntryUpdate,
)

router = APIRouter(prefix="/worksheets", tags=["worksheets"])


@router.post(
    "",
    response_model=WorksheetEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_worksheet_entry(
    payroll: PayrollDep,
    payload: WorksheetEntryCreate,
) -> WorksheetEntryResponse:
    """Log hours worked by an employee."""
    entry = await payroll.add_entry(
        payload.employee_email,
        payload.work_date,
        payload.hours_worked,
        task=payload.task,
        notes=payload.notes,
    )
    return WorksheetEntryResponse.model_validate(entry)


@router.get(
    "/{entry_id}",
    response_model=WorksheetEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_worksheet_entry(
    payroll: PayrollDep,
    entry_id: Annotated[UUID, Path()],
) -> WorksheetEntryResponse:
    """Get an unpaid worksheet entry."""
    entry = await payroll.worksheets.get_entry(entry_id)
    return WorksheetEntryResponse.model_validate(entry)


@router.patch(
    "/{entry_id}",
    response_model=WorksheetEntryResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_worksheet_entry(
    payroll: PayrollDep,
    entry_id: Annotated[UUID, Path()],
    payload: WorksheetEntryUpdate,
) -> WorksheetEntryResponse:
    """Correct an entry before it is settled."""
    entry = await payroll.update_entry(entry_id, **payload.model_dump(exclude_unset=True))
    return WorksheetEntryResponse.model_validate(entry)
