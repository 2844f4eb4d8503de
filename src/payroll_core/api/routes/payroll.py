"""Payroll API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, status

from payroll_core.api.dependencies import DbSession, Payroll
from payroll_core.api.schemas import (
    ErrorResponse,
    PayrollPreviewResponse,
    PayrollRecordListResponse,
    PayrollRecordResponse,
    PayrollRequest,
    PayrollSummaryResponse,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


# ============================================================================
# Calculation
# ============================================================================


@router.post(
    "/preview",
    response_model=PayrollPreviewResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def preview_payroll(
    service: Payroll,
    payload: PayrollRequest,
) -> PayrollPreviewResponse:
    """Calculate payroll without storing it. Deterministic for identical inputs."""
    record = await service.preview_payroll(payload.to_period_input())
    return PayrollPreviewResponse.from_record(record)


@router.post(
    "/records",
    response_model=PayrollRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def generate_payroll(
    db: DbSession,
    service: Payroll,
    payload: PayrollRequest,
) -> PayrollRecordResponse:
    """Generate and store payroll for one employee and pay period."""
    _, row = await service.generate_payroll(
        payload.to_period_input(), created_by=payload.created_by
    )
    await db.commit()
    await db.refresh(row)
    return PayrollRecordResponse.model_validate(row)


# ============================================================================
# Records
# ============================================================================


@router.get("/records", response_model=PayrollRecordListResponse)
async def list_payroll_records(
    service: Payroll,
    employee_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PayrollRecordListResponse:
    """List stored payroll records with optional filters."""
    rows, total = await service.list_payroll_records(
        employee_id=employee_id,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )
    return PayrollRecordListResponse(
        items=[PayrollRecordResponse.model_validate(r) for r in rows],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/records/{record_id}",
    response_model=PayrollRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_record(
    service: Payroll,
    record_id: Annotated[UUID, Path()],
) -> PayrollRecordResponse:
    """Get a stored payroll record by ID."""
    row = await service.get_payroll_record(record_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payroll record not found",
        )
    return PayrollRecordResponse.model_validate(row)


@router.get("/summary", response_model=PayrollSummaryResponse)
async def payroll_summary(
    service: Payroll,
    date_from: date | None = None,
    date_to: date | None = None,
) -> PayrollSummaryResponse:
    """Gross, net and tax totals for pay periods starting in the range."""
    summary = await service.summarize_payroll(date_from=date_from, date_to=date_to)
    return PayrollSummaryResponse.from_summary(summary, date_from, date_to)
