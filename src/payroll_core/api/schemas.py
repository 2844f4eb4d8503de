"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from payroll_core.calculators import PayPeriodInput, PayrollRecord, PayrollSummary


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollRequest(BaseModel):
    """Schema for previewing or generating payroll."""

    employee_id: UUID
    period_start: date
    period_end: date
    hours_worked: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    created_by: UUID | None = None

    def to_period_input(self) -> PayPeriodInput:
        return PayPeriodInput(
            employee_id=self.employee_id,
            period_start=self.period_start,
            period_end=self.period_end,
            hours_worked=self.hours_worked,
            overtime_hours=self.overtime_hours,
            allowances=self.allowances,
            deductions=self.deductions,
        )


class BracketLine(BaseModel):
    """Schema for one bracket's tax contribution."""

    name: str
    rate: Decimal
    threshold_min: Decimal
    threshold_max: Decimal | None = None
    taxable_amount: Decimal
    tax: Decimal


class PayrollPreviewResponse(BaseModel):
    """Schema for a calculated (not stored) payroll result."""

    employee_id: UUID
    period_start: date
    period_end: date
    compensation_basis: str
    hours_worked: Decimal
    overtime_hours: Decimal
    gross_salary: Decimal
    tax_deductions: Decimal
    deductions: Decimal
    allowances: Decimal
    net_salary: Decimal
    calculation_id: UUID
    inputs_fingerprint: str
    rules_fingerprint: str
    engine_version: str
    tax_breakdown: list[BracketLine] = []

    @classmethod
    def from_record(cls, record: PayrollRecord) -> "PayrollPreviewResponse":
        return cls(
            employee_id=record.employee_id,
            period_start=record.period_start,
            period_end=record.period_end,
            compensation_basis=record.compensation_basis.value,
            hours_worked=record.hours_worked,
            overtime_hours=record.overtime_hours,
            gross_salary=record.gross_salary,
            tax_deductions=record.tax_deductions,
            deductions=record.deductions,
            allowances=record.allowances,
            net_salary=record.net_salary,
            calculation_id=record.calculation_id,
            inputs_fingerprint=record.inputs_fingerprint,
            rules_fingerprint=record.rules_fingerprint,
            engine_version=record.engine_version,
            tax_breakdown=[
                BracketLine(
                    name=c.rule.name,
                    rate=c.rule.rate,
                    threshold_min=c.rule.threshold_min,
                    threshold_max=c.rule.threshold_max,
                    taxable_amount=c.taxable_amount,
                    tax=c.tax,
                )
                for c in record.tax_breakdown
            ],
        )


class PayrollRecordResponse(BaseModel):
    """Schema for a stored payroll record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    pay_period_start: date
    pay_period_end: date
    compensation_basis: str
    hours_worked: Decimal
    overtime_hours: Decimal
    gross_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    tax_deductions: Decimal
    net_salary: Decimal
    calculation_id: UUID
    inputs_fingerprint: str
    rules_fingerprint: str
    engine_version: str
    created_by: UUID | None = None
    created_at: datetime


class PayrollRecordListResponse(BaseModel):
    """Schema for listing payroll records."""

    items: list[PayrollRecordResponse]
    total: int
    page: int
    page_size: int


class PayrollSummaryResponse(BaseModel):
    """Schema for payroll totals."""

    date_from: date | None = None
    date_to: date | None = None
    record_count: int
    total_gross: Decimal
    total_net: Decimal
    total_tax: Decimal
    total_deductions: Decimal
    total_allowances: Decimal
    average_tax_rate: Decimal

    @classmethod
    def from_summary(
        cls,
        summary: PayrollSummary,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> "PayrollSummaryResponse":
        return cls(
            date_from=date_from,
            date_to=date_to,
            record_count=summary.record_count,
            total_gross=summary.total_gross,
            total_net=summary.total_net,
            total_tax=summary.total_tax,
            total_deductions=summary.total_deductions,
            total_allowances=summary.total_allowances,
            average_tax_rate=summary.average_tax_rate,
        )


# ============================================================================
# Tax rule schemas
# ============================================================================


class TaxRuleCreate(BaseModel):
    """Schema for creating a tax bracket."""

    name: str = Field(min_length=1)
    rate: Decimal = Field(ge=0, le=Decimal("9.9999"), max_digits=5, decimal_places=4)
    threshold_min: Decimal = Field(default=Decimal("0"), ge=0)
    threshold_max: Decimal | None = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_thresholds(self) -> "TaxRuleCreate":
        if self.threshold_max is not None and self.threshold_max <= self.threshold_min:
            raise ValueError("threshold_max must be greater than threshold_min")
        return self


class TaxRuleResponse(BaseModel):
    """Schema for tax rule response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    rate: Decimal
    threshold_min: Decimal
    threshold_max: Decimal | None = None
    is_active: bool


class TaxRuleValidationResponse(BaseModel):
    """Schema for tax rule set validation."""

    valid: bool
    issues: list[str]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
