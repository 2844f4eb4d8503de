"""Type definitions for the payroll calculation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from payroll_core.calculators.money import ZERO


class CompensationBasis(str, Enum):
    """How an employee's gross pay is derived."""

    SALARIED = "salaried"
    HOURLY = "hourly"


@dataclass(frozen=True)
class TaxRule:
    """One tax bracket.

    ``rate`` is a fraction (0.18 for 18%). ``threshold_max`` of None means
    the bracket has no upper limit.
    """

    rate: Decimal
    threshold_min: Decimal = ZERO
    threshold_max: Decimal | None = None
    is_active: bool = True
    name: str = ""
    rule_id: UUID | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.threshold_max is None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "rule_id": str(self.rule_id) if self.rule_id else None,
            "rate": str(self.rate),
            "threshold_min": str(self.threshold_min),
            "threshold_max": str(self.threshold_max) if self.threshold_max is not None else None,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class SalariedEmployee:
    """Employee paid a fixed monthly salary."""

    employee_id: UUID
    base_salary: Decimal
    is_active: bool = True

    @property
    def basis(self) -> CompensationBasis:
        return CompensationBasis.SALARIED


@dataclass(frozen=True)
class HourlyEmployee:
    """Employee paid per hour worked.

    base_salary is carried for reference only and never used for gross.
    """

    employee_id: UUID
    hourly_rate: Decimal
    base_salary: Decimal | None = None
    is_active: bool = True

    @property
    def basis(self) -> CompensationBasis:
        return CompensationBasis.HOURLY


Employee = SalariedEmployee | HourlyEmployee


@dataclass(frozen=True)
class PayPeriodInput:
    """Inputs for one employee's pay period."""

    employee_id: UUID
    period_start: date
    period_end: date
    hours_worked: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    allowances: Decimal = ZERO
    deductions: Decimal = ZERO  # Non-tax deductions (benefits, loans, ...)

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "employee_id": str(self.employee_id),
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "hours_worked": str(self.hours_worked),
            "overtime_hours": str(self.overtime_hours),
            "allowances": str(self.allowances),
            "deductions": str(self.deductions),
        }


@dataclass(frozen=True)
class BracketContribution:
    """Tax contributed by a single bracket."""

    rule: TaxRule
    taxable_amount: Decimal
    tax: Decimal
    explanation: str


@dataclass(frozen=True)
class PayrollRecord:
    """Result of one payroll calculation.

    net_salary == gross_salary - tax_deductions - deductions always holds;
    allowances are already part of gross_salary.
    """

    employee_id: UUID
    period_start: date
    period_end: date
    compensation_basis: CompensationBasis
    hours_worked: Decimal
    overtime_hours: Decimal
    gross_salary: Decimal
    tax_deductions: Decimal
    deductions: Decimal
    allowances: Decimal
    net_salary: Decimal

    # Traceability
    calculation_id: UUID
    inputs_fingerprint: str
    rules_fingerprint: str
    engine_version: str
    tax_breakdown: tuple[BracketContribution, ...] = field(default=(), compare=False)

    @property
    def is_overdrawn(self) -> bool:
        """True when deductions exceed what is left after tax."""
        return self.net_salary < 0


@dataclass
class PayrollSummary:
    """Totals over a set of payroll records."""

    record_count: int = 0
    total_gross: Decimal = ZERO
    total_net: Decimal = ZERO
    total_tax: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_allowances: Decimal = ZERO

    @property
    def average_tax_rate(self) -> Decimal:
        """Total tax as a fraction of total gross (0 when nothing was paid)."""
        if self.total_gross == 0:
            return ZERO
        return self.total_tax / self.total_gross
