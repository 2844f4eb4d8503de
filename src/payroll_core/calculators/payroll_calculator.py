"""Payroll calculation - gross, tax withholding and net for one pay period."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Sequence
from decimal import Decimal
from uuid import UUID

from payroll_core.calculators.money import ZERO, MoneyLike, to_money
from payroll_core.calculators.tax_bracket_engine import TaxBracketEngine
from payroll_core.calculators.types import (
    Employee,
    HourlyEmployee,
    PayPeriodInput,
    PayrollRecord,
    SalariedEmployee,
    TaxRule,
)
from payroll_core.exceptions import InvalidEmployeeState, InvalidPeriodInput

logger = logging.getLogger(__name__)

DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_ENGINE_VERSION = "1.0.0"


def employee_from_fields(
    employee_id: UUID,
    base_salary: MoneyLike | None,
    hourly_rate: MoneyLike | None = None,
    is_active: bool = True,
) -> Employee:
    """Build a compensation variant from a row with two optional bases.

    A positive hourly rate selects hourly pay; otherwise the employee is
    salaried. Raises InvalidEmployeeState when neither basis is usable.
    """
    rate = to_money(hourly_rate) if hourly_rate is not None else None
    salary = to_money(base_salary) if base_salary is not None else None

    if rate is not None and rate > 0:
        return HourlyEmployee(
            employee_id=employee_id,
            hourly_rate=rate,
            base_salary=salary,
            is_active=is_active,
        )
    if salary is not None and salary > 0:
        return SalariedEmployee(
            employee_id=employee_id,
            base_salary=salary,
            is_active=is_active,
        )
    raise InvalidEmployeeState(employee_id, "no base salary or hourly rate")


class PayrollCalculator:
    """Produces a PayrollRecord for one employee and one pay period.

    Calculation order:
    1) Gross from the compensation basis (hours x rate with overtime, or the
       monthly base salary)
    2) Add allowances to gross (allowances are taxable)
    3) Tax on gross via TaxBracketEngine
    4) Net = gross - tax - deductions

    The calculator is a pure function of its arguments. Active tax rules are
    passed in by the caller as an immutable snapshot.
    """

    def __init__(
        self,
        tax_engine: TaxBracketEngine | None = None,
        overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER,
        engine_version: str = DEFAULT_ENGINE_VERSION,
    ):
        self.tax_engine = tax_engine or TaxBracketEngine()
        self.overtime_multiplier = overtime_multiplier
        self.engine_version = engine_version

    def generate_payroll(
        self,
        employee: Employee,
        period_input: PayPeriodInput,
        active_rules: Sequence[TaxRule],
    ) -> PayrollRecord:
        """Calculate gross, tax and net pay for a single pay period."""
        self._validate_employee(employee)
        self._validate_period_input(employee, period_input)

        gross = self.calculate_gross(employee, period_input) + period_input.allowances

        rules = tuple(active_rules)
        breakdown = self.tax_engine.breakdown(gross, rules)
        tax = sum((c.tax for c in breakdown), start=ZERO)

        net = gross - tax - period_input.deductions
        if net < 0:
            logger.warning(
                "Negative net salary %s for employee %s (%s to %s)",
                net,
                employee.employee_id,
                period_input.period_start,
                period_input.period_end,
            )

        inputs_fingerprint = self._compute_inputs_fingerprint(employee, period_input)
        rules_fingerprint = self._compute_rules_fingerprint(rules)
        calculation_id = self._generate_calculation_id(
            period_input, inputs_fingerprint, rules_fingerprint
        )

        logger.debug(
            "Payroll %s for employee %s: gross=%s tax=%s net=%s",
            calculation_id,
            employee.employee_id,
            gross,
            tax,
            net,
        )

        return PayrollRecord(
            employee_id=employee.employee_id,
            period_start=period_input.period_start,
            period_end=period_input.period_end,
            compensation_basis=employee.basis,
            hours_worked=period_input.hours_worked,
            overtime_hours=period_input.overtime_hours,
            gross_salary=gross,
            tax_deductions=tax,
            deductions=period_input.deductions,
            allowances=period_input.allowances,
            net_salary=net,
            calculation_id=calculation_id,
            inputs_fingerprint=inputs_fingerprint,
            rules_fingerprint=rules_fingerprint,
            engine_version=self.engine_version,
            tax_breakdown=tuple(breakdown),
        )

    def calculate_gross(self, employee: Employee, period_input: PayPeriodInput) -> Decimal:
        """Gross before allowances.

        Salaried employees are paid the monthly base salary regardless of
        hours; the pay period is assumed to be one full month.
        """
        if isinstance(employee, HourlyEmployee):
            regular_pay = period_input.hours_worked * employee.hourly_rate
            overtime_pay = (
                period_input.overtime_hours * employee.hourly_rate * self.overtime_multiplier
            )
            return regular_pay + overtime_pay
        return employee.base_salary

    def _validate_employee(self, employee: Employee) -> None:
        if not employee.is_active:
            raise InvalidEmployeeState(employee.employee_id, "employee is inactive")

        if isinstance(employee, HourlyEmployee):
            rate = employee.hourly_rate
            if rate is None or not rate.is_finite() or rate <= 0:
                raise InvalidEmployeeState(employee.employee_id, "hourly rate must be positive")
        elif isinstance(employee, SalariedEmployee):
            salary = employee.base_salary
            if salary is None or not salary.is_finite() or salary <= 0:
                raise InvalidEmployeeState(employee.employee_id, "base salary must be positive")
        else:
            raise InvalidEmployeeState(
                getattr(employee, "employee_id", None), "unknown compensation basis"
            )

    def _validate_period_input(self, employee: Employee, period_input: PayPeriodInput) -> None:
        if period_input.employee_id != employee.employee_id:
            raise InvalidPeriodInput(
                "employee_id", period_input.employee_id, "does not match employee"
            )
        if period_input.period_start > period_input.period_end:
            raise InvalidPeriodInput(
                "period_end", period_input.period_end, "must not be before period_start"
            )
        for field_name in ("hours_worked", "overtime_hours", "allowances", "deductions"):
            value = getattr(period_input, field_name)
            if not value.is_finite():
                raise InvalidPeriodInput(field_name, value, "must be a finite number")
            if value < 0:
                raise InvalidPeriodInput(field_name, value, "must not be negative")

    def _generate_calculation_id(
        self,
        period_input: PayPeriodInput,
        inputs_fingerprint: str,
        rules_fingerprint: str,
    ) -> UUID:
        """Generate deterministic calculation ID."""
        data = {
            "employee_id": str(period_input.employee_id),
            "period_start": period_input.period_start.isoformat(),
            "period_end": period_input.period_end.isoformat(),
            "engine_version": self.engine_version,
            "inputs_fingerprint": inputs_fingerprint,
            "rules_fingerprint": rules_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])

    def _compute_inputs_fingerprint(
        self, employee: Employee, period_input: PayPeriodInput
    ) -> str:
        """Compute fingerprint of the employee basis and period inputs."""
        data = period_input.to_canonical_dict()
        data["basis"] = employee.basis.value
        data["multiplier"] = str(self.overtime_multiplier)
        if isinstance(employee, HourlyEmployee):
            data["hourly_rate"] = str(employee.hourly_rate)
        else:
            data["base_salary"] = str(employee.base_salary)
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def _compute_rules_fingerprint(self, rules: Sequence[TaxRule]) -> str:
        """Compute fingerprint of the active rule snapshot (order-independent)."""
        canonical = sorted(
            (r.to_canonical_dict() for r in rules if r.is_active),
            key=lambda d: json.dumps(d, sort_keys=True),
        )
        json_str = json.dumps(canonical, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]
