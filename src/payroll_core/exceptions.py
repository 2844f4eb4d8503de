"""Payroll errors.

Every error here is raised by local validation before any money is computed
and is not retryable without fixing the data.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID


class PayrollError(Exception):
    """Base class for payroll errors."""

    code = "PAYROLL_ERROR"

    def context(self) -> dict[str, Any]:
        return {}


class InvalidEmployeeState(PayrollError):
    """Employee is inactive or has no usable compensation basis."""

    code = "INVALID_EMPLOYEE_STATE"

    def __init__(self, employee_id: UUID | None, reason: str):
        self.employee_id = employee_id
        self.reason = reason
        super().__init__(f"Employee {employee_id}: {reason}")

    def context(self) -> dict[str, Any]:
        return {"employee_id": str(self.employee_id) if self.employee_id else None}


class InvalidPeriodInput(PayrollError):
    """Pay period input failed validation."""

    code = "INVALID_PERIOD_INPUT"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} ({value}): {reason}")

    def context(self) -> dict[str, Any]:
        return {"field": self.field, "value": str(self.value)}


class InvalidTaxRuleSetError(PayrollError):
    """Active tax brackets do not partition the income axis."""

    code = "INVALID_TAX_RULE_SET"

    def __init__(self, issues: list[str]):
        self.issues = list(issues)
        super().__init__("Invalid tax rule set: " + "; ".join(self.issues))

    def context(self) -> dict[str, Any]:
        return {"issues": self.issues}


class EmployeeNotFoundError(PayrollError):
    """Raised when an employee does not exist in the datastore."""

    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: UUID):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")

    def context(self) -> dict[str, Any]:
        return {"employee_id": str(self.employee_id)}


class PayrollRecordExistsError(PayrollError):
    """A payroll record already exists for the employee and pay period."""

    code = "PAYROLL_RECORD_EXISTS"

    def __init__(self, employee_id: UUID, period_start: date, period_end: date):
        self.employee_id = employee_id
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"Payroll for employee {employee_id} already generated "
            f"for {period_start} to {period_end}"
        )

    def context(self) -> dict[str, Any]:
        return {
            "employee_id": str(self.employee_id),
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
        }
