"""Payroll calculation core."""

from payroll_core.calculators.payroll_calculator import PayrollCalculator, employee_from_fields
from payroll_core.calculators.tax_bracket_engine import TaxBracketEngine, validate_rule_set
from payroll_core.calculators.types import (
    BracketContribution,
    CompensationBasis,
    Employee,
    HourlyEmployee,
    PayPeriodInput,
    PayrollRecord,
    PayrollSummary,
    SalariedEmployee,
    TaxRule,
)

__all__ = [
    "BracketContribution",
    "CompensationBasis",
    "Employee",
    "HourlyEmployee",
    "PayPeriodInput",
    "PayrollCalculator",
    "PayrollRecord",
    "PayrollSummary",
    "SalariedEmployee",
    "TaxBracketEngine",
    "TaxRule",
    "employee_from_fields",
    "validate_rule_set",
]
