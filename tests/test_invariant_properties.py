"""Property-based tests for the tax and payroll invariants.

These tests use hypothesis to generate gross amounts, period inputs and
rule orderings, and check the relationships that must hold for any of
them.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from hypothesis import given, settings, strategies as st

from payroll_core.calculators import (
    HourlyEmployee,
    PayPeriodInput,
    PayrollCalculator,
    SalariedEmployee,
    TaxBracketEngine,
    TaxRule,
)

BRACKETS = [
    TaxRule(rate=Decimal("0.18"), threshold_min=Decimal("0"), threshold_max=Decimal("20000")),
    TaxRule(rate=Decimal("0.26"), threshold_min=Decimal("20000"), threshold_max=Decimal("40000")),
    TaxRule(rate=Decimal("0.31"), threshold_min=Decimal("40000"), threshold_max=None),
]
TOP_RATE = Decimal("0.31")

EMPLOYEE_ID = UUID("00000000-0000-0000-0000-000000000001")

amounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("1000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
hours = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("400"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)


def period(hours_worked, overtime_hours, allowances, deductions) -> PayPeriodInput:
    return PayPeriodInput(
        employee_id=EMPLOYEE_ID,
        period_start=date(2025, 10, 1),
        period_end=date(2025, 10, 31),
        hours_worked=hours_worked,
        overtime_hours=overtime_hours,
        allowances=allowances,
        deductions=deductions,
    )


class TestTaxProperties:
    """Tax on well-formed brackets."""

    @given(first=amounts, second=amounts)
    @settings(max_examples=100)
    def test_tax_is_monotonic_in_gross(self, first, second):
        engine = TaxBracketEngine()
        low, high = sorted((first, second))
        assert engine.compute_tax(low, BRACKETS) <= engine.compute_tax(high, BRACKETS)

    @given(gross=amounts)
    @settings(max_examples=100)
    def test_tax_bounded_by_gross_and_top_rate(self, gross):
        engine = TaxBracketEngine()
        tax = engine.compute_tax(gross, BRACKETS)
        assert Decimal("0") <= tax <= gross * TOP_RATE

    @given(gross=amounts)
    @settings(max_examples=100)
    def test_breakdown_sums_to_tax(self, gross):
        engine = TaxBracketEngine()
        lines = engine.breakdown(gross, BRACKETS)
        assert sum((line.tax for line in lines), Decimal("0")) == engine.compute_tax(gross, BRACKETS)

    @given(gross=amounts, ordering=st.permutations(BRACKETS))
    @settings(max_examples=50)
    def test_rule_order_irrelevant(self, gross, ordering):
        engine = TaxBracketEngine()
        assert engine.compute_tax(gross, ordering) == engine.compute_tax(gross, BRACKETS)


class TestPayrollProperties:
    """Record-level invariants for any valid period input."""

    @given(
        hours_worked=hours,
        overtime_hours=hours,
        allowances=amounts,
        deductions=amounts,
        rate=st.decimals(min_value=Decimal("0.01"), max_value=Decimal("2000"), places=2),
    )
    @settings(max_examples=100)
    def test_net_identity_hourly(self, hours_worked, overtime_hours, allowances, deductions, rate):
        calculator = PayrollCalculator()
        employee = HourlyEmployee(employee_id=EMPLOYEE_ID, hourly_rate=rate)

        record = calculator.generate_payroll(
            employee, period(hours_worked, overtime_hours, allowances, deductions), BRACKETS
        )

        assert record.net_salary == (
            record.gross_salary - record.tax_deductions - record.deductions
        )
        assert record.gross_salary >= allowances

    @given(
        hours_worked=hours,
        allowances=amounts,
        salary=st.decimals(min_value=Decimal("0.01"), max_value=Decimal("500000"), places=2),
    )
    @settings(max_examples=100)
    def test_salaried_gross_ignores_hours(self, hours_worked, allowances, salary):
        calculator = PayrollCalculator()
        employee = SalariedEmployee(employee_id=EMPLOYEE_ID, base_salary=salary)

        record = calculator.generate_payroll(
            employee, period(hours_worked, Decimal("0"), allowances, Decimal("0")), BRACKETS
        )

        assert record.gross_salary == salary + allowances

    @given(hours_worked=hours, ordering=st.permutations(BRACKETS))
    @settings(max_examples=50)
    def test_calculation_id_stable_across_rule_order(self, hours_worked, ordering):
        calculator = PayrollCalculator()
        employee = HourlyEmployee(employee_id=EMPLOYEE_ID, hourly_rate=Decimal("50"))
        inputs = period(hours_worked, Decimal("0"), Decimal("0"), Decimal("0"))

        first = calculator.generate_payroll(employee, inputs, BRACKETS)
        second = calculator.generate_payroll(employee, inputs, ordering)

        assert first.calculation_id == second.calculation_id
        assert first.net_salary == second.net_salary
