"""Pytest fixtures for payroll core tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_core.calculators import (
    HourlyEmployee,
    PayPeriodInput,
    PayrollCalculator,
    SalariedEmployee,
    TaxBracketEngine,
    TaxRule,
)
from payroll_core.models import Base, EmployeeModel, TaxRuleModel

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# =============================================================================
# Pure calculation fixtures
# =============================================================================


@pytest.fixture
def two_brackets() -> list[TaxRule]:
    """10% up to 1000, 20% above."""
    return [
        TaxRule(rate=Decimal("0.10"), threshold_min=Decimal("0"), threshold_max=Decimal("1000")),
        TaxRule(rate=Decimal("0.20"), threshold_min=Decimal("1000"), threshold_max=None),
    ]


@pytest.fixture
def three_brackets() -> list[TaxRule]:
    """18% / 26% / 31% brackets at 5000 and 8000."""
    return [
        TaxRule(
            rate=Decimal("0.18"),
            threshold_min=Decimal("0"),
            threshold_max=Decimal("5000"),
            name="PAYE 18%",
        ),
        TaxRule(
            rate=Decimal("0.26"),
            threshold_min=Decimal("5000"),
            threshold_max=Decimal("8000"),
            name="PAYE 26%",
        ),
        TaxRule(
            rate=Decimal("0.31"),
            threshold_min=Decimal("8000"),
            threshold_max=None,
            name="PAYE 31%",
        ),
    ]


@pytest.fixture
def hourly_employee() -> HourlyEmployee:
    return HourlyEmployee(employee_id=uuid4(), hourly_rate=Decimal("50"))


@pytest.fixture
def salaried_employee() -> SalariedEmployee:
    return SalariedEmployee(employee_id=uuid4(), base_salary=Decimal("5000"))


@pytest.fixture
def calculator() -> PayrollCalculator:
    return PayrollCalculator(tax_engine=TaxBracketEngine(), engine_version="1.0.0")


def make_period_input(employee_id: UUID, **overrides) -> PayPeriodInput:
    """Build a one-month period input with zero amounts unless overridden."""
    values = {
        "employee_id": employee_id,
        "period_start": date(2025, 10, 1),
        "period_end": date(2025, 10, 31),
        "hours_worked": Decimal("0"),
        "overtime_hours": Decimal("0"),
        "allowances": Decimal("0"),
        "deductions": Decimal("0"),
    }
    values.update(overrides)
    return PayPeriodInput(**values)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
async def engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seeded_rules(session: AsyncSession) -> list[TaxRuleModel]:
    """Monthly brackets: 18% to 20000, 26% to 40000, 31% above."""
    rows = [
        TaxRuleModel(
            name="PAYE 18%",
            rate=Decimal("0.18"),
            threshold_min=Decimal("0"),
            threshold_max=Decimal("20000"),
        ),
        TaxRuleModel(
            name="PAYE 26%",
            rate=Decimal("0.26"),
            threshold_min=Decimal("20000"),
            threshold_max=Decimal("40000"),
        ),
        TaxRuleModel(
            name="PAYE 31%",
            rate=Decimal("0.31"),
            threshold_min=Decimal("40000"),
            threshold_max=None,
        ),
        TaxRuleModel(
            name="Retired bracket",
            rate=Decimal("0.50"),
            threshold_min=Decimal("0"),
            threshold_max=None,
            is_active=False,
        ),
    ]
    session.add_all(rows)
    await session.commit()
    return rows


def _employee(code: str, base_salary: str, hourly_rate: str | None, is_active: bool = True):
    return EmployeeModel(
        employee_code=code,
        first_name="Test",
        last_name=code,
        email=f"{code.lower()}@example.com",
        hire_date=date(2025, 1, 1),
        base_salary=Decimal(base_salary),
        hourly_rate=Decimal(hourly_rate) if hourly_rate else None,
        is_active=is_active,
    )


@pytest.fixture
async def salaried_row(session: AsyncSession) -> EmployeeModel:
    """Salaried employee on 32000 per month."""
    row = _employee("EMP001", "32000", None)
    session.add(row)
    await session.commit()
    return row


@pytest.fixture
async def hourly_row(session: AsyncSession) -> EmployeeModel:
    """Hourly employee at 50 per hour."""
    row = _employee("EMP002", "8800", "50")
    session.add(row)
    await session.commit()
    return row


@pytest.fixture
async def inactive_row(session: AsyncSession) -> EmployeeModel:
    row = _employee("EMP003", "15000", None, is_active=False)
    session.add(row)
    await session.commit()
    return row
