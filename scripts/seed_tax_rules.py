"""Seed script for initial tax rules and demo employees.

Run with:
    python scripts/seed_tax_rules.py
    python scripts/seed_tax_rules.py --with-demo-employees

This creates the tables if needed and a three-bracket PAYE rule set.
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_core.database import create_all, get_session
from payroll_core.models import EmployeeModel, TaxRuleModel

MONTHLY_BRACKETS = [
    {"name": "PAYE 18%", "rate": "0.18", "min": "0", "max": "20000"},
    {"name": "PAYE 26%", "rate": "0.26", "min": "20000", "max": "40000"},
    {"name": "PAYE 31%", "rate": "0.31", "min": "40000", "max": None},
]

DEMO_EMPLOYEES = [
    {
        "employee_code": "EMP001",
        "first_name": "Thandi",
        "last_name": "Mokoena",
        "email": "thandi.mokoena@example.com",
        "position": "Accountant",
        "base_salary": "32000",
        "hourly_rate": None,
    },
    {
        "employee_code": "EMP002",
        "first_name": "Pieter",
        "last_name": "van Wyk",
        "email": "pieter.vanwyk@example.com",
        "position": "Technician",
        "base_salary": "8800",
        "hourly_rate": "50",
    },
]


async def seed_tax_rules(session: AsyncSession) -> None:
    """Create the monthly PAYE brackets."""
    result = await session.execute(select(TaxRuleModel).limit(1))
    if result.scalar_one_or_none():
        print("Tax rules already exist, skipping...")
        return

    for bracket in MONTHLY_BRACKETS:
        session.add(
            TaxRuleModel(
                name=bracket["name"],
                rate=Decimal(bracket["rate"]),
                threshold_min=Decimal(bracket["min"]),
                threshold_max=Decimal(bracket["max"]) if bracket["max"] else None,
                is_active=True,
            )
        )
        print(f"Created tax rule {bracket['name']}")
    await session.flush()


async def seed_demo_employees(session: AsyncSession) -> None:
    """Create one salaried and one hourly employee."""
    for data in DEMO_EMPLOYEES:
        result = await session.execute(
            select(EmployeeModel).where(EmployeeModel.employee_code == data["employee_code"])
        )
        if result.scalar_one_or_none():
            print(f"Employee {data['employee_code']} already exists, skipping...")
            continue

        employee = EmployeeModel(
            employee_code=data["employee_code"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            position=data["position"],
            hire_date=date(2025, 1, 1),
            base_salary=Decimal(data["base_salary"]),
            hourly_rate=Decimal(data["hourly_rate"]) if data["hourly_rate"] else None,
            is_active=True,
        )
        session.add(employee)
        await session.flush()
        print(f"Created employee {data['employee_code']} ({employee.id})")


async def main(with_demo_employees: bool) -> None:
    """Run all seed functions."""
    await create_all()
    async with get_session() as session:
        await seed_tax_rules(session)
        if with_demo_employees:
            await seed_demo_employees(session)
    print("Seeding complete!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed tax rules")
    parser.add_argument(
        "--with-demo-employees",
        action="store_true",
        help="Also create demo employees",
    )
    args = parser.parse_args()
    asyncio.run(main(args.with_demo_employees))
