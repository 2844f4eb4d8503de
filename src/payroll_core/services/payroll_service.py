"""Payroll service - datastore adapter around the pure calculation core."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_core.calculators import (
    Employee,
    PayPeriodInput,
    PayrollCalculator,
    PayrollRecord,
    PayrollSummary,
    TaxBracketEngine,
    TaxRule,
    validate_rule_set,
)
from payroll_core.calculators.money import ZERO
from payroll_core.config import get_settings
from payroll_core.exceptions import EmployeeNotFoundError, PayrollRecordExistsError
from payroll_core.models import EmployeeModel, PayrollRecordModel, TaxRuleModel

logger = logging.getLogger(__name__)


def build_calculator() -> PayrollCalculator:
    """Create a calculator configured from settings."""
    settings = get_settings()
    return PayrollCalculator(
        tax_engine=TaxBracketEngine(strict=settings.strict_tax_brackets),
        overtime_multiplier=settings.overtime_multiplier,
        engine_version=settings.engine_version,
    )


class PayrollService:
    """Loads snapshots, runs the calculator and stores the results.

    Operations:
    - preview_payroll: Calculate without persisting
    - generate_payroll: Calculate and persist one record per employee/period
    - list_payroll_records / get_payroll_record: Read stored records
    - summarize_payroll: Totals over a date range
    - create_tax_rule / validate_active_rules: Tax rule maintenance

    The caller owns the transaction; this service only flushes.
    """

    def __init__(self, session: AsyncSession, calculator: PayrollCalculator | None = None):
        self.session = session
        self.calculator = calculator or build_calculator()

    async def get_active_tax_rules(self) -> tuple[TaxRule, ...]:
        """Snapshot of active tax rules, lowest threshold first."""
        result = await self.session.execute(
            select(TaxRuleModel)
            .where(TaxRuleModel.is_active.is_(True))
            .order_by(TaxRuleModel.threshold_min)
        )
        return tuple(row.to_snapshot() for row in result.scalars().all())

    async def list_tax_rules(self, include_inactive: bool = False) -> list[TaxRuleModel]:
        query = select(TaxRuleModel).order_by(TaxRuleModel.threshold_min)
        if not include_inactive:
            query = query.where(TaxRuleModel.is_active.is_(True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_tax_rule(
        self,
        name: str,
        rate: Decimal,
        threshold_min: Decimal = ZERO,
        threshold_max: Decimal | None = None,
        is_active: bool = True,
    ) -> TaxRuleModel:
        """Add a tax bracket."""
        row = TaxRuleModel(
            name=name,
            rate=rate,
            threshold_min=threshold_min,
            threshold_max=threshold_max,
            is_active=is_active,
        )
        self.session.add(row)
        await self.session.flush()
        logger.info("Created tax rule %s (%s) rate=%s", row.id, name, rate)
        return row

    async def validate_active_rules(self) -> list[str]:
        """Data-quality issues in the active rule set."""
        return validate_rule_set(await self.get_active_tax_rules())

    async def get_employee(self, employee_id: UUID) -> Employee:
        """Load an employee as a compensation snapshot."""
        row = await self.session.get(EmployeeModel, employee_id)
        if row is None:
            raise EmployeeNotFoundError(employee_id)
        return row.to_snapshot()

    async def preview_payroll(self, period_input: PayPeriodInput) -> PayrollRecord:
        """Calculate payroll for one employee without storing it."""
        employee = await self.get_employee(period_input.employee_id)
        rules = await self.get_active_tax_rules()
        return self.calculator.generate_payroll(employee, period_input, rules)

    async def generate_payroll(
        self,
        period_input: PayPeriodInput,
        created_by: UUID | None = None,
    ) -> tuple[PayrollRecord, PayrollRecordModel]:
        """Calculate and persist payroll for one employee and pay period.

        Raises PayrollRecordExistsError if the period was already generated.
        """
        existing = await self._find_record(
            period_input.employee_id, period_input.period_start, period_input.period_end
        )
        if existing is not None:
            raise PayrollRecordExistsError(
                period_input.employee_id, period_input.period_start, period_input.period_end
            )

        record = await self.preview_payroll(period_input)
        row = PayrollRecordModel.from_record(record, created_by=created_by)
        try:
            # On conflict only this insert is undone
            async with self.session.begin_nested():
                self.session.add(row)
                await self.session.flush()
        except IntegrityError as e:
            raise PayrollRecordExistsError(
                period_input.employee_id, period_input.period_start, period_input.period_end
            ) from e

        logger.info(
            "Stored payroll record %s (calculation %s) for employee %s",
            row.id,
            record.calculation_id,
            record.employee_id,
        )
        return record, row

    async def get_payroll_record(self, record_id: UUID) -> PayrollRecordModel | None:
        return await self.session.get(PayrollRecordModel, record_id)

    async def list_payroll_records(
        self,
        employee_id: UUID | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[PayrollRecordModel], int]:
        """List stored records, newest period first. Returns (items, total)."""
        query = self._filtered_records(employee_id, date_from, date_to)

        count_query = select(func.count()).select_from(query.subquery())
        total = await self.session.scalar(count_query) or 0

        query = query.order_by(
            PayrollRecordModel.pay_period_start.desc(), PayrollRecordModel.created_at.desc()
        )
        query = query.offset((page - 1) * page_size).limit(page_size)
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def summarize_payroll(
        self,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> PayrollSummary:
        """Totals for records whose period starts within the range."""
        result = await self.session.execute(
            self._filtered_records(None, date_from, date_to)
        )
        return summarize_records(result.scalars().all())

    def _filtered_records(
        self,
        employee_id: UUID | None,
        date_from: date | None,
        date_to: date | None,
    ):
        query = select(PayrollRecordModel)
        if employee_id:
            query = query.where(PayrollRecordModel.employee_id == employee_id)
        if date_from:
            query = query.where(PayrollRecordModel.pay_period_start >= date_from)
        if date_to:
            query = query.where(PayrollRecordModel.pay_period_start <= date_to)
        return query

    async def _find_record(
        self, employee_id: UUID, period_start: date, period_end: date
    ) -> PayrollRecordModel | None:
        result = await self.session.execute(
            select(PayrollRecordModel).where(
                PayrollRecordModel.employee_id == employee_id,
                PayrollRecordModel.pay_period_start == period_start,
                PayrollRecordModel.pay_period_end == period_end,
            )
        )
        return result.scalar_one_or_none()


def summarize_records(records) -> PayrollSummary:
    """Sum money fields over records (stored rows or calculated records)."""
    summary = PayrollSummary()
    for record in records:
        summary.record_count += 1
        summary.total_gross += record.gross_salary
        summary.total_net += record.net_salary
        summary.total_tax += record.tax_deductions
        summary.total_deductions += record.deductions
        summary.total_allowances += record.allowances
    return summary
