"""Tax rule and payroll record models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_core.calculators.types import PayrollRecord, TaxRule
from payroll_core.models.base import Base, Money, TimestampMixin, UpdatedAtMixin

if TYPE_CHECKING:
    from payroll_core.models.employee import EmployeeModel


class TaxRuleModel(Base, TimestampMixin, UpdatedAtMixin):
    """Tax bracket definition."""

    __tablename__ = "tax_rules"
    __table_args__ = (
        CheckConstraint("rate >= 0", name="tax_rules_rate_check"),
        CheckConstraint("threshold_min >= 0", name="tax_rules_threshold_min_check"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(5, 4), nullable=False)
    threshold_min: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    threshold_max: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_snapshot(self) -> TaxRule:
        """Convert to an immutable TaxRule for calculation."""
        return TaxRule(
            rate=self.rate,
            threshold_min=self.threshold_min if self.threshold_min is not None else Decimal("0"),
            threshold_max=self.threshold_max,
            is_active=self.is_active,
            name=self.name,
            rule_id=self.id,
        )


class PayrollRecordModel(Base, TimestampMixin):
    """Persisted payroll result. Immutable once written."""

    __tablename__ = "payroll_records"
    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "pay_period_start",
            "pay_period_end",
            name="payroll_records_employee_period_key",
        ),
        CheckConstraint(
            "pay_period_start <= pay_period_end", name="payroll_records_period_check"
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employees.id"),
        nullable=False,
        index=True,
    )
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    compensation_basis: Mapped[str] = mapped_column(String, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    overtime_hours: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    gross_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    allowances: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    deductions: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    tax_deductions: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0"))
    net_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)

    # Traceability
    calculation_id: Mapped[UUID] = mapped_column(nullable=False)
    inputs_fingerprint: Mapped[str] = mapped_column(String(32), nullable=False)
    rules_fingerprint: Mapped[str] = mapped_column(String(32), nullable=False)
    engine_version: Mapped[str] = mapped_column(String, nullable=False)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    # Relationships
    employee: Mapped[EmployeeModel] = relationship(back_populates="payroll_records")

    @classmethod
    def from_record(
        cls, record: PayrollRecord, created_by: UUID | None = None
    ) -> PayrollRecordModel:
        """Build a row from a calculated record, copying every value verbatim."""
        return cls(
            employee_id=record.employee_id,
            pay_period_start=record.period_start,
            pay_period_end=record.period_end,
            compensation_basis=record.compensation_basis.value,
            hours_worked=record.hours_worked,
            overtime_hours=record.overtime_hours,
            gross_salary=record.gross_salary,
            allowances=record.allowances,
            deductions=record.deductions,
            tax_deductions=record.tax_deductions,
            net_salary=record.net_salary,
            calculation_id=record.calculation_id,
            inputs_fingerprint=record.inputs_fingerprint,
            rules_fingerprint=record.rules_fingerprint,
            engine_version=record.engine_version,
            created_by=created_by,
        )
