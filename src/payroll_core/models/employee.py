"""Employee model (owned by HR, read-only for payroll)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_core.calculators.payroll_calculator import employee_from_fields
from payroll_core.calculators.types import Employee
from payroll_core.models.base import Base, Money, TimestampMixin, UpdatedAtMixin

if TYPE_CHECKING:
    from payroll_core.models.payroll import PayrollRecordModel


class EmployeeModel(Base, TimestampMixin, UpdatedAtMixin):
    """Employee record."""

    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("base_salary >= 0", name="employees_base_salary_check"),
        CheckConstraint(
            "hourly_rate IS NULL OR hourly_rate >= 0", name="employees_hourly_rate_check"
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_code: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    payroll_records: Mapped[list[PayrollRecordModel]] = relationship(
        back_populates="employee"
    )

    def to_snapshot(self) -> Employee:
        """Convert to the calculator's compensation variant."""
        return employee_from_fields(
            employee_id=self.id,
            base_salary=self.base_salary,
            hourly_rate=self.hourly_rate,
            is_active=self.is_active,
        )
