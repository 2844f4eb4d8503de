"""SQLAlchemy models for the payroll datastore."""

from payroll_core.models.base import Base, TimestampMixin, UpdatedAtMixin
from payroll_core.models.employee import EmployeeModel
from payroll_core.models.payroll import PayrollRecordModel, TaxRuleModel

__all__ = [
    "Base",
    "EmployeeModel",
    "PayrollRecordModel",
    "TaxRuleModel",
    "TimestampMixin",
    "UpdatedAtMixin",
]
