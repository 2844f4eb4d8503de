"""Business services."""

from payroll_core.services.payroll_service import (
    PayrollService,
    build_calculator,
    summarize_records,
)

__all__ = [
    "PayrollService",
    "build_calculator",
    "summarize_records",
]
