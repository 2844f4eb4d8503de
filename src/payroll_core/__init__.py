"""Payroll computation core: tax brackets, gross/net salary and payroll records."""

__version__ = "0.1.0"
