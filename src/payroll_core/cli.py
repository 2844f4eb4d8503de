"""Payroll Command Line Interface.

Computes payslips from a JSON tax rule file without a database.

Usage:
    python -m payroll_core.cli calculate --rules rules.json --hourly-rate 50 --hours 176 --overtime 5
    python -m payroll_core.cli calculate --rules rules.json --salary 25000 --allowances 500 --json
    python -m payroll_core.cli validate-rules --rules rules.json

Rule file format (a list, or an object with a "rules" list):
    [
        {"name": "18%", "rate": "0.18", "threshold_min": 0, "threshold_max": 20000},
        {"name": "26%", "rate": "0.26", "threshold_min": 20000, "threshold_max": null}
    ]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable
from uuid import UUID, uuid4

from payroll_core.calculators import (
    PayPeriodInput,
    PayrollCalculator,
    PayrollRecord,
    TaxBracketEngine,
    TaxRule,
    employee_from_fields,
    validate_rule_set,
)
from payroll_core.calculators.money import ZERO, format_money, round_to_cents, to_money
from payroll_core.config import configure_logging, get_settings
from payroll_core.exceptions import PayrollError

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def parse_money(s: str) -> Decimal:
    """Parse a money argument."""
    try:
        return to_money(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def load_rules(path: Path) -> list[TaxRule]:
    """Load tax rules from a JSON file."""
    with path.open(encoding="utf-8") as f:
        payload = json.load(f)

    entries = payload.get("rules", []) if isinstance(payload, dict) else payload
    rules = []
    for entry in entries:
        threshold_max = entry.get("threshold_max")
        rules.append(
            TaxRule(
                rate=to_money(entry["rate"]),
                threshold_min=to_money(entry.get("threshold_min"), default=ZERO),
                threshold_max=to_money(threshold_max) if threshold_max is not None else None,
                is_active=entry.get("is_active", True),
                name=entry.get("name", ""),
                rule_id=UUID(entry["id"]) if entry.get("id") else None,
            )
        )
    return rules


class PayrollCli:
    """Payroll Command Line Interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m payroll_core.cli",
            description="Payroll calculation tools",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Logging level (default: LOG_LEVEL setting)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # calculate command
        calculate = subparsers.add_parser(
            "calculate",
            help="Calculate gross, tax and net pay for one period",
        )
        calculate.add_argument(
            "--rules",
            type=Path,
            required=True,
            help="JSON file with tax brackets",
        )
        basis = calculate.add_mutually_exclusive_group(required=True)
        basis.add_argument(
            "--salary",
            type=parse_money,
            help="Monthly base salary (salaried employee)",
        )
        basis.add_argument(
            "--hourly-rate",
            type=parse_money,
            help="Hourly rate (hourly employee)",
        )
        calculate.add_argument(
            "--hours",
            type=parse_money,
            default=ZERO,
            help="Regular hours worked (ignored for salaried employees)",
        )
        calculate.add_argument(
            "--overtime",
            type=parse_money,
            default=ZERO,
            help="Overtime hours (ignored for salaried employees)",
        )
        calculate.add_argument(
            "--allowances",
            type=parse_money,
            default=ZERO,
            help="Taxable allowances added to gross",
        )
        calculate.add_argument(
            "--deductions",
            type=parse_money,
            default=ZERO,
            help="Non-tax deductions",
        )
        calculate.add_argument(
            "--period-start",
            type=parse_date,
            default=None,
            help="Pay period start (default: first day of this month)",
        )
        calculate.add_argument(
            "--period-end",
            type=parse_date,
            default=None,
            help="Pay period end (default: today)",
        )
        calculate.add_argument(
            "--strict",
            action="store_true",
            help="Reject rule sets with gaps or overlaps",
        )
        calculate.add_argument(
            "--json",
            action="store_true",
            help="Output JSON with full-precision amounts",
        )

        # validate-rules command
        validate = subparsers.add_parser(
            "validate-rules",
            help="Check a rule file for gaps, overlaps and malformed brackets",
        )
        validate.add_argument(
            "--rules",
            type=Path,
            required=True,
            help="JSON file with tax brackets",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)
        configure_logging(parsed.log_level)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "calculate": self._cmd_calculate,
            "validate-rules": self._cmd_validate_rules,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Calculate one payslip."""
        settings = get_settings()
        try:
            rules = load_rules(args.rules)
        except (OSError, ValueError, KeyError) as e:
            print(f"ERROR: cannot read rules from {args.rules}: {e}", file=sys.stderr)
            return 1
        logger.debug("Loaded %d tax rules from %s", len(rules), args.rules)

        today = date.today()
        employee_id = uuid4()
        period_input = PayPeriodInput(
            employee_id=employee_id,
            period_start=args.period_start or today.replace(day=1),
            period_end=args.period_end or today,
            hours_worked=args.hours,
            overtime_hours=args.overtime,
            allowances=args.allowances,
            deductions=args.deductions,
        )
        calculator = PayrollCalculator(
            tax_engine=TaxBracketEngine(strict=args.strict or settings.strict_tax_brackets),
            overtime_multiplier=settings.overtime_multiplier,
            engine_version=settings.engine_version,
        )

        try:
            employee = employee_from_fields(
                employee_id=employee_id,
                base_salary=args.salary,
                hourly_rate=args.hourly_rate,
            )
            record = calculator.generate_payroll(employee, period_input, rules)
        except PayrollError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        if args.json:
            print(json.dumps(record_to_dict(record), indent=2))
        else:
            print(render_payslip(record, settings.currency_symbol))
        return 0

    def _cmd_validate_rules(self, args: argparse.Namespace) -> int:
        """Validate a rule file."""
        try:
            rules = load_rules(args.rules)
        except (OSError, ValueError, KeyError) as e:
            print(f"ERROR: cannot read rules from {args.rules}: {e}", file=sys.stderr)
            return 1

        issues = validate_rule_set(rules)
        active = sum(1 for r in rules if r.is_active)
        if not issues:
            print(f"OK: {active} active bracket(s), no issues found")
            return 0

        print(f"{len(issues)} issue(s) found in {active} active bracket(s):")
        for issue in issues:
            print(f"  - {issue}")
        return 1


def record_to_dict(record: PayrollRecord) -> dict[str, Any]:
    """Full-precision JSON view of a calculated record."""
    return {
        "calculation_id": str(record.calculation_id),
        "employee_id": str(record.employee_id),
        "period_start": record.period_start.isoformat(),
        "period_end": record.period_end.isoformat(),
        "compensation_basis": record.compensation_basis.value,
        "hours_worked": str(record.hours_worked),
        "overtime_hours": str(record.overtime_hours),
        "gross_salary": str(record.gross_salary),
        "allowances": str(record.allowances),
        "tax_deductions": str(record.tax_deductions),
        "deductions": str(record.deductions),
        "net_salary": str(record.net_salary),
        "tax_breakdown": [
            {
                "name": c.rule.name,
                "rate": str(c.rule.rate),
                "taxable_amount": str(c.taxable_amount),
                "tax": str(c.tax),
            }
            for c in record.tax_breakdown
        ],
        "inputs_fingerprint": record.inputs_fingerprint,
        "rules_fingerprint": record.rules_fingerprint,
        "engine_version": record.engine_version,
    }


def render_payslip(record: PayrollRecord, currency_symbol: str = "R") -> str:
    """Human-readable payslip. Amounts are rounded here and nowhere else."""

    def money(amount: Decimal) -> str:
        return format_money(amount, currency_symbol).rjust(16)

    lines = [
        "=" * 48,
        f"Payslip {record.period_start} to {record.period_end}",
        f"Basis: {record.compensation_basis.value}",
        "=" * 48,
    ]
    if record.hours_worked or record.overtime_hours:
        lines.append(
            f"Hours: {round_to_cents(record.hours_worked)} regular, "
            f"{round_to_cents(record.overtime_hours)} overtime"
        )
    lines.append(f"{'Allowances':<30}{money(record.allowances)}")
    lines.append(f"{'Gross salary':<30}{money(record.gross_salary)}")
    for c in record.tax_breakdown:
        label = f"  Tax {c.rule.name or c.rule.rate}"
        lines.append(f"{label:<30}{money(c.tax)}")
    lines.append(f"{'Tax deductions':<30}{money(record.tax_deductions)}")
    lines.append(f"{'Other deductions':<30}{money(record.deductions)}")
    lines.append("-" * 48)
    lines.append(f"{'Net salary':<30}{money(record.net_salary)}")
    lines.append(f"Calculation: {record.calculation_id}")
    return "\n".join(lines)


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
