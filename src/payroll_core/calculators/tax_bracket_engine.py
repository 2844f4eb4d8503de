"""Progressive tax bracket calculation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal

from payroll_core.calculators.money import ZERO
from payroll_core.calculators.types import BracketContribution, TaxRule
from payroll_core.exceptions import InvalidTaxRuleSetError

logger = logging.getLogger(__name__)


class TaxBracketEngine:
    """Computes tax owed on a gross amount from a set of bracket rules.

    Each active rule is evaluated on its own against the full gross amount:

        taxable = min(gross, threshold_max) - threshold_min   (if gross > threshold_min)
        tax    += taxable * rate

    This equals marginal taxation only when the active brackets partition the
    income axis without gaps or overlaps. By default the engine does not check
    that; pass ``strict=True`` to reject malformed rule sets before computing.

    The engine holds no per-call state and never rounds.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def compute_tax(self, gross: Decimal, rules: Iterable[TaxRule]) -> Decimal:
        """Return total tax owed on ``gross``.

        Rules may be supplied in any order. Inactive rules are ignored.
        Returns 0 when no rule is active.
        """
        return sum(
            (c.tax for c in self._contributions(gross, rules)),
            start=ZERO,
        )

    def breakdown(self, gross: Decimal, rules: Iterable[TaxRule]) -> list[BracketContribution]:
        """Return the per-bracket contributions, lowest bracket first.

        Brackets that gross does not reach are omitted.
        """
        contributions = self._contributions(gross, rules)
        return sorted(contributions, key=lambda c: c.rule.threshold_min)

    def _contributions(
        self, gross: Decimal, rules: Iterable[TaxRule]
    ) -> list[BracketContribution]:
        if gross < 0:
            raise ValueError(f"Gross amount must not be negative, got {gross}")

        active = [r for r in rules if r.is_active]
        if self.strict:
            issues = validate_rule_set(active)
            if issues:
                raise InvalidTaxRuleSetError(issues)

        contributions: list[BracketContribution] = []
        for rule in active:
            bracket_min = rule.threshold_min or ZERO
            if gross <= bracket_min:
                continue

            upper = gross if rule.is_unbounded else min(gross, rule.threshold_max)
            taxable = upper - bracket_min
            tax = taxable * rule.rate
            contributions.append(
                BracketContribution(
                    rule=rule,
                    taxable_amount=taxable,
                    tax=tax,
                    explanation=_explain(rule, taxable),
                )
            )

        logger.debug(
            "Computed tax on %s across %d of %d active brackets",
            gross,
            len(contributions),
            len(active),
        )
        return contributions


def _explain(rule: TaxRule, taxable: Decimal) -> str:
    label = rule.name or "Bracket"
    upper = "and above" if rule.is_unbounded else f"to {rule.threshold_max}"
    return f"{label}: {taxable} @ {rule.rate} ({rule.threshold_min} {upper})"


def validate_rule_set(rules: Sequence[TaxRule]) -> list[str]:
    """Check that the active brackets tile the income axis.

    Returns list of issue messages (empty if the rule set is well formed).
    Inactive rules are skipped.
    """
    issues: list[str] = []
    active = sorted((r for r in rules if r.is_active), key=lambda r: r.threshold_min)

    for rule in active:
        label = rule.name or f"bracket starting at {rule.threshold_min}"
        if rule.rate < 0:
            issues.append(f"{label} has negative rate {rule.rate}")
        if rule.threshold_min < 0:
            issues.append(f"{label} has negative threshold_min {rule.threshold_min}")
        if not rule.is_unbounded and rule.threshold_max <= rule.threshold_min:
            issues.append(
                f"{label} has threshold_max {rule.threshold_max} "
                f"not above threshold_min {rule.threshold_min}"
            )

    if not active:
        return issues

    if active[0].threshold_min != 0:
        issues.append(
            f"Lowest bracket starts at {active[0].threshold_min}, income below it is untaxed"
        )

    for current, following in zip(active, active[1:]):
        if current.is_unbounded:
            issues.append(
                f"Unbounded bracket starting at {current.threshold_min} "
                f"overlaps bracket starting at {following.threshold_min}"
            )
        elif current.threshold_max < following.threshold_min:
            issues.append(
                f"Gap between {current.threshold_max} and {following.threshold_min}"
            )
        elif current.threshold_max > following.threshold_min:
            issues.append(
                f"Overlap between {following.threshold_min} and {current.threshold_max}"
            )

    return issues
