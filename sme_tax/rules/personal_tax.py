"""Personal income tax for individuals, including Enterprise owners.

Example, RM25,000 chargeable income on the YA2024-2025 schedule:
RM0-5,000 at 0% + RM5,000-20,000 at 1% (RM150) + RM20,000-25,000 at 3%
(RM150) = RM300.
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from sme_tax.rules.progressive import calculate_progressive_tax, get_progressive_tax_breakdown
from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import Number, round_to_ringgit, to_decimal

logger = logging.getLogger(__name__)

PERSONAL_TAX_BRACKETS = get_current_tax_year().personal.brackets

_SOLVER_TOLERANCE = Decimal("1")  # RM1
_SOLVER_MAX_ITERATIONS = 50


class PersonalBracketBreakdown(NamedTuple):
    bracket_min: Decimal
    bracket_max: Decimal | None
    rate: Decimal
    income_in_bracket: Decimal
    tax_for_bracket: Decimal


def calculate_personal_tax_from_brackets(
    taxable_income: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Personal tax on chargeable income (after reliefs), rounded to 2 dp."""
    config = tax_year or get_current_tax_year()
    return calculate_progressive_tax(taxable_income, config.personal.brackets)


def get_personal_tax_bracket_breakdown(
    taxable_income: Number,
    tax_year: TaxYearConfig | None = None,
) -> list[PersonalBracketBreakdown]:
    config = tax_year or get_current_tax_year()
    return [
        PersonalBracketBreakdown(
            bracket_min=item.bracket_min,
            bracket_max=item.bracket_max,
            rate=item.rate,
            income_in_bracket=item.amount_in_bracket,
            tax_for_bracket=item.tax_for_bracket,
        )
        for item in get_progressive_tax_breakdown(taxable_income, config.personal.brackets)
    ]


def calculate_required_income_for_net_cash(
    target_net_cash: Number,
    total_reliefs: Number = Decimal("9000"),
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Find the gross income whose after-tax cash equals ``target_net_cash``.

    Bisection over [target, 2 x target], widened to 3 x target when net cash
    at the upper bound still falls short. Relies on net cash rising with
    gross income, which holds for any schedule with rates below 100%. Stops
    once the window is within RM1 or after 50 iterations.

    Args:
        target_net_cash: Desired annual cash after personal tax.
        total_reliefs: Reliefs deducted before applying the schedule.
        tax_year: Schedule to use; defaults to the current YA.

    Returns:
        Required gross income rounded to a whole ringgit; 0 for a
        non-positive target.
    """
    target = to_decimal(target_net_cash)
    if target <= 0:
        return Decimal("0")

    reliefs = to_decimal(total_reliefs)

    def net_cash(gross: Decimal) -> Decimal:
        taxable = max(Decimal("0"), gross - reliefs)
        return gross - calculate_personal_tax_from_brackets(taxable, tax_year)

    low = target
    high = target * 2
    if net_cash(high) < target:
        high = target * 3

    iterations = 0
    while high - low > _SOLVER_TOLERANCE and iterations < _SOLVER_MAX_ITERATIONS:
        mid = (low + high) / 2
        if net_cash(mid) < target:
            low = mid
        else:
            high = mid
        iterations += 1

    logger.debug("Net cash solver for %s converged in %d iterations", target, iterations)
    return round_to_ringgit((low + high) / 2)
