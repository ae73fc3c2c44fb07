"""SME corporate tax for resident Sdn Bhd companies.

First RM150,000 at 15%, next RM450,000 at 17%, the rest at 24%.
"""

from decimal import Decimal
from typing import NamedTuple

from sme_tax.rules.progressive import calculate_progressive_tax, get_progressive_tax_breakdown
from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import Number

CORPORATE_TAX_BRACKETS = get_current_tax_year().corporate.sme_brackets


class CorporateBracketBreakdown(NamedTuple):
    bracket_min: Decimal
    bracket_max: Decimal | None
    rate: Decimal
    profit_in_bracket: Decimal
    tax_for_bracket: Decimal


def calculate_corporate_tax_from_brackets(
    taxable_profit: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    config = tax_year or get_current_tax_year()
    return calculate_progressive_tax(taxable_profit, config.corporate.sme_brackets)


def get_corporate_tax_bracket_breakdown(
    taxable_profit: Number,
    tax_year: TaxYearConfig | None = None,
) -> list[CorporateBracketBreakdown]:
    """Show how much profit lands in each SME tier and the tax on it."""
    config = tax_year or get_current_tax_year()
    return [
        CorporateBracketBreakdown(
            bracket_min=item.bracket_min,
            bracket_max=item.bracket_max,
            rate=item.rate,
            profit_in_bracket=item.amount_in_bracket,
            tax_for_bracket=item.tax_for_bracket,
        )
        for item in get_progressive_tax_breakdown(taxable_profit, config.corporate.sme_brackets)
    ]
