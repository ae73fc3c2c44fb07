"""Dividend surcharge for individuals from YA2025.

Dividend income above RM100,000 a year carries an extra 2% on the excess.
"""

from decimal import Decimal

from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import Number, round_currency, to_decimal

DIVIDEND_TAX_THRESHOLD = get_current_tax_year().dividend.threshold
DIVIDEND_TAX_RATE = get_current_tax_year().dividend.surcharge_rate


def calculate_dividend_tax(
    dividend_amount: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    dividend = (tax_year or get_current_tax_year()).dividend
    amount = to_decimal(dividend_amount)
    if amount <= dividend.threshold:
        return Decimal("0")
    return round_currency((amount - dividend.threshold) * dividend.surcharge_rate)
