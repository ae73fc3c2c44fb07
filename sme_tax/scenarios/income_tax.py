"""Personal and corporate tax with effective rates."""

from decimal import Decimal
from typing import NamedTuple

from sme_tax.rules.corporate_tax import calculate_corporate_tax_from_brackets
from sme_tax.rules.personal_tax import calculate_personal_tax_from_brackets
from sme_tax.rules.reliefs import PersonalReliefs, calculate_total_reliefs, get_default_reliefs
from sme_tax.rules.tax_years import TaxYearConfig
from sme_tax.scenarios.validation import require_non_negative
from sme_tax.utils.rounding import Number, round_currency, round_percentage


class PersonalTaxResult(NamedTuple):
    tax: Decimal
    effective_rate: Decimal  # of total income, 4 dp
    taxable_income: Decimal
    total_reliefs: Decimal


class CorporateTaxResult(NamedTuple):
    tax: Decimal
    effective_rate: Decimal


def calculate_personal_tax(
    total_income: Number,
    reliefs: PersonalReliefs | None = None,
    tax_year: TaxYearConfig | None = None,
) -> PersonalTaxResult:
    """Personal tax on total income after reliefs.

    Args:
        total_income: Gross income from all sources.
        reliefs: Relief profile; the default profile when omitted.
        tax_year: Schedule to use; defaults to the current YA.

    Raises:
        ValueError: If income is negative or not a finite number.
    """
    income = require_non_negative("Total income", total_income)
    total_reliefs = calculate_total_reliefs(reliefs if reliefs is not None else get_default_reliefs())
    taxable_income = max(Decimal("0"), income - total_reliefs)
    tax = calculate_personal_tax_from_brackets(taxable_income, tax_year)
    effective_rate = tax / income if income > 0 else Decimal("0")

    return PersonalTaxResult(
        tax=round_currency(tax),
        effective_rate=round_percentage(effective_rate),
        taxable_income=round_currency(taxable_income),
        total_reliefs=total_reliefs,
    )


def calculate_corporate_tax(
    taxable_profit: Number,
    tax_year: TaxYearConfig | None = None,
) -> CorporateTaxResult:
    """SME corporate tax on company profit.

    Raises:
        ValueError: If profit is negative or not a finite number.
    """
    profit = require_non_negative("Taxable profit", taxable_profit)
    tax = calculate_corporate_tax_from_brackets(profit, tax_year)
    effective_rate = tax / profit if profit > 0 else Decimal("0")
    return CorporateTaxResult(tax=round_currency(tax), effective_rate=round_percentage(effective_rate))
