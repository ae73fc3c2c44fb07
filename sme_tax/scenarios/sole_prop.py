"""Enterprise (sole proprietorship) scenario.

All business profit is the owner's personal income. Net cash counts every
income source minus personal tax, so it lines up with the Sdn Bhd figure.
Zakat paid is a rebate against personal tax, capped at the tax.
"""

import logging
from decimal import Decimal

from sme_tax.rules.personal_tax import get_personal_tax_bracket_breakdown
from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.rules.zakat import (
    ZakatCalculationInput,
    ZakatCalculationResult,
    calculate_individual_zakat_rebate,
    calculate_zakat_gross_income,
    calculate_zakat_net_income,
    calculate_zakatable_net_income,
    meets_nisab_threshold,
)
from sme_tax.scenarios.income_tax import calculate_personal_tax
from sme_tax.scenarios.models import (
    SolePropBreakdown,
    SolePropScenarioResult,
    TaxBracketBreakdown,
    TaxCalculationInputs,
)
from sme_tax.scenarios.validation import require_non_negative
from sme_tax.utils.rounding import round_currency, round_percentage

logger = logging.getLogger(__name__)


def _zakatable_income(election: ZakatCalculationInput, total_income: Decimal) -> Decimal:
    """Income the election's method measures against the nisab."""
    if election.method == "net_income":
        return calculate_zakatable_net_income(total_income, election.deductions)
    return total_income


def _individual_zakat_amount(
    election: ZakatCalculationInput,
    total_income: Decimal,
    tax_year: TaxYearConfig | None,
) -> Decimal:
    """Zakat the owner pays: the declared amount, or computed by method."""
    if election.amount_paid is not None or not election.auto_calculate:
        return round_currency(election.amount_paid or 0)

    if election.method == "net_income":
        return calculate_zakat_net_income(total_income, election.deductions, tax_year)
    if election.method == "working_capital":
        logger.warning("Working capital zakat needs amount_paid; using gross income method")
    return calculate_zakat_gross_income(total_income, tax_year)


def calculate_sole_prop_scenario(
    inputs: TaxCalculationInputs,
    tax_year: TaxYearConfig | None = None,
) -> SolePropScenarioResult:
    """Net cash to an Enterprise owner.

    Raises:
        ValueError: If business profit or other income is negative.
    """
    config = tax_year or get_current_tax_year()
    business_profit = require_non_negative("Business profit", inputs.business_profit)
    other_income = require_non_negative("Other income", inputs.other_income)
    total_income = business_profit + other_income

    personal = calculate_personal_tax(total_income, inputs.reliefs, config)
    tax_before_zakat = personal.tax

    zakat_result: ZakatCalculationResult | None = None
    zakat_amount = Decimal("0")
    zakat_rebate = Decimal("0")
    election = inputs.zakat
    if election is not None and election.enabled:
        zakat_amount = _individual_zakat_amount(election, total_income, config)
        rebate = calculate_individual_zakat_rebate(zakat_amount, tax_before_zakat)
        zakat_rebate = rebate.rebate
        zakat_result = ZakatCalculationResult(
            zakat_amount=zakat_amount,
            meets_nisab=meets_nisab_threshold(_zakatable_income(election, total_income), config),
            nisab_threshold=config.zakat.nisab_threshold,
            tax_rebate=zakat_rebate,
            excess_zakat=rebate.excess_zakat,
            net_tax_impact=zakat_rebate,
            method=election.method,
        )

    final_tax = max(Decimal("0"), tax_before_zakat - zakat_rebate)
    net_cash = total_income - final_tax - zakat_amount
    effective_rate = final_tax / total_income if total_income > 0 else Decimal("0")

    logger.debug("Enterprise scenario: income=%s tax=%s net_cash=%s", total_income, final_tax, net_cash)

    return SolePropScenarioResult(
        personal_tax=round_currency(final_tax),
        net_cash=round_currency(net_cash),
        effective_tax_rate=round_percentage(effective_rate),
        breakdown=SolePropBreakdown(
            business_profit=round_currency(business_profit),
            other_income=round_currency(other_income),
            total_income=round_currency(total_income),
            total_reliefs=personal.total_reliefs,
            taxable_income=personal.taxable_income,
        ),
        tax_bracket_breakdown=[
            TaxBracketBreakdown(**item._asdict())
            for item in get_personal_tax_bracket_breakdown(personal.taxable_income, config)
        ],
        zakat=zakat_result,
        tax_before_zakat_rebate=round_currency(tax_before_zakat) if zakat_result else None,
    )
