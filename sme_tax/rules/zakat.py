"""Zakat on income and business, and its tax treatment.

Zakat is 2.5% of income once income reaches the nisab (85g of gold).

Tax treatment differs by structure:
- Individual / Enterprise: zakat paid is a rebate against tax payable
  (ITA 1967 s6A(3)), capped at the tax itself.
- Company / Sdn Bhd: zakat paid is a deduction from aggregate income
  (ITA 1967 s44(11A)), capped at 2.5% of aggregate income.

Nisab values here are averages; state zakat authorities (PPZ-MAIWP, MAIS,
...) publish their own.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel

from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import Number, round_currency, to_decimal

ZAKAT_RATE = get_current_tax_year().zakat.rate
ZAKAT_NISAB = get_current_tax_year().zakat.nisab_threshold

ZakatMethod = Literal["gross_income", "net_income", "working_capital"]


class ZakatDeductions(BaseModel):
    """Amounts removed from gross income under the net income method."""

    epf: Decimal | None = None
    expenses: Decimal | None = None
    other: Decimal | None = None


class ZakatCalculationInput(BaseModel):
    """A taxpayer's zakat election for one calculation run.

    With ``amount_paid`` unset and ``auto_calculate`` on, zakat is computed
    at the zakat rate by ``method``.
    """

    enabled: bool = False
    amount_paid: Decimal | None = None
    auto_calculate: bool = True
    method: ZakatMethod = "gross_income"
    deductions: ZakatDeductions | None = None


class ZakatCalculationResult(BaseModel):
    zakat_amount: Decimal
    meets_nisab: bool
    nisab_threshold: Decimal
    tax_rebate: Decimal | None = None  # individuals
    tax_deduction: Decimal | None = None  # companies
    excess_zakat: Decimal = Decimal("0")
    net_tax_impact: Decimal  # reduction in tax payable
    method: ZakatMethod


class IndividualZakatRebate(NamedTuple):
    rebate: Decimal
    net_tax: Decimal
    excess_zakat: Decimal  # paid beyond tax payable, not refundable


class BusinessZakatDeduction(NamedTuple):
    deduction: Decimal
    excess_zakat: Decimal
    effective_deduction: Decimal  # currently always equal to deduction


def calculate_zakat_gross_income(
    gross_income: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """2.5% of gross income. Income equal to the nisab is liable."""
    zakat = (tax_year or get_current_tax_year()).zakat
    income = to_decimal(gross_income)
    if income < zakat.nisab_threshold:
        return Decimal("0")
    return round_currency(income * zakat.rate)


def calculate_zakatable_net_income(
    gross_income: Number,
    deductions: ZakatDeductions | Mapping[str, Any] | None = None,
) -> Decimal:
    """Income left after EPF, expenses and other deductions, floored at 0.

    ``deductions`` may be a ``ZakatDeductions`` or a plain mapping with any
    of the keys epf, expenses and other.
    """
    deductions = ZakatDeductions.model_validate(deductions or {})
    total_deductions = sum(
        (to_decimal(value) for value in (deductions.epf, deductions.expenses, deductions.other) if value is not None),
        Decimal("0"),
    )
    return max(Decimal("0"), to_decimal(gross_income) - total_deductions)


def calculate_zakat_net_income(
    gross_income: Number,
    deductions: ZakatDeductions | Mapping[str, Any] | None = None,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Zakat after removing EPF, expenses and other deductions from income."""
    net_income = calculate_zakatable_net_income(gross_income, deductions)
    return calculate_zakat_gross_income(net_income, tax_year)


def calculate_individual_zakat_rebate(zakat_paid: Number, tax_payable: Number) -> IndividualZakatRebate:
    """Apply zakat paid as a 100% rebate, capped at the tax payable."""
    paid = to_decimal(zakat_paid)
    tax = to_decimal(tax_payable)
    rebate = min(paid, tax)
    return IndividualZakatRebate(
        rebate=round_currency(rebate),
        net_tax=round_currency(max(Decimal("0"), tax - rebate)),
        excess_zakat=round_currency(max(Decimal("0"), paid - tax)),
    )


def calculate_business_zakat_deduction(
    zakat_paid: Number,
    aggregate_income: Number,
    tax_year: TaxYearConfig | None = None,
) -> BusinessZakatDeduction:
    """Deduct zakat paid from company income, capped at 2.5% of aggregate income."""
    zakat = (tax_year or get_current_tax_year()).zakat
    paid = to_decimal(zakat_paid)
    max_deduction = to_decimal(aggregate_income) * zakat.max_business_deduction_rate
    deduction = round_currency(min(paid, max_deduction))
    return BusinessZakatDeduction(
        deduction=deduction,
        excess_zakat=round_currency(max(Decimal("0"), paid - max_deduction)),
        effective_deduction=deduction,
    )


def get_current_nisab(tax_year: TaxYearConfig | None = None) -> Decimal:
    return (tax_year or get_current_tax_year()).zakat.nisab_threshold


def meets_nisab_threshold(income: Number, tax_year: TaxYearConfig | None = None) -> bool:
    return to_decimal(income) >= get_current_nisab(tax_year)
