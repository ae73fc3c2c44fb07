"""SOCSO (PERKESO) contributions.

Functions take MONTHLY salary, unlike the EPF functions. Rates are a flat
approximation of the PERKESO contribution table. Above the wage ceiling
contribution is optional and treated as not made.
"""

from decimal import Decimal

from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import Number, round_currency, to_decimal

SOCSO_RATES = get_current_tax_year().socso


def _contribution(monthly_salary: Number, rate: Decimal, wage_threshold: Decimal) -> Decimal:
    salary = to_decimal(monthly_salary)
    if salary <= 0 or salary > wage_threshold:
        return Decimal("0")
    return round_currency(salary * rate)


def calculate_employer_socso(
    monthly_salary: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Monthly employer contribution (1.75% up to RM6,000/month)."""
    socso = (tax_year or get_current_tax_year()).socso
    return _contribution(monthly_salary, socso.employer_rate, socso.wage_threshold)


def calculate_employee_socso(
    monthly_salary: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Monthly employee contribution (0.5% up to RM6,000/month)."""
    socso = (tax_year or get_current_tax_year()).socso
    return _contribution(monthly_salary, socso.employee_rate, socso.wage_threshold)
