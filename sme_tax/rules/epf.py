"""EPF (Employees Provident Fund) contributions.

Functions take ANNUAL salary; the employer rate is chosen from the monthly
equivalent (annual / 12). SOCSO functions take monthly salary instead.
"""

from decimal import Decimal

from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import Number, round_currency, to_decimal

EPF_RATES = get_current_tax_year().epf

_MONTHS = Decimal("12")


def calculate_employer_epf(
    annual_salary: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Employer share: 13% up to RM5,000/month, 12% above."""
    salary = to_decimal(annual_salary)
    if salary <= 0:
        return Decimal("0")

    epf = (tax_year or get_current_tax_year()).epf
    rate = epf.employer_rate_low if salary / _MONTHS <= epf.salary_threshold else epf.employer_rate_high
    return round_currency(salary * rate)


def calculate_employee_epf(
    annual_salary: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Employee share at the standard 11% (members may elect less)."""
    salary = to_decimal(annual_salary)
    if salary <= 0:
        return Decimal("0")

    epf = (tax_year or get_current_tax_year()).epf
    return round_currency(salary * epf.employee_rate)


def calculate_max_affordable_salary(
    business_profit: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal:
    """Largest annual salary where salary + employer EPF == business profit.

    Closed form: profit / (1 + rate). The high-salary rate is tried first;
    if that salary is still above the monthly threshold it is consistent and
    returned, otherwise the low-salary rate applies. Only valid while the
    employer rate has exactly two tiers split by one threshold.
    """
    profit = to_decimal(business_profit)
    if profit <= 0:
        return Decimal("0")

    epf = (tax_year or get_current_tax_year()).epf
    salary_at_high_rate = profit / (1 + epf.employer_rate_high)
    if salary_at_high_rate / _MONTHS > epf.salary_threshold:
        return round_currency(salary_at_high_rate)

    return round_currency(profit / (1 + epf.employer_rate_low))
