"""Sdn Bhd (private limited company) scenario.

Company side::

    taxable profit = profit - salary - employer EPF - employer SOCSO - zakat deduction
    post-tax profit = taxable profit - SME corporate tax
    dividends = post-tax profit x distribution %

Owner side::

    net cash = salary - employee EPF - employee SOCSO + other income
               - personal tax + dividends - dividend surcharge
               - compliance costs - zakat paid

Employee EPF is claimed as relief (capped at the EPF/life insurance limit),
replacing whatever the caller put there. Net cash may go negative when the
salary is more than the business can carry. Company zakat is a deduction
from aggregate income capped at 2.5%, not a rebate.
"""

import logging
from decimal import Decimal

from config import load_yaml_config
from sme_tax.rules.audit import is_audit_exempt
from sme_tax.rules.corporate_tax import get_corporate_tax_bracket_breakdown
from sme_tax.rules.dividend import calculate_dividend_tax
from sme_tax.rules.epf import (
    calculate_employee_epf,
    calculate_employer_epf,
    calculate_max_affordable_salary,
)
from sme_tax.rules.personal_tax import get_personal_tax_bracket_breakdown
from sme_tax.rules.reliefs import PersonalReliefs
from sme_tax.rules.socso import calculate_employee_socso, calculate_employer_socso
from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.rules.zakat import (
    ZakatCalculationInput,
    ZakatCalculationResult,
    calculate_business_zakat_deduction,
    meets_nisab_threshold,
)
from sme_tax.scenarios.income_tax import calculate_corporate_tax, calculate_personal_tax
from sme_tax.scenarios.models import (
    SalaryAffordability,
    SdnBhdBreakdown,
    SdnBhdScenarioResult,
    TaxBracketBreakdown,
    TaxCalculationInputs,
)
from sme_tax.scenarios.validation import require_non_negative
from sme_tax.utils.rounding import round_currency

logger = logging.getLogger(__name__)

_MONTHS = 12


def _business_zakat_amount(
    election: ZakatCalculationInput,
    aggregate_income: Decimal,
    tax_year: TaxYearConfig,
) -> Decimal:
    """Company zakat: the declared amount, or the zakat rate on aggregate income.

    Aggregate income is already net of salary and contributions, so the
    gross and net income methods agree here.
    """
    if election.amount_paid is not None or not election.auto_calculate:
        return round_currency(election.amount_paid or 0)

    if election.method == "working_capital":
        logger.warning("Working capital zakat needs amount_paid; using aggregate income")
    return round_currency(aggregate_income * tax_year.zakat.rate)


def calculate_sdn_bhd_scenario(
    inputs: TaxCalculationInputs,
    tax_year: TaxYearConfig | None = None,
) -> SdnBhdScenarioResult:
    """Net cash to an owner-director paying themselves salary and dividends.

    Raises:
        ValueError: If profit, salary, other income or compliance costs are
            negative.
    """
    config = tax_year or get_current_tax_year()
    defaults = load_yaml_config("comparison.yaml")["comparison"]

    business_profit = require_non_negative("Business profit", inputs.business_profit)
    monthly_salary = require_non_negative(
        "Monthly salary",
        inputs.monthly_salary if inputs.monthly_salary is not None else defaults["default_monthly_salary"],
    )
    other_income = require_non_negative("Other income", inputs.other_income)
    compliance_costs = require_non_negative(
        "Compliance costs",
        inputs.compliance_costs if inputs.compliance_costs is not None else defaults["default_compliance_costs"],
    )
    percent = inputs.dividend_distribution_percent
    distribution_percent = min(Decimal("100"), max(Decimal("0"), percent if percent is not None else Decimal("100")))

    # --- Company side ---
    annual_salary = monthly_salary * _MONTHS
    employer_epf = calculate_employer_epf(annual_salary, config)
    employer_socso = calculate_employer_socso(monthly_salary, config) * _MONTHS
    employee_socso = calculate_employee_socso(monthly_salary, config) * _MONTHS

    taxable_before_zakat = business_profit - annual_salary - employer_epf - employer_socso
    aggregate_income = max(Decimal("0"), taxable_before_zakat)

    zakat_result: ZakatCalculationResult | None = None
    zakat_amount = Decimal("0")
    zakat_deduction = Decimal("0")
    corporate_tax_before_zakat: Decimal | None = None
    election = inputs.zakat
    zakat_enabled = election is not None and election.enabled
    if zakat_enabled:
        zakat_amount = _business_zakat_amount(election, aggregate_income, config)
        deduction = calculate_business_zakat_deduction(zakat_amount, aggregate_income, config)
        zakat_deduction = deduction.deduction
        corporate_tax_before_zakat = calculate_corporate_tax(aggregate_income, config).tax

    company_taxable_profit = max(Decimal("0"), taxable_before_zakat - zakat_deduction)
    corporate_tax = calculate_corporate_tax(company_taxable_profit, config).tax

    if zakat_enabled:
        zakat_result = ZakatCalculationResult(
            zakat_amount=zakat_amount,
            meets_nisab=meets_nisab_threshold(aggregate_income, config),
            nisab_threshold=config.zakat.nisab_threshold,
            tax_deduction=zakat_deduction,
            excess_zakat=deduction.excess_zakat,
            net_tax_impact=round_currency(corporate_tax_before_zakat - corporate_tax),
            method=election.method,
        )

    max_affordable_salary = calculate_max_affordable_salary(business_profit, config)
    total_salary_cost = annual_salary + employer_epf + employer_socso
    is_affordable = total_salary_cost <= business_profit
    shortfall = Decimal("0") if is_affordable else total_salary_cost - business_profit

    post_tax_profit = max(Decimal("0"), company_taxable_profit - corporate_tax)
    dividends = max(Decimal("0"), post_tax_profit * distribution_percent / 100)
    retained_earnings = post_tax_profit - dividends
    dividend_tax = Decimal("0")
    if inputs.apply_ya2025_dividend_surcharge and dividends > 0:
        dividend_tax = calculate_dividend_tax(dividends, config)

    # --- Owner side ---
    employee_epf = calculate_employee_epf(annual_salary, config)
    salary_after_epf = annual_salary - employee_epf - employee_socso

    relief_limits = config.personal.relief_limits
    epf_relief = min(employee_epf, relief_limits.epf_and_life_insurance)
    effective_reliefs: PersonalReliefs
    if inputs.reliefs is not None:
        effective_reliefs = {**inputs.reliefs, "epf_and_life_insurance": epf_relief}
    else:
        effective_reliefs = {
            "basic": relief_limits.basic,
            "epf_and_life_insurance": epf_relief,
            "medical": relief_limits.medical,
        }

    personal = calculate_personal_tax(annual_salary + other_income, effective_reliefs, config)
    cash_from_income = salary_after_epf + other_income - personal.tax

    total_compliance_cost = compliance_costs
    if inputs.audit_criteria is not None and not is_audit_exempt(inputs.audit_criteria, config):
        total_compliance_cost += inputs.audit_cost or Decimal("0")

    net_cash = cash_from_income + dividends - dividend_tax - total_compliance_cost - zakat_amount

    logger.debug(
        "Sdn Bhd scenario: profit=%s salary=%s corporate_tax=%s net_cash=%s",
        business_profit,
        annual_salary,
        corporate_tax,
        net_cash,
    )

    return SdnBhdScenarioResult(
        corporate_tax=round_currency(corporate_tax),
        personal_tax=round_currency(personal.tax),
        employer_epf=round_currency(employer_epf),
        employee_epf=round_currency(employee_epf),
        employer_socso=round_currency(employer_socso),
        employee_socso=round_currency(employee_socso),
        total_compliance_cost=round_currency(total_compliance_cost),
        net_cash=round_currency(net_cash),
        salary_affordability=SalaryAffordability(
            max_affordable_salary=max_affordable_salary,
            is_affordable=is_affordable,
            shortfall=round_currency(shortfall),
            company_would_be_insolvent=not is_affordable,
        ),
        breakdown=SdnBhdBreakdown(
            annual_salary=round_currency(annual_salary),
            company_taxable_profit=round_currency(company_taxable_profit),
            post_tax_profit=round_currency(post_tax_profit),
            dividends=round_currency(dividends),
            dividend_tax=round_currency(dividend_tax),
            retained_earnings=round_currency(retained_earnings),
            salary_after_epf=round_currency(salary_after_epf),
            salary_after_tax=round_currency(max(Decimal("0"), cash_from_income - other_income)),
            other_income=round_currency(other_income),
            business_profit=round_currency(business_profit),
        ),
        epf_savings=round_currency(employer_epf + employee_epf),
        corporate_tax_bracket_breakdown=[
            TaxBracketBreakdown(
                bracket_min=item.bracket_min,
                bracket_max=item.bracket_max,
                rate=item.rate,
                income_in_bracket=item.profit_in_bracket,
                tax_for_bracket=item.tax_for_bracket,
            )
            for item in get_corporate_tax_bracket_breakdown(company_taxable_profit, config)
        ],
        personal_tax_bracket_breakdown=[
            TaxBracketBreakdown(**item._asdict())
            for item in get_personal_tax_bracket_breakdown(personal.taxable_income, config)
        ],
        zakat=zakat_result,
        corporate_tax_before_zakat=corporate_tax_before_zakat,
    )
